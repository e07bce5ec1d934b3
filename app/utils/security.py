import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.config.settings import Settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenExpiredError(Exception):
    """令牌已过期"""


class InvalidTokenError(Exception):
    """令牌无效"""


@dataclass(frozen=True)
class Principal:
    """已认证的用户身份，显式传入每个业务操作"""
    user_id: int


def hash_password(password: str) -> str:
    """bcrypt哈希密码"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """校验密码，哈希格式异常时视为不匹配"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        logger.warning(f"密码哈希校验失败: {e}")
        return False


def create_access_token(user_id: int, config: Settings,
                        expires_delta: Optional[timedelta] = None) -> str:
    """签发访问令牌"""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=config.ACCESS_TOKEN_EXPIRE_HOURS))
    to_encode = {"user_id": user_id, "exp": expire}
    return jwt.encode(to_encode, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str, config: Settings) -> Principal:
    """
    校验访问令牌并返回用户身份

    Raises:
        TokenExpiredError: 令牌过期
        InvalidTokenError: 签名错误、格式错误或缺少user_id
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired") from e
    except JWTError as e:
        raise InvalidTokenError("Invalid token") from e

    user_id = payload.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise InvalidTokenError("Invalid token")
    return Principal(user_id=user_id)
