import logging
from typing import Optional
from fastapi import Depends, Header, HTTPException, status

from app.config.settings import Settings, get_settings
from app.utils.llm_client import LLMClient, LLMConfigError, create_llm_client
from app.utils.security import (
    InvalidTokenError, Principal, TokenExpiredError, decode_access_token
)

logger = logging.getLogger(__name__)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(
    authorization: Optional[str] = Header(None),
    config: Settings = Depends(get_settings),
) -> Principal:
    """
    从 Authorization: Bearer <token> 头中解析当前用户
    """
    if not authorization:
        raise _unauthorized("Authorization header required")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise _unauthorized("Invalid Authorization header format")

    try:
        return decode_access_token(parts[1], config)
    except TokenExpiredError:
        raise _unauthorized("Token has expired")
    except InvalidTokenError:
        raise _unauthorized("Invalid token")


def get_llm_client(config: Settings = Depends(get_settings)) -> LLMClient:
    """创建大模型客户端，缺少配置时返回500"""
    try:
        return create_llm_client(config)
    except LLMConfigError as e:
        logger.error(f"大模型配置错误: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="AI config error"
        )
