#!/usr/bin/env python3
"""
用户服务模块
处理用户注册、登录和访问令牌签发
"""

import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config.settings import Settings
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class EmailAlreadyExistsError(Exception):
    """邮箱已被注册"""


class InvalidCredentialsError(Exception):
    """邮箱或密码错误"""


class UserService:
    def __init__(self, db: Session, config: Settings):
        self.db = db
        self.config = config
        self.user_repo = UserRepository(db)

    def register_user(self, email: str, password: str) -> User:
        """
        注册新用户

        Raises:
            EmailAlreadyExistsError: 邮箱已存在
        """
        email = email.strip().lower()
        if self.user_repo.get_by_email(email):
            logger.info(f"注册失败，邮箱已存在: {email}")
            raise EmailAlreadyExistsError("Email already exists")

        try:
            user = self.user_repo.create(
                email=email,
                password_hash=hash_password(password),
                total_attempts=0,
                total_correct=0,
            )
        except IntegrityError as e:
            # 并发注册同一邮箱时由唯一约束兜底
            self.db.rollback()
            logger.info(f"注册失败，邮箱唯一约束冲突: {email}")
            raise EmailAlreadyExistsError("Email already exists") from e

        logger.info(f"新用户注册成功: {user.id}")
        return user

    def login(self, email: str, password: str) -> str:
        """
        校验邮箱密码并签发访问令牌

        Raises:
            InvalidCredentialsError: 邮箱不存在或密码错误
        """
        user = self.user_repo.get_by_email(email.strip().lower())
        if not user or not verify_password(password, user.password_hash):
            logger.info("登录失败: 邮箱或密码错误")
            raise InvalidCredentialsError("Invalid email or password")

        logger.info(f"用户登录成功: {user.id}")
        return create_access_token(user.id, self.config)
