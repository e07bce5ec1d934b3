from typing import Optional
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.engine.account_stats import UserCounters
from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """根据邮箱获取用户"""
        return self.get_first_by(email=email)

    def increment_counters(self, user_id: int, attempts_delta: int, correct_delta: int) -> bool:
        """
        原子递增用户答题统计

        Returns:
            bool: 是否找到并更新了用户
        """
        result = self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                total_attempts=User.total_attempts + attempts_delta,
                total_correct=User.total_correct + correct_delta,
            )
        )
        self.db.commit()
        return result.rowcount > 0

    def get_counters(self, user_id: int) -> UserCounters:
        """获取用户答题统计，用户不存在时返回0"""
        row = self.db.query(User.total_attempts, User.total_correct).filter(User.id == user_id).first()
        if row is None:
            return UserCounters()
        return UserCounters(total_attempts=row.total_attempts or 0, total_correct=row.total_correct or 0)
