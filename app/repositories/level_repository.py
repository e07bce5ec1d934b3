from typing import List
from sqlalchemy.orm import Session

from app.models.level import Level
from app.repositories.base import BaseRepository


class LevelRepository(BaseRepository[Level]):
    def __init__(self, db: Session):
        super().__init__(db, Level)

    def list_levels(self) -> List[Level]:
        """获取所有级别（按标题排序）"""
        return self.db.query(Level).order_by(Level.title).all()
