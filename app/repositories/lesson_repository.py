from typing import List
from sqlalchemy.orm import Session

from app.models.lesson import Lesson
from app.repositories.base import BaseRepository


class LessonRepository(BaseRepository[Lesson]):
    def __init__(self, db: Session):
        super().__init__(db, Lesson)

    def list_lessons(self, level_id: int) -> List[Lesson]:
        """获取级别下的所有课程（按课程编号排序）"""
        return self.db.query(Lesson).filter(
            Lesson.level_id == level_id
        ).order_by(Lesson.lesson_number).all()
