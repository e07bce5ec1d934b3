from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
级别模型
课程的分组(A0, A1, A2...)，只读参考数据。
"""
class Level(BaseModel):
    __tablename__ = "levels"

    title = Column(String(50), unique=True, nullable=False)

    lessons = relationship("Lesson", back_populates="level", order_by="Lesson.lesson_number")

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
        }
