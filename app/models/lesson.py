from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
课程模型
属于某个级别，包含按顺序排列的句子，只读参考数据。
"""
class Lesson(BaseModel):
    __tablename__ = "lessons"
    __table_args__ = (
        UniqueConstraint("level_id", "lesson_number", name="uq_lessons_level_number"),
    )

    level_id = Column(Integer, ForeignKey("levels.id"), nullable=False, index=True)
    lesson_number = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)

    level = relationship("Level", back_populates="lessons")
    sentences = relationship("Sentence", back_populates="lesson", order_by="Sentence.order_number")

    def to_dict(self):
        return {
            "id": self.id,
            "level_id": self.level_id,
            "lesson_number": self.lesson_number,
            "title": self.title,
        }
