from sqlalchemy import Column, String, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
句子模型
俄语提示和英语答案，可选的音标和音频路径
"""
class Sentence(BaseModel):
    __tablename__ = "sentences"

    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=False, index=True)
    order_number = Column(Integer, nullable=False)
    prompt_ru = Column(Text, nullable=False)
    answer_en = Column(Text, nullable=False)
    transcription = Column(String(255))
    audio_path = Column(String(255))

    lesson = relationship("Lesson", back_populates="sentences")

    def to_dict(self):
        return {
            "id": self.id,
            "lesson_id": self.lesson_id,
            "order_number": self.order_number,
            "prompt_ru": self.prompt_ru,
            "answer_en": self.answer_en,
            "transcription": self.transcription,
            "audio_path": self.audio_path,
        }
