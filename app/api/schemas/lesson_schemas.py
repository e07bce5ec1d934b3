from pydantic import BaseModel
from typing import Optional


class LessonProgressResponse(BaseModel):
    id: int
    level_id: int
    lesson_number: int
    title: str
    total_sentences: int
    completed_sentences: int
    sentences_with_errors: int
    is_completed: bool
    stars: int


class SentenceResponse(BaseModel):
    id: int
    lesson_id: int
    order_number: int
    prompt_ru: str
    answer_en: str
    transcription: Optional[str] = None
    audio_path: Optional[str] = None

    # 用户未学习该句子时为None
    status: Optional[str] = None
    correct_streak: Optional[int] = None
    mistake_count: Optional[int] = None
