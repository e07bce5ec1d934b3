from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SaveProgressRequest(BaseModel):
    sentence_id: int
    is_correct: bool


class ProgressResponse(BaseModel):
    sentence_id: int
    status: str
    correct_streak: int
    mistake_count: int
    next_review_at: Optional[datetime] = None


class SaveProgressResponse(BaseModel):
    message: str
    progress: ProgressResponse
