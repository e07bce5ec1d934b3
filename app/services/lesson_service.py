import logging
from typing import List, Dict, Any
from sqlalchemy.orm import Session

from app.engine.lesson_rating import rate_lesson
from app.repositories.lesson_repository import LessonRepository
from app.repositories.progress_repository import ProgressRepository
from app.repositories.sentence_repository import SentenceRepository
from app.utils.security import Principal

logger = logging.getLogger(__name__)


class LessonService:
    """课程服务，负责课程列表（带完成度和星级）和课程句子的获取"""

    def __init__(self, db: Session):
        self.db = db
        self.lesson_repo = LessonRepository(db)
        self.sentence_repo = SentenceRepository(db)
        self.progress_repo = ProgressRepository(db)

    def get_lessons_by_level(self, principal: Principal, level_id: int) -> List[Dict[str, Any]]:
        """
        获取级别下的课程及用户完成情况

        级别不存在时返回空列表
        """
        lessons = []
        for lesson in self.lesson_repo.list_lessons(level_id):
            records = {
                record.sentence_id: record
                for record in self.progress_repo.list_progress_for_lesson(principal.user_id, lesson.id)
            }
            rating = rate_lesson(self.sentence_repo.list_sentence_ids(lesson.id), records)

            lessons.append({
                **lesson.to_dict(),
                "total_sentences": rating.total,
                "completed_sentences": rating.completed,
                "sentences_with_errors": rating.sentences_with_errors,
                "is_completed": rating.is_completed,
                "stars": rating.stars,
            })
        return lessons

    def get_sentences_by_lesson(self, principal: Principal, lesson_id: int) -> List[Dict[str, Any]]:
        """
        获取课程句子及用户进度

        未学习的句子进度字段为None；课程不存在时返回空列表
        """
        sentences = []
        for sentence, progress in self.sentence_repo.list_with_progress(principal.user_id, lesson_id):
            sentences.append({
                **sentence.to_dict(),
                "status": progress.status if progress else None,
                "correct_streak": progress.correct_streak if progress else None,
                "mistake_count": progress.mistake_count if progress else None,
            })
        return sentences
