from typing import List, Optional, Tuple
from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.models.sentence import Sentence
from app.models.user_progress import UserProgress
from app.repositories.base import BaseRepository


class SentenceRepository(BaseRepository[Sentence]):
    """
    句子Repository类，管理句子数据的访问操作
    """

    def __init__(self, db: Session):
        """
        初始化SentenceRepository

        Args:
            db: SQLAlchemy会话对象
        """
        super().__init__(db, Sentence)

    def list_sentences(self, lesson_id: int) -> List[Sentence]:
        """
        获取课程中的所有句子

        Args:
            lesson_id: 课程ID

        Returns:
            List[Sentence]: 按顺序排列的句子列表
        """
        return self.db.query(Sentence).filter(
            Sentence.lesson_id == lesson_id
        ).order_by(Sentence.order_number).all()

    def list_sentence_ids(self, lesson_id: int) -> List[int]:
        """获取课程中所有句子的ID"""
        rows = self.db.query(Sentence.id).filter(
            Sentence.lesson_id == lesson_id
        ).order_by(Sentence.order_number).all()
        return [row.id for row in rows]

    def list_with_progress(self, user_id: int, lesson_id: int) -> List[Tuple[Sentence, Optional[UserProgress]]]:
        """
        获取课程句子及该用户的进度（左连接，未学习的句子进度为None）

        Args:
            user_id: 用户ID
            lesson_id: 课程ID

        Returns:
            List[Tuple[Sentence, Optional[UserProgress]]]: 句子和进度
        """
        return self.db.query(Sentence, UserProgress).outerjoin(
            UserProgress,
            and_(
                UserProgress.sentence_id == Sentence.id,
                UserProgress.user_id == user_id,
            )
        ).filter(
            Sentence.lesson_id == lesson_id
        ).order_by(Sentence.order_number).all()
