from datetime import datetime
from typing import List, Optional
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.engine.mastery import ProgressRecord, ProgressStatus
from app.models.base import utc_now
from app.models.sentence import Sentence
from app.models.user_progress import UserProgress
from app.repositories.base import BaseRepository

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ProgressRepository(BaseRepository[UserProgress]):
    """句子进度Repository，所有进度写入都通过upsert_progress完成"""

    def __init__(self, db: Session):
        super().__init__(db, UserProgress)

    def get_progress(self, user_id: int, sentence_id: int) -> Optional[ProgressRecord]:
        """获取用户某个句子的进度，不存在时返回None"""
        row = self.db.query(UserProgress).filter(
            UserProgress.user_id == user_id,
            UserProgress.sentence_id == sentence_id
        ).first()
        return row.to_record() if row else None

    def upsert_progress(self, user_id: int, sentence_id: int, status: ProgressStatus,
                        streak: int, next_review_at: datetime, mistake_delta: int,
                        updated_at: Optional[datetime] = None) -> None:
        """
        原子插入或更新进度记录

        依赖(user_id, sentence_id)唯一约束做 INSERT ... ON CONFLICT DO UPDATE，
        mistake_delta累加到已存储的错误次数上，而不是覆盖。
        """
        dialect = self.db.get_bind().dialect.name
        insert = _DIALECT_INSERTS.get(dialect)
        if insert is None:
            raise ValueError(f"不支持的数据库方言: {dialect}")

        updated_at = updated_at or utc_now()
        stmt = insert(UserProgress).values(
            user_id=user_id,
            sentence_id=sentence_id,
            status=status.value,
            correct_streak=streak,
            next_review_date=next_review_at,
            mistake_count=mistake_delta,
            created_at=updated_at,
            updated_at=updated_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "sentence_id"],
            set_={
                "status": stmt.excluded.status,
                "correct_streak": stmt.excluded.correct_streak,
                "next_review_date": stmt.excluded.next_review_date,
                "mistake_count": UserProgress.mistake_count + stmt.excluded.mistake_count,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self.db.execute(stmt)
        self.db.commit()

    def list_progress_for_user(self, user_id: int) -> List[ProgressRecord]:
        """获取用户全部进度记录（按更新时间升序）"""
        rows = self.db.query(UserProgress).filter(
            UserProgress.user_id == user_id
        ).order_by(UserProgress.updated_at.asc(), UserProgress.id.asc()).all()
        return [row.to_record() for row in rows]

    def list_progress_for_lesson(self, user_id: int, lesson_id: int) -> List[ProgressRecord]:
        """获取用户在某个课程中的进度记录"""
        rows = self.db.query(UserProgress).join(
            Sentence, Sentence.id == UserProgress.sentence_id
        ).filter(
            UserProgress.user_id == user_id,
            Sentence.lesson_id == lesson_id
        ).all()
        return [row.to_record() for row in rows]
