from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, UniqueConstraint

from app.engine.mastery import ProgressRecord, ProgressStatus
from .base import BaseModel, utc_now


"""
句子进度模型
每个(用户, 句子)最多一条记录: 状态(learning/mastered)、连续答对次数、
下次复习时间、累计错误次数、最后更新时间。
首次答题时创建，之后只做upsert，从不删除。
"""


class UserProgress(BaseModel):
    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "sentence_id", name="uq_user_progress_user_sentence"),
    )

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    sentence_id = Column(Integer, ForeignKey("sentences.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    correct_streak = Column(Integer, nullable=False, default=0)
    next_review_date = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    mistake_count = Column(Integer, nullable=False, default=0)

    def to_record(self) -> ProgressRecord:
        """转换为掌握度状态机使用的纯数据记录"""
        return ProgressRecord(
            user_id=self.user_id,
            sentence_id=self.sentence_id,
            status=ProgressStatus(self.status),
            correct_streak=self.correct_streak or 0,
            next_review_at=self.next_review_date,
            mistake_count=self.mistake_count or 0,
            updated_at=self.updated_at,
        )
