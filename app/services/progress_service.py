import logging
from datetime import datetime
from typing import Callable, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import Settings
from app.engine.mastery import MasteryStateMachine, ProgressRecord
from app.models.base import utc_now
from app.repositories.progress_repository import ProgressRepository
from app.repositories.sentence_repository import SentenceRepository
from app.repositories.user_repository import UserRepository
from app.utils.security import Principal

logger = logging.getLogger(__name__)


class SentenceNotFoundError(Exception):
    """句子不存在"""


class ProgressSaveError(Exception):
    """句子进度保存失败"""


class ProgressService:
    """答题记录服务：推进句子掌握状态并更新用户答题统计"""

    def __init__(self, db: Session, config: Settings,
                 clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.progress_repo = ProgressRepository(db)
        self.sentence_repo = SentenceRepository(db)
        self.user_repo = UserRepository(db)
        self.state_machine = MasteryStateMachine.from_settings(config)
        self.clock = clock or utc_now

    def save_progress(self, principal: Principal, sentence_id: int, correct: bool) -> ProgressRecord:
        """
        记录一次答题

        1. 读取当前进度（无记录视为未学习）
        2. 通过状态机计算新进度
        3. 原子upsert进度记录
        4. 递增用户答题统计（失败只记日志，不影响结果）

        Args:
            principal: 当前用户
            sentence_id: 句子ID
            correct: 是否答对

        Returns:
            ProgressRecord: 保存后的进度记录

        Raises:
            SentenceNotFoundError: 句子不存在
            ProgressSaveError: 进度保存失败，用户统计不会被修改
        """
        user_id = principal.user_id

        try:
            if self.sentence_repo.get_by_id(sentence_id) is None:
                raise SentenceNotFoundError(f"Sentence {sentence_id} not found")

            current = self.progress_repo.get_progress(user_id, sentence_id) \
                or ProgressRecord.unseen(user_id, sentence_id)
            now = self.clock()
            next_record = self.state_machine.advance(current, correct, now)

            self.progress_repo.upsert_progress(
                user_id,
                sentence_id,
                status=next_record.status,
                streak=next_record.correct_streak,
                next_review_at=next_record.next_review_at,
                mistake_delta=next_record.mistake_count - current.mistake_count,
                updated_at=now,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"保存句子进度失败: 用户{user_id}, 句子{sentence_id}: {e}")
            raise ProgressSaveError("Failed to save sentence progress") from e

        self._increment_counters(user_id, sentence_id, correct)

        logger.info(f"句子进度已保存: 用户{user_id}, 句子{sentence_id}, "
                    f"状态{next_record.status.value}, 连续答对{next_record.correct_streak}")

        try:
            saved = self.progress_repo.get_progress(user_id, sentence_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"重新读取句子进度失败，返回计算结果: {e}")
            saved = None
        return saved or next_record

    def _increment_counters(self, user_id: int, sentence_id: int, correct: bool):
        """递增用户统计；失败时只记录不一致，不向调用方报错"""
        try:
            updated = self.user_repo.increment_counters(
                user_id, attempts_delta=1, correct_delta=1 if correct else 0
            )
            if not updated:
                logger.error(f"更新用户统计失败: 用户{user_id}不存在 (句子{sentence_id}进度已保存)")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"更新用户统计失败: 用户{user_id}, 句子{sentence_id} (进度已保存，正确率统计可能偏低): {e}")
