from enum import Enum
from typing import Optional
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
import logging

logger = logging.getLogger(__name__)


class ProgressStatus(Enum):
    """句子掌握状态枚举"""
    UNSEEN = "unseen"        # 未学习（数据库中无记录）
    LEARNING = "learning"    # 学习中
    MASTERED = "mastered"    # 已掌握


class MasteryPolicy(Enum):
    """掌握度判定策略"""
    SINGLE_CORRECT = "single_correct"   # 答对一次即掌握
    STREAK = "streak"                   # 连续答对N次才掌握


@dataclass(frozen=True)
class ProgressRecord:
    """单个(用户, 句子)的进度记录"""
    user_id: int
    sentence_id: int
    status: ProgressStatus
    correct_streak: int = 0
    next_review_at: Optional[datetime] = None
    mistake_count: int = 0
    updated_at: Optional[datetime] = None

    @classmethod
    def unseen(cls, user_id: int, sentence_id: int) -> "ProgressRecord":
        """没有存储记录时的初始状态"""
        return cls(user_id=user_id, sentence_id=sentence_id, status=ProgressStatus.UNSEEN)

    @property
    def is_mastered(self) -> bool:
        return self.status == ProgressStatus.MASTERED

    @property
    def has_mistakes(self) -> bool:
        return self.mistake_count > 0


class MasteryStateMachine:
    """掌握度状态机，根据答题结果计算句子进度的下一个状态

    纯计算，不做任何持久化。未学习的句子用 ProgressRecord.unseen() 表示。
    """

    def __init__(self, policy: MasteryPolicy = MasteryPolicy.SINGLE_CORRECT,
                 streak_target: int = 3,
                 review_horizon: timedelta = timedelta(days=100 * 365)):
        if streak_target < 1:
            raise ValueError("streak_target必须大于等于1")
        self.policy = policy
        self.streak_target = streak_target
        self.review_horizon = review_horizon

        logger.debug(f"掌握度状态机初始化完成, 策略: {policy.value}")

    @classmethod
    def from_settings(cls, config) -> "MasteryStateMachine":
        """根据应用配置创建状态机"""
        return cls(
            policy=MasteryPolicy(config.MASTERY_POLICY),
            streak_target=config.MASTERY_STREAK_TARGET,
            review_horizon=timedelta(days=config.MASTERED_REVIEW_HORIZON_DAYS),
        )

    def advance(self, current: ProgressRecord, correct: bool, now: datetime) -> ProgressRecord:
        """
        根据一次答题结果推进进度记录

        Args:
            current: 当前进度记录（未学习时为 ProgressRecord.unseen）
            correct: 是否答对
            now: 当前时间

        Returns:
            ProgressRecord: 新的进度记录
        """
        if not correct:
            # 答错: 回到学习中，立即可复习，错误次数+1
            return replace(
                current,
                status=ProgressStatus.LEARNING,
                correct_streak=0,
                next_review_at=now,
                mistake_count=current.mistake_count + 1,
                updated_at=now,
            )

        if self.policy == MasteryPolicy.SINGLE_CORRECT:
            return self._master(current, streak=1, now=now)

        streak = current.correct_streak + 1
        if current.is_mastered or streak >= self.streak_target:
            return self._master(current, streak=streak, now=now)

        return replace(
            current,
            status=ProgressStatus.LEARNING,
            correct_streak=streak,
            next_review_at=now,
            updated_at=now,
        )

    def _master(self, current: ProgressRecord, streak: int, now: datetime) -> ProgressRecord:
        # 已掌握的句子推到很远的将来，不再进入复习
        return replace(
            current,
            status=ProgressStatus.MASTERED,
            correct_streak=streak,
            next_review_at=now + self.review_horizon,
            updated_at=now,
        )
