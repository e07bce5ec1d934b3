from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from app.engine.lesson_rating import MAX_STARS, rate_lesson
from app.engine.mastery import ProgressRecord

DEFAULT_SESSION_TIMEOUT = timedelta(minutes=15)


@dataclass(frozen=True)
class UserCounters:
    """用户全局答题统计"""
    total_attempts: int = 0
    total_correct: int = 0


@dataclass(frozen=True)
class LessonContent:
    """课程及其句子ID（参考数据，与用户无关）"""
    lesson_id: int
    sentence_ids: Sequence[int]


@dataclass(frozen=True)
class AccountSummary:
    """账户学习概况"""
    levels: List[Any] = field(default_factory=list)
    completed_lessons: int = 0
    total_lessons: int = 0
    study_time_hours: float = 0.0
    accuracy: float = 0.0
    earned_stars: int = 0
    total_stars: int = 0


def calculate_accuracy(counters: UserCounters) -> float:
    """正确率（百分比），没有答题记录时为0"""
    if counters.total_attempts <= 0:
        return 0.0
    return counters.total_correct / counters.total_attempts * 100


def estimate_study_time(timestamps: Iterable[datetime],
                        session_timeout: timedelta = DEFAULT_SESSION_TIMEOUT) -> timedelta:
    """
    根据进度更新时间估算学习时长

    相邻两次更新的间隔小于session_timeout时计入学习时间；
    超过的间隔视为会话中断，整段忽略（不截断计入）。
    """
    total = timedelta(0)
    previous = None
    for current in sorted(timestamps):
        if previous is not None:
            gap = current - previous
            if gap < session_timeout:
                total += gap
        previous = current
    return total


def summarize(levels: Sequence[Any],
              lessons_per_level: Mapping[int, Sequence[LessonContent]],
              user_records: Iterable[ProgressRecord],
              user_counters: UserCounters,
              session_timeout: timedelta = DEFAULT_SESSION_TIMEOUT) -> AccountSummary:
    """
    汇总用户的账户统计

    Args:
        levels: 所有级别
        lessons_per_level: 每个级别下的课程内容，按级别ID索引
        user_records: 用户全部进度记录
        user_counters: 用户全局答题统计
        session_timeout: 学习会话中断阈值

    Returns:
        AccountSummary: 账户概况
    """
    records = list(user_records)
    records_by_sentence: Dict[int, ProgressRecord] = {r.sentence_id: r for r in records}

    total_lessons = 0
    completed_lessons = 0
    earned_stars = 0
    for lessons in lessons_per_level.values():
        for lesson in lessons:
            rating = rate_lesson(lesson.sentence_ids, records_by_sentence)
            total_lessons += 1
            if rating.is_completed:
                completed_lessons += 1
            earned_stars += rating.stars

    study_time = estimate_study_time(
        (r.updated_at for r in records if r.updated_at is not None),
        session_timeout,
    )

    return AccountSummary(
        levels=list(levels),
        completed_lessons=completed_lessons,
        total_lessons=total_lessons,
        study_time_hours=study_time.total_seconds() / 3600,
        accuracy=calculate_accuracy(user_counters),
        earned_stars=earned_stars,
        total_stars=total_lessons * MAX_STARS,
    )
