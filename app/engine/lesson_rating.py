from dataclasses import dataclass
from typing import Iterable, Mapping

from app.engine.mastery import ProgressRecord

# 错误句子占比低于该阈值（严格小于）时得2星
TWO_STAR_ERROR_RATIO = 0.05
MAX_STARS = 3


@dataclass(frozen=True)
class LessonRating:
    """单个课程的完成度和星级"""
    total: int
    completed: int
    sentences_with_errors: int
    stars: int

    @property
    def is_completed(self) -> bool:
        return self.total > 0 and self.completed == self.total


def stars_for(total: int, completed: int, errors: int) -> int:
    """
    计算课程星级

    未完成为0星；完成时无错误3星，错误占比 < 5% 为2星，否则1星。
    """
    if total <= 0 or completed != total:
        return 0
    if errors == 0:
        return MAX_STARS
    if errors / total < TWO_STAR_ERROR_RATIO:
        return 2
    return 1


def rate_lesson(sentence_ids: Iterable[int], records: Mapping[int, ProgressRecord]) -> LessonRating:
    """
    统计课程完成度和星级

    Args:
        sentence_ids: 课程中所有句子的ID
        records: 该用户的进度记录，按句子ID索引（可以包含其他课程的记录）

    Returns:
        LessonRating: 课程统计结果
    """
    total = 0
    completed = 0
    errors = 0

    for sentence_id in set(sentence_ids):
        total += 1
        record = records.get(sentence_id)
        if record is None:
            continue
        if record.is_mastered:
            completed += 1
        if record.has_mistakes:
            errors += 1

    return LessonRating(
        total=total,
        completed=completed,
        sentences_with_errors=errors,
        stars=stars_for(total, completed, errors),
    )
