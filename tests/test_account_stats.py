from datetime import datetime, timedelta, timezone

from app.engine.account_stats import (
    LessonContent, UserCounters, calculate_accuracy, estimate_study_time, summarize
)
from app.engine.mastery import ProgressRecord, ProgressStatus

T0 = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def _record(sentence_id, updated_at, status=ProgressStatus.MASTERED, mistakes=0):
    return ProgressRecord(user_id=1, sentence_id=sentence_id, status=status,
                          correct_streak=1, next_review_at=updated_at,
                          mistake_count=mistakes, updated_at=updated_at)


def test_accuracy_without_attempts_is_zero():
    assert calculate_accuracy(UserCounters(total_attempts=0, total_correct=0)) == 0


def test_accuracy_percentage():
    assert calculate_accuracy(UserCounters(total_attempts=8, total_correct=6)) == 75.0


def test_study_time_excludes_long_gaps():
    timestamps = [T0, T0 + timedelta(minutes=5), T0 + timedelta(minutes=25)]
    assert estimate_study_time(timestamps) == timedelta(minutes=5)


def test_study_time_gap_equal_to_timeout_is_excluded():
    timestamps = [T0, T0 + timedelta(minutes=15)]
    assert estimate_study_time(timestamps) == timedelta(0)


def test_study_time_sorts_timestamps():
    timestamps = [T0 + timedelta(minutes=10), T0, T0 + timedelta(minutes=4)]
    assert estimate_study_time(timestamps) == timedelta(minutes=10)


def test_study_time_of_empty_or_single_history():
    assert estimate_study_time([]) == timedelta(0)
    assert estimate_study_time([T0]) == timedelta(0)


def test_study_time_custom_timeout():
    timestamps = [T0, T0 + timedelta(minutes=20), T0 + timedelta(minutes=45)]
    assert estimate_study_time(timestamps, timedelta(minutes=30)) == timedelta(minutes=45)


def test_summarize():
    levels = [{"id": 1, "title": "A0"}, {"id": 2, "title": "A1"}]
    lessons_per_level = {
        1: [LessonContent(1, [10, 11]), LessonContent(2, [])],
        2: [LessonContent(3, [20, 21])],
    }
    records = [
        _record(10, T0),
        _record(11, T0 + timedelta(minutes=3), mistakes=1),
        _record(20, T0 + timedelta(minutes=6)),
        _record(21, T0 + timedelta(hours=2)),
    ]

    summary = summarize(levels, lessons_per_level, records,
                        UserCounters(total_attempts=5, total_correct=4))

    assert summary.levels == levels
    assert summary.total_lessons == 3
    assert summary.completed_lessons == 2
    # 课程1: 1/2句有错误 -> 1星; 课程3: 无错误 -> 3星; 空课程 -> 0星
    assert summary.earned_stars == 4
    assert summary.total_stars == 9
    assert summary.accuracy == 80.0
    assert summary.study_time_hours == 6 / 60


def test_summarize_new_user():
    summary = summarize([{"id": 1, "title": "A0"}], {1: [LessonContent(1, [10])]}, [], UserCounters())
    assert summary.total_lessons == 1
    assert summary.completed_lessons == 0
    assert summary.earned_stars == 0
    assert summary.total_stars == 3
    assert summary.accuracy == 0
    assert summary.study_time_hours == 0
