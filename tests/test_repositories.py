import threading
import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.engine.mastery import ProgressStatus
from app.models.base import Base
from app.repositories.lesson_repository import LessonRepository
from app.repositories.level_repository import LevelRepository
from app.repositories.progress_repository import ProgressRepository
from app.repositories.sentence_repository import SentenceRepository
from app.repositories.user_repository import UserRepository

T0 = datetime(2025, 3, 1, 9, 0)


def test_upsert_inserts_then_updates(db_session, user, course):
    repo = ProgressRepository(db_session)
    sentence_id = course["sentence_ids"][0]

    assert repo.get_progress(user.id, sentence_id) is None

    repo.upsert_progress(user.id, sentence_id, status=ProgressStatus.LEARNING, streak=0,
                         next_review_at=T0, mistake_delta=1, updated_at=T0)
    record = repo.get_progress(user.id, sentence_id)
    assert record.status == ProgressStatus.LEARNING
    assert record.mistake_count == 1
    assert record.updated_at == T0

    later = T0 + timedelta(minutes=2)
    repo.upsert_progress(user.id, sentence_id, status=ProgressStatus.MASTERED, streak=1,
                         next_review_at=later + timedelta(days=36500), mistake_delta=0, updated_at=later)
    record = repo.get_progress(user.id, sentence_id)
    assert record.status == ProgressStatus.MASTERED
    assert record.correct_streak == 1
    assert record.mistake_count == 1
    assert record.updated_at == later
    assert repo.count() == 1


def test_upsert_adds_mistake_delta(db_session, user, course):
    repo = ProgressRepository(db_session)
    sentence_id = course["sentence_ids"][0]
    for i in range(3):
        repo.upsert_progress(user.id, sentence_id, status=ProgressStatus.LEARNING, streak=0,
                             next_review_at=T0, mistake_delta=1, updated_at=T0 + timedelta(seconds=i))
    assert repo.get_progress(user.id, sentence_id).mistake_count == 3


def test_list_progress_for_user_is_ordered(db_session, user, course):
    repo = ProgressRepository(db_session)
    first, second, third = course["sentence_ids"]
    repo.upsert_progress(user.id, third, ProgressStatus.MASTERED, 1, T0, 0, updated_at=T0 + timedelta(minutes=9))
    repo.upsert_progress(user.id, first, ProgressStatus.MASTERED, 1, T0, 0, updated_at=T0)
    repo.upsert_progress(user.id, second, ProgressStatus.LEARNING, 0, T0, 1, updated_at=T0 + timedelta(minutes=4))

    records = repo.list_progress_for_user(user.id)
    assert [r.sentence_id for r in records] == [first, second, third]


def test_list_progress_for_lesson(db_session, user, course):
    repo = ProgressRepository(db_session)
    repo.upsert_progress(user.id, course["sentence_ids"][0], ProgressStatus.MASTERED, 1, T0, 0, updated_at=T0)
    repo.upsert_progress(user.id, course["a1_sentence_ids"][0], ProgressStatus.MASTERED, 1, T0, 0, updated_at=T0)

    records = repo.list_progress_for_lesson(user.id, course["lesson_id"])
    assert [r.sentence_id for r in records] == [course["sentence_ids"][0]]


def test_increment_counters(db_session, user):
    repo = UserRepository(db_session)
    assert repo.increment_counters(user.id, attempts_delta=1, correct_delta=1) is True
    assert repo.increment_counters(user.id, attempts_delta=1, correct_delta=0) is True

    counters = repo.get_counters(user.id)
    assert counters.total_attempts == 2
    assert counters.total_correct == 1


def test_increment_counters_unknown_user(db_session):
    repo = UserRepository(db_session)
    assert repo.increment_counters(999, attempts_delta=1, correct_delta=1) is False
    assert repo.get_counters(999).total_attempts == 0


def test_reference_data_ordering(db_session, course):
    levels = LevelRepository(db_session).list_levels()
    assert [level.title for level in levels] == ["A0", "A1"]

    lessons = LessonRepository(db_session).list_lessons(course["a0_id"])
    assert [lesson.lesson_number for lesson in lessons] == [1, 2]
    assert LessonRepository(db_session).list_lessons(12345) == []

    sentences = SentenceRepository(db_session).list_sentences(course["lesson_id"])
    assert [s.order_number for s in sentences] == [1, 2, 3]
    assert SentenceRepository(db_session).list_sentence_ids(course["empty_lesson_id"]) == []


def test_list_with_progress_is_left_join(db_session, user, course):
    ProgressRepository(db_session).upsert_progress(
        user.id, course["sentence_ids"][1], ProgressStatus.LEARNING, 0, T0, 1, updated_at=T0
    )

    rows = SentenceRepository(db_session).list_with_progress(user.id, course["lesson_id"])
    assert len(rows) == 3
    assert rows[0][1] is None
    assert rows[1][1].status == "learning"
    assert rows[2][1] is None


def test_list_with_progress_ignores_other_users(db_session, user, course):
    ProgressRepository(db_session).upsert_progress(
        user.id, course["sentence_ids"][0], ProgressStatus.MASTERED, 1, T0, 0, updated_at=T0
    )
    rows = SentenceRepository(db_session).list_with_progress(user.id + 1, course["lesson_id"])
    assert all(progress is None for _, progress in rows)


def test_demo_data_is_seeded_once(db_session):
    from app.utils.database import DEMO_SENTENCES, init_demo_data

    init_demo_data(db_session)
    init_demo_data(db_session)

    levels = LevelRepository(db_session).list_levels()
    assert [level.title for level in levels] == ["A0"]
    lessons = LessonRepository(db_session).list_lessons(levels[0].id)
    assert len(lessons) == 1
    sentences = SentenceRepository(db_session).list_sentences(lessons[0].id)
    assert [s.answer_en for s in sentences] == [d["answer_en"] for d in DEMO_SENTENCES]


def test_upsert_rejects_unsupported_dialect():
    from unittest.mock import MagicMock

    session = MagicMock()
    session.get_bind.return_value.dialect.name = "mysql"

    with pytest.raises(ValueError, match="mysql"):
        ProgressRepository(session).upsert_progress(1, 1, ProgressStatus.LEARNING, 0, T0, 1, updated_at=T0)
    session.execute.assert_not_called()


def test_concurrent_upserts_keep_one_row(tmp_path):
    """多个会话并发upsert同一(用户, 句子)，只保留一条记录且错误次数为所有增量之和"""
    file_engine = create_engine(
        f"sqlite:///{tmp_path / 'progress.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=file_engine)
    FileSession = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)

    workers, rounds = 4, 10
    errors = []
    barrier = threading.Barrier(workers)

    def worker(index):
        session = FileSession()
        try:
            repo = ProgressRepository(session)
            barrier.wait()
            for i in range(rounds):
                repo.upsert_progress(1, 1, ProgressStatus.LEARNING, 0, T0, 1,
                                     updated_at=T0 + timedelta(seconds=index * rounds + i))
        except Exception as e:
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    session = FileSession()
    try:
        repo = ProgressRepository(session)
        assert errors == []
        assert repo.count() == 1
        assert repo.get_progress(1, 1).mistake_count == workers * rounds
    finally:
        session.close()
        file_engine.dispose()
