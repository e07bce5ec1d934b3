import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.config.settings import Settings, get_settings
from app.models.base import Base
from app.models.user import User
from app.models.level import Level
from app.models.lesson import Lesson
from app.models.sentence import Sentence
from app.models.user_progress import UserProgress
from app.utils.database import get_db
from app.utils.security import create_access_token, hash_password, Principal

# 测试数据库（内存SQLite，所有连接共享同一个库）
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "correct-horse"


@pytest.fixture(scope="function")
def db_session():
    """创建测试数据库会话"""
    # 创建表
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # 清理表
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_settings():
    """测试配置"""
    return Settings(
        JWT_SECRET_KEY="test-secret-key-for-jwt-signing-000",
        SEED_DEMO_DATA=False,
        HUGGINGFACE_TOKEN="",
        LLM_USE_MOCK=False,
        MASTERY_POLICY="single_correct",
    )


@pytest.fixture(scope="function")
def client(db_session, test_settings):
    """创建测试客户端"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def user(db_session):
    """已注册的测试用户"""
    user = User(email="learner@example.com", password_hash=hash_password(TEST_PASSWORD),
                total_attempts=0, total_correct=0)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def principal(user):
    return Principal(user_id=user.id)


@pytest.fixture
def auth_headers(user, test_settings):
    token = create_access_token(user.id, test_settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def course(db_session):
    """
    测试课程数据:
    A0: 课程1(3个句子), 课程2(无句子)
    A1: 课程1(2个句子)
    """
    a0 = Level(title="A0")
    a1 = Level(title="A1")
    db_session.add_all([a0, a1])
    db_session.flush()

    a0_lesson1 = Lesson(level_id=a0.id, lesson_number=1, title="Greetings")
    a0_lesson2 = Lesson(level_id=a0.id, lesson_number=2, title="Empty")
    a1_lesson1 = Lesson(level_id=a1.id, lesson_number=1, title="Travel")
    db_session.add_all([a0_lesson1, a0_lesson2, a1_lesson1])
    db_session.flush()

    a0_sentences = [
        Sentence(lesson_id=a0_lesson1.id, order_number=1, prompt_ru="Привет!", answer_en="Hello!",
                 transcription="[həˈləʊ]", audio_path="audio/a0_1_1.mp3"),
        Sentence(lesson_id=a0_lesson1.id, order_number=2, prompt_ru="Спасибо!", answer_en="Thank you!"),
        Sentence(lesson_id=a0_lesson1.id, order_number=3, prompt_ru="Пока!", answer_en="Bye!"),
    ]
    a1_sentences = [
        Sentence(lesson_id=a1_lesson1.id, order_number=1, prompt_ru="Где вокзал?", answer_en="Where is the station?"),
        Sentence(lesson_id=a1_lesson1.id, order_number=2, prompt_ru="Один билет.", answer_en="One ticket."),
    ]
    db_session.add_all(a0_sentences + a1_sentences)
    db_session.commit()

    return {
        "a0_id": a0.id,
        "a1_id": a1.id,
        "lesson_id": a0_lesson1.id,
        "empty_lesson_id": a0_lesson2.id,
        "a1_lesson_id": a1_lesson1.id,
        "sentence_ids": [s.id for s in a0_sentences],
        "a1_sentence_ids": [s.id for s in a1_sentences],
    }
