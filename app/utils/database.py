from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
import logging

from app.config.settings import settings

logger = logging.getLogger(__name__)

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# 创建数据库引擎
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # 在DEBUG模式下输出SQL语句
    connect_args=_connect_args,
    pool_pre_ping=True,
    pool_recycle=3600,
)

# 创建SessionLocal类
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"数据库会话错误: {e}")
        db.rollback()
        raise
    finally:
        db.close()



def check_db_connection() -> bool:
    """检查数据库连接是否正常"""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"数据库连接检查失败: {e}")
        return False
    finally:
        db.close()


def init_db():
    """初始化数据库表"""
    try:
        from app.models.base import Base
        from app.models.user import User
        from app.models.level import Level
        from app.models.lesson import Lesson
        from app.models.sentence import Sentence
        from app.models.user_progress import UserProgress

        # 创建所有表
        Base.metadata.create_all(bind=engine)
        logger.info("数据库表初始化完成")

        if settings.SEED_DEMO_DATA:
            init_demo_data()

    except Exception as e:
        logger.error(f"数据库初始化失败: {e}")
        raise


# 演示数据: 一个级别，一个课程
DEMO_LEVEL_TITLE = "A0"
DEMO_LESSON_TITLE = "Приветствия"
DEMO_SENTENCES = [
    {"prompt_ru": "Привет!", "answer_en": "Hello!", "transcription": "[həˈləʊ]"},
    {"prompt_ru": "Доброе утро!", "answer_en": "Good morning!", "transcription": "[ɡʊd ˈmɔːnɪŋ]"},
    {"prompt_ru": "Как тебя зовут?", "answer_en": "What is your name?", "transcription": None},
    {"prompt_ru": "Меня зовут Анна.", "answer_en": "My name is Anna.", "transcription": None},
    {"prompt_ru": "Спасибо!", "answer_en": "Thank you!", "transcription": "[θæŋk juː]"},
    {"prompt_ru": "До свидания!", "answer_en": "Goodbye!", "transcription": "[ɡʊdˈbaɪ]"},
]


def init_demo_data(db: Session = None):
    """
    初始化演示课程数据
    仅在级别表为空时插入，正式数据由外部导入工具加载
    """
    from app.models.level import Level
    from app.models.lesson import Lesson
    from app.models.sentence import Sentence

    own_session = db is None
    db = db or SessionLocal()

    try:
        if db.query(Level).count() > 0:
            logger.debug("级别表已有数据，跳过演示数据初始化")
            return

        level = Level(title=DEMO_LEVEL_TITLE)
        db.add(level)
        db.flush()

        lesson = Lesson(level_id=level.id, lesson_number=1, title=DEMO_LESSON_TITLE)
        db.add(lesson)
        db.flush()

        db.add_all([
            Sentence(lesson_id=lesson.id, order_number=i, **data)
            for i, data in enumerate(DEMO_SENTENCES, start=1)
        ])
        db.commit()
        logger.info(f"演示数据初始化完成，新增{len(DEMO_SENTENCES)}个句子")

    except Exception as e:
        db.rollback()
        logger.error(f"初始化演示数据失败: {e}")
        raise
    finally:
        if own_session:
            db.close()
