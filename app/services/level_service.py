import logging
from datetime import timedelta
from sqlalchemy.orm import Session

from app.config.settings import Settings
from app.engine.account_stats import AccountSummary, LessonContent, summarize
from app.repositories.lesson_repository import LessonRepository
from app.repositories.level_repository import LevelRepository
from app.repositories.progress_repository import ProgressRepository
from app.repositories.sentence_repository import SentenceRepository
from app.repositories.user_repository import UserRepository
from app.utils.security import Principal

logger = logging.getLogger(__name__)


class LevelService:
    """级别服务，汇总用户在所有级别上的学习概况"""

    def __init__(self, db: Session, config: Settings):
        self.db = db
        self.level_repo = LevelRepository(db)
        self.lesson_repo = LessonRepository(db)
        self.sentence_repo = SentenceRepository(db)
        self.progress_repo = ProgressRepository(db)
        self.user_repo = UserRepository(db)
        self.session_timeout = timedelta(minutes=config.STUDY_SESSION_TIMEOUT_MINUTES)

    def get_levels_overview(self, principal: Principal) -> AccountSummary:
        """获取级别列表和账户统计（完成课程数、学习时长、正确率、星级）"""
        levels = self.level_repo.list_levels()

        lessons_per_level = {}
        for level in levels:
            lessons_per_level[level.id] = [
                LessonContent(lesson_id=lesson.id,
                              sentence_ids=self.sentence_repo.list_sentence_ids(lesson.id))
                for lesson in self.lesson_repo.list_lessons(level.id)
            ]

        summary = summarize(
            levels=[level.to_dict() for level in levels],
            lessons_per_level=lessons_per_level,
            user_records=self.progress_repo.list_progress_for_user(principal.user_id),
            user_counters=self.user_repo.get_counters(principal.user_id),
            session_timeout=self.session_timeout,
        )
        logger.debug(f"用户 {principal.user_id} 学习概况: 完成课程 {summary.completed_lessons}/{summary.total_lessons}")
        return summary
