import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.config.settings import Settings, get_settings
from app.utils.database import get_db
from app.utils.security import Principal
from app.services.level_service import LevelService
from app.services.lesson_service import LessonService
from app.api.dependencies import get_current_principal
from app.api.schemas.level_schemas import LevelsOverviewResponse
from app.api.schemas.lesson_schemas import LessonProgressResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/levels", response_model=LevelsOverviewResponse)
async def get_levels(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
):
    """
    获取级别列表和用户学习概况
    """
    try:
        return LevelService(db, config).get_levels_overview(principal)
    except Exception as e:
        logger.error(f"获取级别列表失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to query levels"
        )


@router.get("/levels/{level_id}/lessons", response_model=List[LessonProgressResponse])
async def get_lessons_by_level(
    level_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """
    获取级别下的课程（含完成度和星级）
    """
    try:
        return LessonService(db).get_lessons_by_level(principal, level_id)
    except Exception as e:
        logger.error(f"获取课程列表失败: 级别{level_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to query lessons"
        )
