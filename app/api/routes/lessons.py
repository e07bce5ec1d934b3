import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.utils.database import get_db
from app.utils.security import Principal
from app.services.lesson_service import LessonService
from app.api.dependencies import get_current_principal
from app.api.schemas.lesson_schemas import SentenceResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/lessons/{lesson_id}/sentences", response_model=List[SentenceResponse])
async def get_sentences_by_lesson(
    lesson_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """
    获取课程句子及用户进度
    """
    try:
        return LessonService(db).get_sentences_by_lesson(principal, lesson_id)
    except Exception as e:
        logger.error(f"获取课程句子失败: 课程{lesson_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to query sentences"
        )
