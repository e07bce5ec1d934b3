import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.config.settings import Settings, get_settings
from app.utils.database import get_db
from app.utils.security import Principal
from app.services.progress_service import (
    ProgressSaveError, ProgressService, SentenceNotFoundError
)
from app.api.dependencies import get_current_principal
from app.api.schemas.progress_schemas import SaveProgressRequest, SaveProgressResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/progress/save", response_model=SaveProgressResponse)
async def save_progress(
    request: SaveProgressRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
):
    """
    保存一次答题结果
    """
    try:
        record = ProgressService(db, config).save_progress(
            principal, request.sentence_id, request.is_correct
        )
    except SentenceNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sentence not found"
        )
    except ProgressSaveError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save sentence progress"
        )

    return {
        "message": "Progress saved",
        "progress": {
            "sentence_id": record.sentence_id,
            "status": record.status.value,
            "correct_streak": record.correct_streak,
            "mistake_count": record.mistake_count,
            "next_review_at": record.next_review_at,
        },
    }
