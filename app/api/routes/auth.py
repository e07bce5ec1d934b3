import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.config.settings import Settings, get_settings
from app.utils.database import get_db
from app.services.user_service import (
    EmailAlreadyExistsError, InvalidCredentialsError, UserService
)
from app.api.schemas.auth_schemas import Credentials, MessageResponse, TokenResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    credentials: Credentials,
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
):
    """
    用户注册接口
    """
    try:
        UserService(db, config).register_user(credentials.email, credentials.password)
        return {"message": "User registered successfully"}
    except EmailAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists"
        )
    except Exception as e:
        logger.error(f"用户注册失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user"
        )


@router.post("/login", response_model=TokenResponse)
async def login_user(
    credentials: Credentials,
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
):
    """
    用户登录接口，返回JWT令牌
    """
    try:
        token = UserService(db, config).login(credentials.email, credentials.password)
        return {"token": token}
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )
    except Exception as e:
        logger.error(f"用户登录失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error"
        )
