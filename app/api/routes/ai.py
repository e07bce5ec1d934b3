import logging
from fastapi import APIRouter, Depends, HTTPException, status

from app.utils.llm_client import (
    LLMClient, LLMConnectionError, LLMResponseParseError, LLMStatusError, LLMTimeoutError
)
from app.utils.security import Principal
from app.api.dependencies import get_current_principal, get_llm_client
from app.api.schemas.ai_schemas import ExplainErrorRequest, ExplainErrorResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/ai/explain-error", response_model=ExplainErrorResponse)
async def explain_error(
    request: ExplainErrorRequest,
    principal: Principal = Depends(get_current_principal),
    llm_client: LLMClient = Depends(get_llm_client),
):
    """
    让大模型解释用户的翻译错误
    """
    try:
        explanation = await llm_client.explain_mistake(
            request.prompt_ru, request.correct_en, request.user_answer_en
        )
    except LLMTimeoutError:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail="AI timeout")
    except LLMConnectionError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="AI connect error")
    except LLMStatusError as e:
        logger.warning(f"用户 {principal.user_id} 解释请求失败，上游状态码: {e.status_code}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="AI service error")
    except LLMResponseParseError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="AI parse error")

    return {"explanation": explanation}
