from pydantic import BaseModel


class ExplainErrorRequest(BaseModel):
    prompt_ru: str
    correct_en: str
    user_answer_en: str = ""


class ExplainErrorResponse(BaseModel):
    explanation: str
