from pydantic import BaseModel, Field


class Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=72)


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str
