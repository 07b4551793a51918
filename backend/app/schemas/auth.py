"""인증 관련 스키마"""
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    username: str
    display_name: str | None = None

    model_config = {"from_attributes": True}
