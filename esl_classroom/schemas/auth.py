# esl_classroom/schemas/auth.py
from typing import Literal

from pydantic import BaseModel, EmailStr, ConfigDict, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)  # required, may repeat
    role: Literal["teacher", "student"]
    level: str | None = None


class UserPublic(BaseModel):

    id: int
    email: EmailStr
    name: str
    role: str
    level: str | None = None

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    """Login / register response; the client keeps both token and user."""
    access_token: str
    token_type: str = "bearer"
    user: UserPublic
