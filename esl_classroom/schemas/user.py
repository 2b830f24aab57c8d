# esl_classroom/schemas/user.py
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime


class UserBase(BaseModel):
    email: EmailStr
    name: str | None = None
    role: str  # "teacher" / "student"
    level: str | None = None


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    password: str | None = Field(default=None, min_length=6)
    level: str | None = None


class UserPublic(UserBase):
    id: int
    last_active_at: datetime | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    """Populated reference inside class / assignment payloads."""
    id: int
    name: str
    email: EmailStr
    level: str | None = None
    last_active_at: datetime | None = None

    model_config = {"from_attributes": True}
