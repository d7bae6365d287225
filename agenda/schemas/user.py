## agenda/schemas/user.py
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("email")
    @classmethod
    def _norm_email(cls, v: str) -> str:
        return v.strip().lower()


class UserOut(BaseModel):
    id: int
    email: EmailStr
    role: str
    is_active: bool = True

    class Config:
        from_attributes = True


class MeOut(BaseModel):
    id: int
    email: str
    role: str
    musician_id: Optional[int] = None
