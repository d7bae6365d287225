# agenda/schemas/invitation.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class InvitationCreate(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _norm_email(cls, v: str) -> str:
        return v.strip().lower()


class InvitationOut(BaseModel):
    id: int
    email: EmailStr
    token: str
    status: str
    invited_by: Optional[int] = None
    created_at: Optional[datetime] = None
    expires_at: datetime

    class Config:
        from_attributes = True  # pydantic v2: orm_mode replacement


class InvitationVerifyOut(BaseModel):
    """Public view of a valid invitation; the token itself is not echoed back."""

    email: EmailStr
    expires_at: datetime

    class Config:
        from_attributes = True


class InvitationAccept(BaseModel):
    token: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=255)
    whatsapp: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=6)

    @field_validator("name", "whatsapp")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank.")
        return v


class InvitationSendResult(BaseModel):
    invitation: InvitationOut
    email_sent: bool
    message: str
