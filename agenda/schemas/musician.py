# agenda/schemas/musician.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MusicianOut(BaseModel):
    id: int
    name: str
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    active: bool
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MusicianProfileUpdate(BaseModel):
    """Partial update of the caller's own profile."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    whatsapp: Optional[str] = Field(None, max_length=50)
