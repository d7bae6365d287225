# agenda/schemas/catalog.py
from typing import Optional

from pydantic import BaseModel, Field


class InstrumentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class InstrumentOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class LocationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = Field(None, max_length=500)


class LocationOut(BaseModel):
    id: int
    name: str
    address: Optional[str] = None

    class Config:
        from_attributes = True
