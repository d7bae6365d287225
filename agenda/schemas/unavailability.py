# agenda/schemas/unavailability.py

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class UnavailabilityCreate(BaseModel):
    start_date: date
    end_date: date = Field(..., description="Inclusive")
    reason: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def _check_range(self) -> "UnavailabilityCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be greater than or equal to start_date.")
        return self


class UnavailabilityOut(BaseModel):
    id: int
    musician_id: int
    start_date: date
    end_date: date
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
