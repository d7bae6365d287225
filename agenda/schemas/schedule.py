# agenda/schemas/schedule.py

from datetime import date, datetime, time
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

ScheduleStatus = Literal["draft", "confirmed", "cancelled"]
AssignmentStatus = Literal["pending", "confirmed", "declined"]
ResponseStatus = Literal["confirmed", "declined"]


# ---------- Children ----------


class TimeSlotIn(BaseModel):
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def _check_order(self) -> "TimeSlotIn":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time.")
        return self


class TimeSlotOut(TimeSlotIn):
    id: int

    model_config = {"from_attributes": True}


class RehearsalIn(BaseModel):
    date: date
    start_time: time


class RehearsalOut(RehearsalIn):
    id: int

    model_config = {"from_attributes": True}


class AssignmentIn(BaseModel):
    # both required at submit; left optional so the roster check reports the row
    musician_id: Optional[int] = Field(None, ge=1)
    instrument_id: Optional[int] = Field(None, ge=1)


class AssignmentOut(BaseModel):
    id: int
    musician_id: int
    musician_name: Optional[str] = None
    instrument_id: int
    instrument_name: Optional[str] = None
    status: AssignmentStatus
    notes: Optional[str] = None


# ---------- Create / update payloads ----------


class ScheduleCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    date: date
    location_id: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None
    times: List[TimeSlotIn] = Field(default_factory=list)
    rehearsals: List[RehearsalIn] = Field(default_factory=list)
    musicians: List[AssignmentIn] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be blank.")
        return v


class ScheduleUpdate(ScheduleCreate):
    """Full replacement: times, rehearsals and musicians are replaced, not merged."""


# ---------- Read models ----------


class LocationMini(BaseModel):
    id: int
    name: str
    address: Optional[str] = None

    model_config = {"from_attributes": True}


class ScheduleSummaryOut(BaseModel):
    id: int
    title: str
    date: date
    status: ScheduleStatus
    location: Optional[LocationMini] = None
    my_status: Optional[AssignmentStatus] = None  # set for musicians


class ScheduleOut(BaseModel):
    id: int
    title: str
    date: date
    status: ScheduleStatus
    notes: Optional[str] = None
    location: Optional[LocationMini] = None
    created_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    times: List[TimeSlotOut] = Field(default_factory=list)
    rehearsals: List[RehearsalOut] = Field(default_factory=list)
    musicians: List[AssignmentOut] = Field(default_factory=list)
    pruned_musician_ids: List[int] = Field(
        default_factory=list,
        description="Musicians dropped on save because they are unavailable on the date",
    )


# ---------- Musician responses ----------


class AssignmentResponse(BaseModel):
    status: ResponseStatus
    notes: Optional[str] = None


class AssignmentNotesUpdate(BaseModel):
    notes: Optional[str] = None


# ---------- Authoring helpers ----------


class RosterCheckRequest(BaseModel):
    date: date
    musicians: List[AssignmentIn] = Field(default_factory=list)


class RosterCheckOut(BaseModel):
    date: date
    musicians: List[AssignmentIn]
    dropped: List[AssignmentIn]
