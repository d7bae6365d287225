# agenda/schemas/dashboard.py
from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class TopMusician(BaseModel):
    name: str
    confirmed: int
    total: int
    rate: float


class AdminDashboard(BaseModel):
    month_start: date
    month_end: date
    total_schedules: int  # schedules in the month
    total_musicians: int  # active musicians
    confirmed_count: int
    declined_count: int
    pending_count: int
    top_musicians: List[TopMusician]


class UpcomingSchedule(BaseModel):
    id: int
    title: str
    date: date
    status: str  # the musician's assignment status


class MusicianDashboard(BaseModel):
    musician_id: int
    total_assignments: int
    confirmed_assignments: int
    declined_assignments: int
    pending_assignments: int
    participation_rate: float
    upcoming_schedules: List[UpcomingSchedule]
    next_schedule: Optional[UpcomingSchedule] = None
