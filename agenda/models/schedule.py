# agenda/models/schedule.py
from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import relationship

from agenda.db.base import Base, SoftDeleteMixin

SCHEDULE_DRAFT = "draft"
SCHEDULE_CONFIRMED = "confirmed"
SCHEDULE_CANCELLED = "cancelled"
SCHEDULE_STATUSES = (SCHEDULE_DRAFT, SCHEDULE_CONFIRMED, SCHEDULE_CANCELLED)


class Schedule(SoftDeleteMixin, Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    location_id = Column(
        Integer, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=SCHEDULE_DRAFT)  # draft / confirmed / cancelled

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    location = relationship("Location")

    # owned children: replaced wholesale on edit
    times = relationship(
        "ScheduleTime",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="ScheduleTime.start_time",
    )
    rehearsals = relationship(
        "ScheduleRehearsal",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="ScheduleRehearsal.date",
    )
    musicians = relationship(
        "Assignment",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="Assignment.id",
    )


class ScheduleTime(Base):
    __tablename__ = "schedule_times"

    id = Column(Integer, primary_key=True)
    schedule_id = Column(
        Integer, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    schedule = relationship("Schedule", back_populates="times")


class ScheduleRehearsal(Base):
    __tablename__ = "schedule_rehearsals"

    id = Column(Integer, primary_key=True)
    schedule_id = Column(
        Integer, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)

    schedule = relationship("Schedule", back_populates="rehearsals")

    __table_args__ = (Index("ix_schedule_rehearsals_date", "schedule_id", "date"),)
