# agenda/models/assignment.py
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from agenda.db.base import Base

ASSIGNMENT_PENDING = "pending"
ASSIGNMENT_CONFIRMED = "confirmed"
ASSIGNMENT_DECLINED = "declined"
ASSIGNMENT_STATUSES = (ASSIGNMENT_PENDING, ASSIGNMENT_CONFIRMED, ASSIGNMENT_DECLINED)
RESPONSE_STATUSES = (ASSIGNMENT_CONFIRMED, ASSIGNMENT_DECLINED)


class Assignment(Base):
    """A musician playing one instrument in one schedule."""

    __tablename__ = "schedule_musicians"

    id = Column(Integer, primary_key=True, index=True)
    schedule_id = Column(
        Integer, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    musician_id = Column(
        Integer, ForeignKey("musicians.id", ondelete="CASCADE"), nullable=False, index=True
    )
    instrument_id = Column(Integer, ForeignKey("instruments.id"), nullable=False)

    status = Column(String(20), nullable=False, default=ASSIGNMENT_PENDING)  # pending / confirmed / declined
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    schedule = relationship("Schedule", back_populates="musicians")
    musician = relationship("Musician")
    instrument = relationship("Instrument")

    # one assignment per musician per schedule
    __table_args__ = (
        UniqueConstraint("schedule_id", "musician_id", name="uq_schedule_musician"),
    )
