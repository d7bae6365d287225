# agenda/models/unavailability.py
from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import relationship

from agenda.db.base import Base, SoftDeleteMixin


class UnavailabilityPeriod(SoftDeleteMixin, Base):
    __tablename__ = "musician_unavailability"

    id = Column(Integer, primary_key=True, index=True)
    musician_id = Column(
        Integer, ForeignKey("musicians.id", ondelete="CASCADE"), nullable=False
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)  # inclusive
    reason = Column(String(500), nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    musician = relationship("Musician", back_populates="unavailability")

    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_unavailability_range"),
        Index("ix_unavailability_musician_range", "musician_id", "start_date", "end_date"),
    )
