# agenda/models/musician.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func, text
from sqlalchemy.orm import relationship

from agenda.db.base import Base, SoftDeleteMixin


class Musician(SoftDeleteMixin, Base):
    __tablename__ = "musicians"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    whatsapp = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True, index=True)

    # deactivated (not deleted) by toggling
    active = Column(Boolean, nullable=False, server_default=text("1"), index=True)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True
    )

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="musician")
    unavailability = relationship(
        "UnavailabilityPeriod", back_populates="musician", passive_deletes=True
    )
