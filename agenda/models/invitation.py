# agenda/models/invitation.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from agenda.db.base import Base, SoftDeleteMixin

INVITATION_PENDING = "pending"
INVITATION_ACCEPTED = "accepted"
INVITATION_EXPIRED = "expired"
INVITATION_STATUSES = (INVITATION_PENDING, INVITATION_ACCEPTED, INVITATION_EXPIRED)


class Invitation(SoftDeleteMixin, Base):
    __tablename__ = "musician_invitations"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=INVITATION_PENDING)  # pending / accepted / expired
    invited_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    expires_at = Column(DateTime, nullable=False)
