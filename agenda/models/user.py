# agenda/models/user.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String, func, text
from sqlalchemy.orm import relationship

from agenda.db.base import Base

ROLE_ADMIN = "admin"
ROLE_MUSICIAN = "musician"
ROLES = (ROLE_ADMIN, ROLE_MUSICIAN)


class User(Base):
    """Account identity. Musicians link to it; admins may have no musician row."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)

    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    role = Column(String(20), nullable=False, default=ROLE_MUSICIAN, index=True)
    is_active = Column(Boolean, nullable=False, server_default=text("1"))

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    last_login_at = Column(DateTime, nullable=True)

    musician = relationship("Musician", back_populates="user", uselist=False)
