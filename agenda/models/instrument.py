# agenda/models/instrument.py
from sqlalchemy import Column, Integer, String

from agenda.db.base import Base


class Instrument(Base):
    __tablename__ = "instruments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
