# agenda/crud/catalog.py
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from agenda.core.errors import DuplicateError, NotFoundError
from agenda.core.rbac import Principal, ensure_admin
from agenda.db.session import transaction
from agenda.models.instrument import Instrument
from agenda.models.location import Location


def list_instruments(db: Session) -> List[Instrument]:
    return db.query(Instrument).order_by(Instrument.name.asc()).all()


def get_instrument(db: Session, instrument_id: int) -> Instrument:
    obj = db.get(Instrument, instrument_id)
    if not obj:
        raise NotFoundError("Instrument not found")
    return obj


def create_instrument(db: Session, principal: Principal, name: str) -> Instrument:
    ensure_admin(principal)
    clean = name.strip()
    exists = (
        db.query(Instrument.id)
        .filter(func.lower(Instrument.name) == clean.lower())
        .first()
    )
    if exists:
        raise DuplicateError("Instrument already exists")
    obj = Instrument(name=clean)
    with transaction(db, "create the instrument"):
        db.add(obj)
    db.refresh(obj)
    return obj


def list_locations(db: Session) -> List[Location]:
    return db.query(Location).order_by(Location.name.asc()).all()


def get_location(db: Session, location_id: int) -> Location:
    obj = db.get(Location, location_id)
    if not obj:
        raise NotFoundError("Location not found")
    return obj


def create_location(
    db: Session, principal: Principal, name: str, address: Optional[str] = None
) -> Location:
    ensure_admin(principal)
    obj = Location(name=name.strip(), address=address)
    with transaction(db, "create the location"):
        db.add(obj)
    db.refresh(obj)
    return obj
