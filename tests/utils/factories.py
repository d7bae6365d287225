from datetime import date, time
from typing import Iterable, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from agenda.core.auth import principal_for
from agenda.core.clock import utcnow
from agenda.core.rbac import Principal
from agenda.core.security import get_password_hash
from agenda.models.instrument import Instrument
from agenda.models.location import Location
from agenda.models.musician import Musician
from agenda.models.unavailability import UnavailabilityPeriod
from agenda.models.user import ROLE_ADMIN, ROLE_MUSICIAN, User
from agenda.schemas.schedule import AssignmentIn, RehearsalIn, ScheduleCreate, TimeSlotIn

DEFAULT_PASSWORD = "secret123"


def make_user(db: Session, email: str, role: str = ROLE_MUSICIAN, password: str = DEFAULT_PASSWORD) -> User:
    user = User(email=email, hashed_password=get_password_hash(password), role=role, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_admin(db: Session, email: str = "admin@example.com") -> Principal:
    return principal_for(db, make_user(db, email, role=ROLE_ADMIN))


def make_musician(
    db: Session,
    name: str,
    *,
    active: bool = True,
    deleted: bool = False,
    with_account: bool = False,
) -> Musician:
    user_id = None
    email = f"{name.lower().replace(' ', '.')}@example.com"
    if with_account:
        user_id = make_user(db, email).id
    musician = Musician(
        name=name,
        email=email,
        active=active,
        user_id=user_id,
        deleted_at=utcnow() if deleted else None,
    )
    db.add(musician)
    db.commit()
    db.refresh(musician)
    return musician


def principal_of(db: Session, musician: Musician) -> Principal:
    return principal_for(db, db.get(User, musician.user_id))


def make_instrument(db: Session, name: str) -> Instrument:
    obj = Instrument(name=name)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def make_location(db: Session, name: str = "Main hall") -> Location:
    obj = Location(name=name, address="1 Church Street")
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def make_period(db: Session, musician: Musician, start: date, end: date, *, deleted: bool = False) -> UnavailabilityPeriod:
    period = UnavailabilityPeriod(
        musician_id=musician.id,
        start_date=start,
        end_date=end,
        deleted_at=utcnow() if deleted else None,
    )
    db.add(period)
    db.commit()
    db.refresh(period)
    return period


def schedule_payload(
    day: date,
    roster: Iterable[Tuple[int, int]],
    *,
    times: Sequence[Tuple[time, time]] = ((time(9, 0), time(11, 0)),),
    rehearsals: Sequence[Tuple[date, time]] = (),
    location_id: Optional[int] = None,
    title: str = "Sunday service",
) -> ScheduleCreate:
    return ScheduleCreate(
        title=title,
        date=day,
        location_id=location_id,
        times=[TimeSlotIn(start_time=s, end_time=e) for s, e in times],
        rehearsals=[RehearsalIn(date=d, start_time=t) for d, t in rehearsals],
        musicians=[AssignmentIn(musician_id=m, instrument_id=i) for m, i in roster],
    )


def auth_headers(client, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    r = client.post("/api/v1/login", data={"username": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}
