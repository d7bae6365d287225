# agenda/scripts/seed.py
"""
Minimal seed:
- Ensures an administrator account exists.
- Ensures the default instrument catalog exists.
Safe to run multiple times (idempotent).

    python -m agenda.scripts.seed
"""
import logging
import os
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from agenda.core.security import get_password_hash
from agenda.db.session import SessionLocal, engine, transaction
from agenda.models import Base
from agenda.models.instrument import Instrument
from agenda.models.user import ROLE_ADMIN, User

log = logging.getLogger(__name__)

DEFAULT_INSTRUMENTS = (
    "Vocal",
    "Acoustic guitar",
    "Electric guitar",
    "Bass",
    "Keyboard",
    "Drums",
    "Violin",
)


def ensure_admin(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(func.lower(User.email) == email.lower()).first()
    if user:
        # upgrade to admin if needed
        if user.role != ROLE_ADMIN or not user.is_active:
            with transaction(db, "promote the seed administrator"):
                user.role = ROLE_ADMIN
                user.is_active = True
        return user

    user = User(
        email=email.lower(),
        hashed_password=get_password_hash(password),
        role=ROLE_ADMIN,
        is_active=True,
    )
    with transaction(db, "create the seed administrator"):
        db.add(user)
    db.refresh(user)
    return user


def ensure_instruments(db: Session, names: Iterable[str] = DEFAULT_INSTRUMENTS) -> int:
    existing = {n.lower() for (n,) in db.query(Instrument.name).all()}
    missing = [n for n in names if n.lower() not in existing]
    if missing:
        with transaction(db, "seed the instrument catalog"):
            db.add_all([Instrument(name=n) for n in missing])
    return len(missing)


def main():
    logging.basicConfig(level=logging.INFO)
    email = os.environ.get("SEED_ADMIN_EMAIL", "admin@example.com")
    password = os.environ.get("SEED_ADMIN_PASSWORD", "ChangeMe123!")

    # make sure tables exist
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        admin = ensure_admin(db, email, password)
        added = ensure_instruments(db)
        log.info("seed done: admin=%s (id=%s), instruments added=%s", admin.email, admin.id, added)
    finally:
        db.close()


if __name__ == "__main__":
    main()
