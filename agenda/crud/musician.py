# agenda/crud/musician.py
from typing import List, Optional

from sqlalchemy.orm import Session

from agenda.core.clock import utcnow
from agenda.core.errors import NotFoundError
from agenda.core.rbac import Principal, ensure_admin, ensure_musician
from agenda.db.session import transaction
from agenda.models.musician import Musician
from agenda.schemas.musician import MusicianProfileUpdate


def _live(db: Session):
    return db.query(Musician).filter(Musician.deleted_at.is_(None))


def get_musician(db: Session, musician_id: int) -> Musician:
    musician = _live(db).filter(Musician.id == musician_id).first()
    if not musician:
        raise NotFoundError("Musician not found")
    return musician


def get_musician_for_user(db: Session, user_id: int) -> Optional[Musician]:
    return _live(db).filter(Musician.user_id == user_id).first()


def list_musicians(db: Session, principal: Principal, active: Optional[bool] = None) -> List[Musician]:
    """Admins see the whole directory; a musician only sees their own row."""
    q = _live(db)
    if not principal.is_admin:
        q = q.filter(Musician.user_id == principal.user_id)
    if active is not None:
        q = q.filter(Musician.active.is_(active))
    return q.order_by(Musician.name.asc(), Musician.id.asc()).all()


def toggle_active(db: Session, principal: Principal, musician_id: int) -> Musician:
    ensure_admin(principal)
    musician = get_musician(db, musician_id)
    with transaction(db, "update the musician status"):
        musician.active = not musician.active
    db.refresh(musician)
    return musician


def soft_delete_musician(db: Session, principal: Principal, musician_id: int) -> Musician:
    """Tombstone the musician; past assignments stay for history and statistics."""
    ensure_admin(principal)
    musician = get_musician(db, musician_id)
    with transaction(db, "delete the musician"):
        musician.deleted_at = utcnow()
    return musician


def update_profile(db: Session, principal: Principal, payload: MusicianProfileUpdate) -> Musician:
    musician = get_musician(db, ensure_musician(principal))
    data = payload.model_dump(exclude_unset=True)
    with transaction(db, "update the profile"):
        if data.get("name") is not None:
            musician.name = data["name"].strip()
        if "whatsapp" in data:
            musician.whatsapp = data["whatsapp"]
    db.refresh(musician)
    return musician
