# agenda/crud/unavailability.py
from typing import List, Optional

from sqlalchemy.orm import Session

from agenda.core.clock import utcnow
from agenda.core.errors import NotFoundError, PermissionDenied
from agenda.core.rbac import Principal, ensure_musician
from agenda.db.session import transaction
from agenda.models.unavailability import UnavailabilityPeriod
from agenda.schemas.unavailability import UnavailabilityCreate


def create_period(db: Session, principal: Principal, payload: UnavailabilityCreate) -> UnavailabilityPeriod:
    musician_id = ensure_musician(principal)
    period = UnavailabilityPeriod(
        musician_id=musician_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
    )
    with transaction(db, "add the unavailability period"):
        db.add(period)
    db.refresh(period)
    return period


def list_periods(
    db: Session, principal: Principal, musician_id: Optional[int] = None
) -> List[UnavailabilityPeriod]:
    """
    Live periods ordered by start date. Musicians only see their own;
    admins may pass ``musician_id`` (or see everyone's when omitted).
    """
    q = db.query(UnavailabilityPeriod).filter(UnavailabilityPeriod.deleted_at.is_(None))
    if principal.is_admin:
        if musician_id is not None:
            q = q.filter(UnavailabilityPeriod.musician_id == musician_id)
    else:
        q = q.filter(UnavailabilityPeriod.musician_id == ensure_musician(principal))
    return q.order_by(
        UnavailabilityPeriod.start_date.asc(), UnavailabilityPeriod.id.asc()
    ).all()


def soft_delete_period(db: Session, principal: Principal, period_id: int) -> None:
    period = (
        db.query(UnavailabilityPeriod)
        .filter(
            UnavailabilityPeriod.id == period_id,
            UnavailabilityPeriod.deleted_at.is_(None),
        )
        .first()
    )
    if not period:
        raise NotFoundError("Unavailability period not found")
    if not principal.is_admin and period.musician_id != principal.musician_id:
        raise PermissionDenied("You can only remove your own unavailability")
    with transaction(db, "remove the unavailability period"):
        period.deleted_at = utcnow()
