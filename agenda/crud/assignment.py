# agenda/crud/assignment.py
"""A musician's own response to a schedule they are assigned to."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from agenda.core.errors import NotFoundError, ValidationError
from agenda.core.rbac import Principal, ensure_musician
from agenda.db.session import transaction
from agenda.models.assignment import RESPONSE_STATUSES, Assignment
from agenda.models.schedule import Schedule

log = logging.getLogger(__name__)


def get_own_assignment(db: Session, principal: Principal, schedule_id: int) -> Assignment:
    musician_id = ensure_musician(principal)
    assignment = (
        db.query(Assignment)
        .join(Schedule, Schedule.id == Assignment.schedule_id)
        .filter(
            Assignment.schedule_id == schedule_id,
            Assignment.musician_id == musician_id,
            Schedule.deleted_at.is_(None),
        )
        .first()
    )
    if not assignment:
        # responding never creates an assignment
        raise NotFoundError("You are not assigned to this schedule")
    return assignment


def respond(
    db: Session,
    principal: Principal,
    schedule_id: int,
    status: str,
    notes: Optional[str] = None,
) -> Assignment:
    """Set the caller's status (confirmed/declined) and notes in one write."""
    status = (status or "").strip().lower()
    if status not in RESPONSE_STATUSES:
        raise ValidationError(f"Invalid response status: {status!r}")

    assignment = get_own_assignment(db, principal, schedule_id)
    with transaction(db, "save your response"):
        assignment.status = status
        assignment.notes = notes
    db.refresh(assignment)
    log.info(
        "assignment response schedule_id=%s musician_id=%s status=%s",
        schedule_id,
        assignment.musician_id,
        status,
    )
    return assignment


def update_notes(db: Session, principal: Principal, schedule_id: int, notes: Optional[str]) -> Assignment:
    assignment = get_own_assignment(db, principal, schedule_id)
    with transaction(db, "save your notes"):
        assignment.notes = notes
    db.refresh(assignment)
    return assignment
