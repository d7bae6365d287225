# agenda/crud/schedule.py
"""
Schedule aggregate: the event plus its time slots, rehearsals and roster.

Children are owned by the schedule and replaced wholesale on edit inside
the same transaction as the parent row.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from agenda.core import config
from agenda.core.clock import utcnow
from agenda.core.errors import (
    IncompleteSchedule,
    InvalidRehearsalDate,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)
from agenda.core.rbac import Principal, ensure_admin
from agenda.db.session import transaction
from agenda.models.assignment import ASSIGNMENT_PENDING, Assignment
from agenda.models.instrument import Instrument
from agenda.models.location import Location
from agenda.models.musician import Musician
from agenda.models.schedule import (
    SCHEDULE_CANCELLED,
    SCHEDULE_CONFIRMED,
    SCHEDULE_DRAFT,
    Schedule,
    ScheduleRehearsal,
    ScheduleTime,
)
from agenda.schemas.schedule import RehearsalIn, ScheduleCreate
from agenda.services.availability import eligible_musician_ids, prune_roster
from agenda.services.roster import Roster, RosterRow

log = logging.getLogger(__name__)

# What an administrator's edit does to musicians' existing responses.
ROSTER_POLICY_RESET = "reset"  # every assignment back to pending, notes cleared
ROSTER_POLICY_PRESERVE = "preserve"  # unchanged (musician, instrument) rows keep status/notes
ROSTER_POLICIES = (ROSTER_POLICY_RESET, ROSTER_POLICY_PRESERVE)


def _policy(policy: Optional[str]) -> str:
    p = (policy or config.ROSTER_EDIT_POLICY or ROSTER_POLICY_RESET).strip().lower()
    if p not in ROSTER_POLICIES:
        raise ValidationError(f"Unknown roster edit policy: {p!r}", details={"allowed": list(ROSTER_POLICIES)})
    return p


# ---------------------------
# Validation
# ---------------------------
def rehearsals_precede(schedule_date: date, rehearsals: List[RehearsalIn]) -> bool:
    return all(r.date < schedule_date for r in rehearsals)


def validate_aggregate(payload: ScheduleCreate) -> Roster:
    """Checks that need no database; returns the validated working roster."""
    if not rehearsals_precede(payload.date, payload.rehearsals):
        raise InvalidRehearsalDate("Rehearsals must take place before the schedule date")
    if not payload.times:
        raise IncompleteSchedule("Add at least one time slot to the schedule")

    roster = Roster.from_pairs(payload.musicians)
    roster.validate()
    return roster


def _check_references(db: Session, payload: ScheduleCreate, roster: Roster) -> None:
    if payload.location_id is not None and db.get(Location, payload.location_id) is None:
        raise NotFoundError("Location not found")

    musician_ids = roster.musician_ids()
    found = {
        mid
        for (mid,) in db.query(Musician.id)
        .filter(Musician.id.in_(musician_ids), Musician.deleted_at.is_(None))
        .all()
    }
    missing = sorted(musician_ids - found)
    if missing:
        raise NotFoundError("Musician not found", details={"musician_ids": missing})

    instrument_ids = {r.instrument_id for r in roster.rows}
    known = {
        iid for (iid,) in db.query(Instrument.id).filter(Instrument.id.in_(instrument_ids)).all()
    }
    unknown = sorted(instrument_ids - known)
    if unknown:
        raise NotFoundError("Instrument not found", details={"instrument_ids": unknown})


def _eligible_roster(db: Session, payload: ScheduleCreate, roster: Roster) -> Tuple[List[RosterRow], List[int]]:
    kept, dropped = prune_roster(roster.rows, eligible_musician_ids(db, payload.date))
    if not kept:
        raise IncompleteSchedule(
            "None of the selected musicians is available on this date",
            details={"dropped_musician_ids": [r.musician_id for r in dropped]},
        )
    return kept, [r.musician_id for r in dropped]


def _prepare(db: Session, payload: ScheduleCreate) -> Tuple[List[RosterRow], List[int]]:
    roster = validate_aggregate(payload)
    _check_references(db, payload, roster)
    return _eligible_roster(db, payload, roster)


def _children(payload: ScheduleCreate):
    times = [ScheduleTime(start_time=t.start_time, end_time=t.end_time) for t in payload.times]
    rehearsals = [ScheduleRehearsal(date=r.date, start_time=r.start_time) for r in payload.rehearsals]
    return times, rehearsals


# ---------------------------
# Reads
# ---------------------------
def _live(db: Session):
    return (
        db.query(Schedule)
        .filter(Schedule.deleted_at.is_(None))
        .options(
            selectinload(Schedule.location),
            selectinload(Schedule.times),
            selectinload(Schedule.rehearsals),
            selectinload(Schedule.musicians).selectinload(Assignment.musician),
            selectinload(Schedule.musicians).selectinload(Assignment.instrument),
        )
    )


def get_schedule(db: Session, schedule_id: int, principal: Optional[Principal] = None) -> Schedule:
    schedule = _live(db).filter(Schedule.id == schedule_id).first()
    if not schedule:
        raise NotFoundError("Schedule not found")
    if principal is not None and not principal.is_admin:
        if all(a.musician_id != principal.musician_id for a in schedule.musicians):
            raise PermissionDenied("You are not assigned to this schedule")
    return schedule


def list_schedules(
    db: Session,
    principal: Principal,
    *,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    status: Optional[str] = None,
) -> List[Schedule]:
    """Admins see every live schedule; musicians only those they are assigned to."""
    q = _live(db)
    if not principal.is_admin:
        if principal.musician_id is None:
            return []
        q = q.filter(
            Schedule.musicians.any(Assignment.musician_id == principal.musician_id)
        )
    if date_from is not None:
        q = q.filter(Schedule.date >= date_from)
    if date_to is not None:
        q = q.filter(Schedule.date <= date_to)
    if status:
        q = q.filter(Schedule.status == status.strip().lower())
    return q.order_by(Schedule.date.asc(), Schedule.id.asc()).all()


# ---------------------------
# Writes
# ---------------------------
def create_schedule(db: Session, principal: Principal, payload: ScheduleCreate) -> Tuple[Schedule, List[int]]:
    """
    Validate and persist a new draft schedule with all its children.
    Returns (schedule, musician ids pruned because they are unavailable on the date).
    """
    ensure_admin(principal)
    rows, dropped = _prepare(db, payload)
    times, rehearsals = _children(payload)

    schedule = Schedule(
        title=payload.title,
        date=payload.date,
        location_id=payload.location_id,
        notes=payload.notes,
        status=SCHEDULE_DRAFT,
        created_by=principal.user_id,
        times=times,
        rehearsals=rehearsals,
        musicians=[
            Assignment(
                musician_id=r.musician_id,
                instrument_id=r.instrument_id,
                status=ASSIGNMENT_PENDING,
            )
            for r in rows
        ],
    )
    with transaction(db, "create the schedule"):
        db.add(schedule)

    log.info("schedule created id=%s date=%s roster=%s", schedule.id, schedule.date, len(rows))
    return get_schedule(db, schedule.id), dropped


def update_schedule(
    db: Session,
    principal: Principal,
    schedule_id: int,
    payload: ScheduleCreate,
    *,
    policy: Optional[str] = None,
) -> Tuple[Schedule, List[int]]:
    """
    Replace the schedule and all of its children (delete-then-insert, no diff).

    Roster edit rule:
      - 'reset'    -> every assignment is pending again with notes cleared, and
                      the schedule goes back to draft for re-confirmation
      - 'preserve' -> rows whose musician and instrument did not change keep
                      their status and notes; the schedule keeps its status
    """
    ensure_admin(principal)
    rule = _policy(policy)
    schedule = get_schedule(db, schedule_id)
    if schedule.status == SCHEDULE_CANCELLED:
        raise ValidationError("A cancelled schedule cannot be edited")

    rows, dropped = _prepare(db, payload)
    times, rehearsals = _children(payload)

    previous: Dict[int, Assignment] = {a.musician_id: a for a in schedule.musicians}
    carried: Dict[int, Tuple[str, Optional[str]]] = {}
    if rule == ROSTER_POLICY_PRESERVE:
        for r in rows:
            old = previous.get(r.musician_id)
            if old is not None and old.instrument_id == r.instrument_id:
                carried[r.musician_id] = (old.status, old.notes)

    with transaction(db, "update the schedule"):
        schedule.title = payload.title
        schedule.date = payload.date
        schedule.location_id = payload.location_id
        schedule.notes = payload.notes
        if rule == ROSTER_POLICY_RESET:
            schedule.status = SCHEDULE_DRAFT

        schedule.times = times
        schedule.rehearsals = rehearsals
        # old rows must be gone before re-inserting the same (schedule, musician)
        schedule.musicians = []
        db.flush()

        new_rows = []
        for r in rows:
            status, notes = carried.get(r.musician_id, (ASSIGNMENT_PENDING, None))
            new_rows.append(
                Assignment(
                    musician_id=r.musician_id,
                    instrument_id=r.instrument_id,
                    status=status,
                    notes=notes,
                )
            )
        schedule.musicians = new_rows

    log.info(
        "schedule updated id=%s policy=%s roster=%s kept_responses=%s",
        schedule.id,
        rule,
        len(rows),
        len(carried),
    )
    db.expire(schedule)
    return get_schedule(db, schedule.id), dropped


def confirm_schedule(db: Session, principal: Principal, schedule_id: int) -> Schedule:
    """Explicit admin action; assignment responses never confirm a schedule."""
    ensure_admin(principal)
    schedule = get_schedule(db, schedule_id)
    if schedule.status != SCHEDULE_DRAFT:
        raise ValidationError(f"Only draft schedules can be confirmed (status: {schedule.status})")
    with transaction(db, "confirm the schedule"):
        schedule.status = SCHEDULE_CONFIRMED
    return schedule


def cancel_schedule(db: Session, principal: Principal, schedule_id: int) -> Schedule:
    ensure_admin(principal)
    schedule = get_schedule(db, schedule_id)
    if schedule.status == SCHEDULE_CANCELLED:
        raise ValidationError("Schedule is already cancelled")
    with transaction(db, "cancel the schedule"):
        schedule.status = SCHEDULE_CANCELLED
    return schedule


def soft_delete_schedule(db: Session, principal: Principal, schedule_id: int) -> None:
    ensure_admin(principal)
    schedule = get_schedule(db, schedule_id)
    with transaction(db, "delete the schedule"):
        schedule.deleted_at = utcnow()
