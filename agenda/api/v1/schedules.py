# agenda/api/v1/schedules.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from agenda.core.auth import get_current_principal, get_db
from agenda.core.rbac import Principal
from agenda.crud.assignment import respond, update_notes
from agenda.crud.schedule import (
    cancel_schedule,
    confirm_schedule,
    create_schedule,
    get_schedule,
    list_schedules,
    soft_delete_schedule,
    update_schedule,
)
from agenda.models.schedule import Schedule
from agenda.schemas.schedule import (
    AssignmentNotesUpdate,
    AssignmentOut,
    AssignmentResponse,
    LocationMini,
    RehearsalOut,
    ScheduleCreate,
    ScheduleOut,
    ScheduleSummaryOut,
    ScheduleUpdate,
    TimeSlotOut,
)
from agenda.services.audit import audit_log, ip_from_request

router = APIRouter()


# ---- helpers ----


def _assignment_out(a) -> AssignmentOut:
    return AssignmentOut(
        id=a.id,
        musician_id=a.musician_id,
        musician_name=a.musician.name if a.musician else None,
        instrument_id=a.instrument_id,
        instrument_name=a.instrument.name if a.instrument else None,
        status=a.status,
        notes=a.notes,
    )


def _schedule_out(s: Schedule, pruned: Optional[List[int]] = None) -> ScheduleOut:
    return ScheduleOut(
        id=s.id,
        title=s.title,
        date=s.date,
        status=s.status,
        notes=s.notes,
        location=LocationMini.model_validate(s.location) if s.location else None,
        created_by=s.created_by,
        created_at=s.created_at,
        updated_at=s.updated_at,
        times=[TimeSlotOut.model_validate(t) for t in s.times],
        rehearsals=[RehearsalOut.model_validate(r) for r in s.rehearsals],
        musicians=[_assignment_out(a) for a in s.musicians],
        pruned_musician_ids=pruned or [],
    )


def _summary_out(s: Schedule, principal: Principal) -> ScheduleSummaryOut:
    my_status = None
    if principal.musician_id is not None:
        my_status = next(
            (a.status for a in s.musicians if a.musician_id == principal.musician_id),
            None,
        )
    return ScheduleSummaryOut(
        id=s.id,
        title=s.title,
        date=s.date,
        status=s.status,
        location=LocationMini.model_validate(s.location) if s.location else None,
        my_status=my_status,
    )


def _audit(db: Session, request: Request, principal: Principal, action: str, schedule_id: int, meta=None):
    audit_log(
        db,
        user_id=principal.user_id,
        action=action,
        entity_type="schedule",
        entity_id=schedule_id,
        meta=meta,
        ip=ip_from_request(request),
    )


# ---- endpoints ----


@router.get("/schedules", response_model=List[ScheduleSummaryOut])
def api_list_schedules(
    date_from: Optional[date] = Query(None, description="Inclusive lower bound (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="Inclusive upper bound (YYYY-MM-DD)"),
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = list_schedules(
        db, principal, date_from=date_from, date_to=date_to, status=status_filter
    )
    return [_summary_out(s, principal) for s in rows]


@router.post("/schedules", response_model=ScheduleOut, status_code=status.HTTP_201_CREATED)
def api_create_schedule(
    payload: ScheduleCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    schedule, pruned = create_schedule(db, principal, payload)
    _audit(db, request, principal, "SCHEDULE_CREATED", schedule.id, {"pruned": pruned})
    return _schedule_out(schedule, pruned)


@router.get("/schedules/{schedule_id}", response_model=ScheduleOut)
def api_get_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return _schedule_out(get_schedule(db, schedule_id, principal))


@router.put("/schedules/{schedule_id}", response_model=ScheduleOut)
def api_update_schedule(
    schedule_id: int,
    payload: ScheduleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    schedule, pruned = update_schedule(db, principal, schedule_id, payload)
    _audit(db, request, principal, "SCHEDULE_UPDATED", schedule.id, {"pruned": pruned})
    return _schedule_out(schedule, pruned)


@router.post("/schedules/{schedule_id}/confirm", response_model=ScheduleOut)
def api_confirm_schedule(
    schedule_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    schedule = confirm_schedule(db, principal, schedule_id)
    _audit(db, request, principal, "SCHEDULE_CONFIRMED", schedule_id)
    return _schedule_out(get_schedule(db, schedule.id))


@router.post("/schedules/{schedule_id}/cancel", response_model=ScheduleOut)
def api_cancel_schedule(
    schedule_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    schedule = cancel_schedule(db, principal, schedule_id)
    _audit(db, request, principal, "SCHEDULE_CANCELLED", schedule_id)
    return _schedule_out(get_schedule(db, schedule.id))


@router.delete("/schedules/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_schedule(
    schedule_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    soft_delete_schedule(db, principal, schedule_id)
    _audit(db, request, principal, "SCHEDULE_DELETED", schedule_id)


# ---- musician responses ----


@router.post("/schedules/{schedule_id}/respond", response_model=AssignmentOut)
def api_respond(
    schedule_id: int,
    payload: AssignmentResponse,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return _assignment_out(respond(db, principal, schedule_id, payload.status, payload.notes))


@router.patch("/schedules/{schedule_id}/notes", response_model=AssignmentOut)
def api_update_notes(
    schedule_id: int,
    payload: AssignmentNotesUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return _assignment_out(update_notes(db, principal, schedule_id, payload.notes))
