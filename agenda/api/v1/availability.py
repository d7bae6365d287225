# agenda/api/v1/availability.py
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agenda.core.auth import get_db, require_admin
from agenda.core.rbac import Principal
from agenda.schemas.musician import MusicianOut
from agenda.schemas.schedule import AssignmentIn, RosterCheckOut, RosterCheckRequest
from agenda.services.availability import eligible_musician_ids, eligible_musicians, prune_roster
from agenda.services.roster import Roster

router = APIRouter(tags=["availability"])


@router.get("/availability", response_model=List[MusicianOut])
def api_eligible_musicians(
    day: date = Query(..., alias="date", description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    """Musicians that can be assigned on the given date."""
    return eligible_musicians(db, day)


@router.post("/availability/roster", response_model=RosterCheckOut)
def api_check_roster(
    payload: RosterCheckRequest,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    """
    Re-validate a working roster after the schedule date changed.
    Rows whose musician is no longer eligible come back under ``dropped``.
    """
    roster = Roster.from_pairs(payload.musicians)
    kept, dropped = prune_roster(roster.rows, eligible_musician_ids(db, payload.date))
    return RosterCheckOut(
        date=payload.date,
        musicians=[AssignmentIn(musician_id=r.musician_id, instrument_id=r.instrument_id) for r in kept],
        dropped=[AssignmentIn(musician_id=r.musician_id, instrument_id=r.instrument_id) for r in dropped],
    )
