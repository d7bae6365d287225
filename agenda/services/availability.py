# agenda/services/availability.py
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Set, Tuple

from sqlalchemy.orm import Session

from agenda.models.musician import Musician
from agenda.models.unavailability import UnavailabilityPeriod
from agenda.services.roster import RosterRow

log = logging.getLogger(__name__)


def unavailable_musician_ids(db: Session, day: date) -> Set[int]:
    """Ids of musicians with a live unavailability period covering ``day`` (inclusive)."""
    rows = (
        db.query(UnavailabilityPeriod.musician_id)
        .filter(
            UnavailabilityPeriod.start_date <= day,
            UnavailabilityPeriod.end_date >= day,
            UnavailabilityPeriod.deleted_at.is_(None),
        )
        .all()
    )
    # overlapping periods collapse here
    return {mid for (mid,) in rows}


def eligible_musicians(db: Session, day: date) -> List[Musician]:
    """
    Musicians that can be assigned on ``day``:
    active, not soft-deleted, and not marked unavailable for that date.
    """
    active = (
        db.query(Musician)
        .filter(Musician.active.is_(True), Musician.deleted_at.is_(None))
        .order_by(Musician.name.asc(), Musician.id.asc())
        .all()
    )
    excluded = unavailable_musician_ids(db, day)
    return [m for m in active if m.id not in excluded]


def eligible_musician_ids(db: Session, day: date) -> Set[int]:
    return {m.id for m in eligible_musicians(db, day)}


def prune_roster(
    rows: Iterable[RosterRow], eligible_ids: Set[int]
) -> Tuple[List[RosterRow], List[RosterRow]]:
    """
    Split a working roster into (kept, dropped) against the eligible set.
    Rows without a musician yet are kept; submit-time validation deals with them.
    """
    kept: List[RosterRow] = []
    dropped: List[RosterRow] = []
    for row in rows:
        if row.musician_id is not None and row.musician_id not in eligible_ids:
            dropped.append(row)
        else:
            kept.append(row)
    if dropped:
        log.info(
            "roster pruned: dropped musician_ids=%s",
            [r.musician_id for r in dropped],
        )
    return kept, dropped
