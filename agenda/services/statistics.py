# agenda/services/statistics.py
"""
Read-only aggregates for the admin and musician dashboards.
"""
from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from agenda.models.assignment import (
    ASSIGNMENT_CONFIRMED,
    ASSIGNMENT_DECLINED,
    ASSIGNMENT_PENDING,
    Assignment,
)
from agenda.models.musician import Musician
from agenda.models.schedule import SCHEDULE_CANCELLED, Schedule
from agenda.core.clock import month_window

TOP_MUSICIANS_LIMIT = 5
UPCOMING_LIMIT = 5


# ---------- small utils ----------
def participation_rate(confirmed: int, total: int) -> float:
    """Confirmed share in percent; 0 when nothing was assigned."""
    if not total:
        return 0.0
    rate = 100.0 * confirmed / total
    return max(0.0, min(100.0, rate))


def _empty_counts() -> Dict[str, int]:
    return {ASSIGNMENT_CONFIRMED: 0, ASSIGNMENT_DECLINED: 0, ASSIGNMENT_PENDING: 0}


def top_musicians(
    rows: Iterable[Tuple[Optional[str], str]], limit: int = TOP_MUSICIANS_LIMIT
) -> List[Dict[str, object]]:
    """
    Rank musicians by participation rate.

    ``rows`` are (musician name, assignment status) pairs in input order.
    Grouping is by name; ties keep the order in which a name first appeared.
    """
    grouped: Dict[str, Dict[str, int]] = {}
    for name, status in rows:
        if not name:
            continue
        stats = grouped.setdefault(name, {"confirmed": 0, "total": 0})
        stats["total"] += 1
        if status == ASSIGNMENT_CONFIRMED:
            stats["confirmed"] += 1

    ranked = [
        {
            "name": name,
            "confirmed": s["confirmed"],
            "total": s["total"],
            "rate": participation_rate(s["confirmed"], s["total"]),
        }
        for name, s in grouped.items()
    ]
    # sorted() is stable: equal rates stay in first-appearance order
    ranked = sorted(ranked, key=lambda r: r["rate"], reverse=True)
    return ranked[:limit]


# ---------- queries ----------
def _live_assignments(db: Session):
    return db.query(Assignment).join(Schedule, Schedule.id == Assignment.schedule_id).filter(
        Schedule.deleted_at.is_(None)
    )


def _status_counts(q) -> Dict[str, int]:
    counts = _empty_counts()
    rows = q.with_entities(Assignment.status, func.count(Assignment.id)).group_by(Assignment.status).all()
    for status, n in rows:
        if status in counts:
            counts[status] = int(n or 0)
    return counts


def admin_dashboard(db: Session, today: date) -> Dict[str, object]:
    month_start, month_end = month_window(today)

    total_schedules = (
        db.query(func.count(Schedule.id))
        .filter(
            Schedule.deleted_at.is_(None),
            Schedule.date >= month_start,
            Schedule.date <= month_end,
        )
        .scalar()
        or 0
    )
    total_musicians = (
        db.query(func.count(Musician.id))
        .filter(Musician.active.is_(True), Musician.deleted_at.is_(None))
        .scalar()
        or 0
    )
    counts = _status_counts(
        _live_assignments(db).filter(Schedule.date >= month_start, Schedule.date <= month_end)
    )

    history = (
        _live_assignments(db)
        .join(Musician, Musician.id == Assignment.musician_id)
        .with_entities(Musician.name, Assignment.status)
        .order_by(Assignment.created_at.desc(), Assignment.id.desc())
        .all()
    )

    return {
        "month_start": month_start,
        "month_end": month_end,
        "total_schedules": int(total_schedules),
        "total_musicians": int(total_musicians),
        "confirmed_count": counts[ASSIGNMENT_CONFIRMED],
        "declined_count": counts[ASSIGNMENT_DECLINED],
        "pending_count": counts[ASSIGNMENT_PENDING],
        "top_musicians": top_musicians(history),
    }


def musician_dashboard(db: Session, musician_id: int, today: date) -> Dict[str, object]:
    mine = _live_assignments(db).filter(Assignment.musician_id == musician_id)
    counts = _status_counts(mine)
    total = sum(counts.values())

    upcoming_rows = (
        mine.filter(Schedule.date >= today, Schedule.status != SCHEDULE_CANCELLED)
        .with_entities(Schedule.id, Schedule.title, Schedule.date, Assignment.status)
        .order_by(Schedule.date.asc(), Schedule.id.asc())
        .limit(UPCOMING_LIMIT)
        .all()
    )
    upcoming = [
        {"id": sid, "title": title, "date": d, "status": status}
        for sid, title, d, status in upcoming_rows
    ]

    return {
        "musician_id": musician_id,
        "total_assignments": total,
        "confirmed_assignments": counts[ASSIGNMENT_CONFIRMED],
        "declined_assignments": counts[ASSIGNMENT_DECLINED],
        "pending_assignments": counts[ASSIGNMENT_PENDING],
        "participation_rate": participation_rate(counts[ASSIGNMENT_CONFIRMED], total),
        "upcoming_schedules": upcoming,
        "next_schedule": upcoming[0] if upcoming else None,
    }
