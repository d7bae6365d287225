from datetime import date

import pytest

from agenda.crud.assignment import respond
from agenda.crud.schedule import create_schedule, soft_delete_schedule
from agenda.services.statistics import (
    admin_dashboard,
    musician_dashboard,
    participation_rate,
    top_musicians,
)
from tests.utils.factories import (
    make_admin,
    make_instrument,
    make_musician,
    principal_of,
    schedule_payload,
)


def test_rate_is_zero_without_assignments():
    assert participation_rate(0, 0) == 0.0


@pytest.mark.parametrize(
    "confirmed,total,expected",
    [(1, 4, 25.0), (4, 4, 100.0), (5, 4, 100.0), (-1, 4, 0.0)],
)
def test_rate_is_clamped(confirmed, total, expected):
    assert participation_rate(confirmed, total) == expected


def test_top_musicians_ranked_by_rate_with_stable_ties():
    rows = [
        ("Bia", "confirmed"),
        ("Ana", "declined"),
        ("Caio", "confirmed"),
        ("Ana", "confirmed"),
        (None, "confirmed"),
        ("Bia", "pending"),
    ]

    ranked = top_musicians(rows)

    assert [(r["name"], r["confirmed"], r["total"]) for r in ranked] == [
        ("Caio", 1, 1),
        ("Bia", 1, 2),
        ("Ana", 1, 2),
    ]
    assert ranked[1]["rate"] == 50.0


def test_top_musicians_limited_to_five():
    rows = [(f"M{i}", "confirmed") for i in range(8)]

    assert [r["name"] for r in top_musicians(rows)] == ["M0", "M1", "M2", "M3", "M4"]


@pytest.fixture()
def june(db):
    admin = make_admin(db)
    ana = make_musician(db, "Ana", with_account=True)
    bruno = make_musician(db, "Bruno", with_account=True)
    make_musician(db, "Carla", active=False)
    guitar = make_instrument(db, "Guitar")
    bass = make_instrument(db, "Bass")
    roster = [(ana.id, guitar.id), (bruno.id, bass.id)]

    first, _ = create_schedule(db, admin, schedule_payload(date(2024, 6, 2), roster))
    second, _ = create_schedule(db, admin, schedule_payload(date(2024, 6, 23), roster))
    july, _ = create_schedule(db, admin, schedule_payload(date(2024, 7, 7), roster))
    gone, _ = create_schedule(db, admin, schedule_payload(date(2024, 6, 30), roster))

    respond(db, principal_of(db, ana), first.id, "confirmed")
    respond(db, principal_of(db, ana), second.id, "confirmed")
    respond(db, principal_of(db, bruno), first.id, "declined")
    respond(db, principal_of(db, ana), gone.id, "declined")
    soft_delete_schedule(db, admin, gone.id)
    return admin, ana, bruno, first, second, july


def test_admin_dashboard_counts_current_month(db, june):
    stats = admin_dashboard(db, date(2024, 6, 15))

    assert stats["month_start"] == date(2024, 6, 1)
    assert stats["month_end"] == date(2024, 6, 30)
    assert stats["total_schedules"] == 2
    assert stats["total_musicians"] == 2
    assert (stats["confirmed_count"], stats["declined_count"], stats["pending_count"]) == (2, 1, 1)
    assert [t["name"] for t in stats["top_musicians"]] == ["Ana", "Bruno"]


def test_musician_dashboard(db, june):
    _, ana, _, _, second, july = june

    stats = musician_dashboard(db, ana.id, date(2024, 6, 15))

    assert stats["total_assignments"] == 3
    assert stats["confirmed_assignments"] == 2
    assert stats["pending_assignments"] == 1
    assert stats["declined_assignments"] == 0
    assert stats["participation_rate"] == pytest.approx(200 / 3)
    assert [u["id"] for u in stats["upcoming_schedules"]] == [second.id, july.id]
    assert stats["next_schedule"]["id"] == second.id
