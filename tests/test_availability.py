from datetime import date

from agenda.services.availability import (
    eligible_musician_ids,
    eligible_musicians,
    prune_roster,
    unavailable_musician_ids,
)
from agenda.services.roster import RosterRow
from tests.utils.factories import make_musician, make_period


def _june_roster(db):
    ana = make_musician(db, "Ana")
    bruno = make_musician(db, "Bruno")
    carla = make_musician(db, "Carla", active=False)
    davi = make_musician(db, "Davi", deleted=True)
    make_period(db, bruno, date(2024, 6, 1), date(2024, 6, 5))
    return ana, bruno, carla, davi


def test_unavailable_inactive_and_deleted_are_excluded(db):
    ana, bruno, carla, davi = _june_roster(db)

    eligible = eligible_musicians(db, date(2024, 6, 3))

    assert [m.id for m in eligible] == [ana.id]


def test_period_bounds_are_inclusive(db):
    ana, bruno, _, _ = _june_roster(db)

    assert bruno.id not in eligible_musician_ids(db, date(2024, 6, 1))
    assert bruno.id not in eligible_musician_ids(db, date(2024, 6, 5))
    assert eligible_musician_ids(db, date(2024, 6, 6)) == {ana.id, bruno.id}
    assert eligible_musician_ids(db, date(2024, 5, 31)) == {ana.id, bruno.id}


def test_overlapping_periods_exclude_once(db):
    ana = make_musician(db, "Ana")
    make_period(db, ana, date(2024, 6, 1), date(2024, 6, 10))
    make_period(db, ana, date(2024, 6, 3), date(2024, 6, 4))

    assert unavailable_musician_ids(db, date(2024, 6, 3)) == {ana.id}
    assert eligible_musicians(db, date(2024, 6, 3)) == []


def test_deleted_period_does_not_exclude(db):
    ana = make_musician(db, "Ana")
    make_period(db, ana, date(2024, 6, 1), date(2024, 6, 5), deleted=True)

    assert eligible_musician_ids(db, date(2024, 6, 3)) == {ana.id}


def test_eligible_musicians_ordered_by_name(db):
    make_musician(db, "Zeca")
    make_musician(db, "Ana")
    make_musician(db, "Marta")

    assert [m.name for m in eligible_musicians(db, date(2024, 6, 3))] == ["Ana", "Marta", "Zeca"]


def test_prune_roster_drops_only_ineligible_rows():
    rows = [
        RosterRow(musician_id=1, instrument_id=10),
        RosterRow(musician_id=2, instrument_id=11),
        RosterRow(),
    ]

    kept, dropped = prune_roster(rows, {1})

    assert [r.musician_id for r in kept] == [1, None]
    assert [r.musician_id for r in dropped] == [2]
