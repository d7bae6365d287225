from datetime import date, time

import pytest

from agenda.core.errors import (
    IncompleteSchedule,
    InvalidRehearsalDate,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)
from agenda.crud.assignment import respond
from agenda.crud.schedule import (
    ROSTER_POLICY_PRESERVE,
    ROSTER_POLICY_RESET,
    cancel_schedule,
    confirm_schedule,
    create_schedule,
    get_schedule,
    list_schedules,
    soft_delete_schedule,
    update_schedule,
)
from agenda.models.assignment import Assignment
from agenda.models.schedule import Schedule, ScheduleTime
from tests.utils.factories import (
    make_admin,
    make_instrument,
    make_location,
    make_musician,
    make_period,
    principal_of,
    schedule_payload,
)

DAY = date(2024, 6, 9)


@pytest.fixture()
def band(db):
    admin = make_admin(db)
    ana = make_musician(db, "Ana", with_account=True)
    bruno = make_musician(db, "Bruno", with_account=True)
    guitar = make_instrument(db, "Guitar")
    bass = make_instrument(db, "Bass")
    return admin, ana, bruno, guitar, bass


def test_create_schedule_with_children(db, band):
    admin, ana, bruno, guitar, bass = band
    location = make_location(db)
    payload = schedule_payload(
        DAY,
        [(ana.id, guitar.id), (bruno.id, bass.id)],
        rehearsals=[(date(2024, 6, 8), time(19, 0))],
        location_id=location.id,
    )

    schedule, dropped = create_schedule(db, admin, payload)

    assert dropped == []
    assert schedule.status == "draft"
    assert schedule.created_by == admin.user_id
    assert [(t.start_time, t.end_time) for t in schedule.times] == [(time(9, 0), time(11, 0))]
    assert len(schedule.rehearsals) == 1
    assert {(a.musician_id, a.status) for a in schedule.musicians} == {
        (ana.id, "pending"),
        (bruno.id, "pending"),
    }


@pytest.mark.parametrize("rehearsal_day", [DAY, date(2024, 6, 10)])
def test_rehearsal_must_precede_schedule_date(db, band, rehearsal_day):
    admin, ana, _, guitar, _ = band
    payload = schedule_payload(
        DAY, [(ana.id, guitar.id)], rehearsals=[(rehearsal_day, time(19, 0))]
    )

    with pytest.raises(InvalidRehearsalDate):
        create_schedule(db, admin, payload)
    assert db.query(Schedule).count() == 0


def test_schedule_needs_time_slot_and_roster(db, band):
    admin, ana, _, guitar, _ = band

    with pytest.raises(IncompleteSchedule):
        create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)], times=()))
    with pytest.raises(IncompleteSchedule):
        create_schedule(db, admin, schedule_payload(DAY, []))
    assert db.query(Schedule).count() == 0


def test_unknown_references_are_not_found(db, band):
    admin, ana, _, guitar, _ = band

    with pytest.raises(NotFoundError):
        create_schedule(db, admin, schedule_payload(DAY, [(999, guitar.id)]))
    with pytest.raises(NotFoundError):
        create_schedule(db, admin, schedule_payload(DAY, [(ana.id, 999)]))
    with pytest.raises(NotFoundError):
        create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)], location_id=999))


def test_unavailable_musicians_are_pruned(db, band):
    admin, ana, bruno, guitar, bass = band
    make_period(db, bruno, date(2024, 6, 1), date(2024, 6, 30))

    schedule, dropped = create_schedule(
        db, admin, schedule_payload(DAY, [(ana.id, guitar.id), (bruno.id, bass.id)])
    )

    assert dropped == [bruno.id]
    assert [a.musician_id for a in schedule.musicians] == [ana.id]


def test_roster_emptied_by_pruning_is_incomplete(db, band):
    admin, ana, _, guitar, _ = band
    make_period(db, ana, DAY, DAY)

    with pytest.raises(IncompleteSchedule):
        create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)]))
    assert db.query(Schedule).count() == 0


def test_only_admins_write_schedules(db, band):
    _, ana, _, guitar, _ = band

    with pytest.raises(PermissionDenied):
        create_schedule(db, principal_of(db, ana), schedule_payload(DAY, [(ana.id, guitar.id)]))


def test_update_replaces_time_slots(db, band):
    admin, ana, _, guitar, _ = band
    schedule, _ = create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)]))

    updated, _ = update_schedule(
        db,
        admin,
        schedule.id,
        schedule_payload(DAY, [(ana.id, guitar.id)], times=[(time(14, 0), time(16, 0))]),
    )

    assert [(t.start_time, t.end_time) for t in updated.times] == [(time(14, 0), time(16, 0))]
    assert db.query(ScheduleTime).count() == 1


def test_update_to_new_date_prunes_unavailable_musicians(db, band):
    admin, ana, bruno, guitar, bass = band
    roster = [(ana.id, guitar.id), (bruno.id, bass.id)]
    schedule, _ = create_schedule(db, admin, schedule_payload(DAY, roster))
    new_day = date(2024, 6, 16)
    make_period(db, bruno, new_day, new_day)

    updated, dropped = update_schedule(db, admin, schedule.id, schedule_payload(new_day, roster))

    assert dropped == [bruno.id]
    assert updated.date == new_day
    assert [a.musician_id for a in updated.musicians] == [ana.id]


def test_update_rehearsal_must_precede_new_date(db, band):
    admin, ana, _, guitar, _ = band
    schedule, _ = create_schedule(
        db,
        admin,
        schedule_payload(DAY, [(ana.id, guitar.id)], rehearsals=[(date(2024, 6, 8), time(19, 0))]),
    )

    # moving the service earlier leaves the rehearsal on the new date
    with pytest.raises(InvalidRehearsalDate):
        update_schedule(
            db,
            admin,
            schedule.id,
            schedule_payload(
                date(2024, 6, 8), [(ana.id, guitar.id)], rehearsals=[(date(2024, 6, 8), time(19, 0))]
            ),
        )

    db.refresh(schedule)
    assert schedule.date == DAY


def test_cancelled_schedule_cannot_be_edited(db, band):
    admin, ana, _, guitar, _ = band
    schedule, _ = create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)]))
    cancel_schedule(db, admin, schedule.id)

    with pytest.raises(ValidationError):
        update_schedule(
            db, admin, schedule.id, schedule_payload(date(2024, 6, 16), [(ana.id, guitar.id)])
        )

    db.refresh(schedule)
    assert (schedule.status, schedule.date) == ("cancelled", DAY)


def test_unknown_roster_policy_is_rejected(db, band):
    admin, ana, _, guitar, _ = band
    schedule, _ = create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)]))

    with pytest.raises(ValidationError):
        update_schedule(db, admin, schedule.id, schedule_payload(DAY, [(ana.id, guitar.id)]), policy="merge")


def test_reset_policy_returns_everyone_to_pending(db, band):
    admin, ana, bruno, guitar, bass = band
    roster = [(ana.id, guitar.id), (bruno.id, bass.id)]
    schedule, _ = create_schedule(db, admin, schedule_payload(DAY, roster))
    confirm_schedule(db, admin, schedule.id)
    respond(db, principal_of(db, ana), schedule.id, "confirmed", "see you there")

    updated, _ = update_schedule(
        db, admin, schedule.id, schedule_payload(DAY, roster), policy=ROSTER_POLICY_RESET
    )

    assert updated.status == "draft"
    assert {(a.status, a.notes) for a in updated.musicians} == {("pending", None)}


def test_preserve_policy_keeps_unchanged_rows(db, band):
    admin, ana, bruno, guitar, bass = band
    schedule, _ = create_schedule(
        db, admin, schedule_payload(DAY, [(ana.id, guitar.id), (bruno.id, bass.id)])
    )
    respond(db, principal_of(db, ana), schedule.id, "confirmed", "ok")
    respond(db, principal_of(db, bruno), schedule.id, "declined", "away")

    # bruno switches instrument, ana stays on guitar
    updated, _ = update_schedule(
        db,
        admin,
        schedule.id,
        schedule_payload(DAY, [(ana.id, guitar.id), (bruno.id, guitar.id)]),
        policy=ROSTER_POLICY_PRESERVE,
    )

    by_musician = {a.musician_id: a for a in updated.musicians}
    assert (by_musician[ana.id].status, by_musician[ana.id].notes) == ("confirmed", "ok")
    assert (by_musician[bruno.id].status, by_musician[bruno.id].notes) == ("pending", None)
    assert db.query(Assignment).count() == 2


def test_status_transitions(db, band):
    admin, ana, _, guitar, _ = band
    schedule, _ = create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)]))

    assert confirm_schedule(db, admin, schedule.id).status == "confirmed"
    with pytest.raises(ValidationError):
        confirm_schedule(db, admin, schedule.id)

    assert cancel_schedule(db, admin, schedule.id).status == "cancelled"
    with pytest.raises(ValidationError):
        cancel_schedule(db, admin, schedule.id)
    with pytest.raises(ValidationError):
        confirm_schedule(db, admin, schedule.id)
    with pytest.raises(ValidationError):
        update_schedule(db, admin, schedule.id, schedule_payload(DAY, [(ana.id, guitar.id)]))


def test_responses_never_confirm_the_schedule(db, band):
    admin, ana, _, guitar, _ = band
    schedule, _ = create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)]))

    respond(db, principal_of(db, ana), schedule.id, "confirmed")

    assert get_schedule(db, schedule.id).status == "draft"


def test_musicians_list_only_their_schedules(db, band):
    admin, ana, bruno, guitar, bass = band
    mine, _ = create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)]))
    create_schedule(db, admin, schedule_payload(date(2024, 6, 16), [(bruno.id, bass.id)]))

    assert [s.id for s in list_schedules(db, principal_of(db, ana))] == [mine.id]
    assert len(list_schedules(db, admin)) == 2
    assert len(list_schedules(db, admin, date_from=date(2024, 6, 10))) == 1

    with pytest.raises(PermissionDenied):
        get_schedule(db, mine.id, principal_of(db, bruno))


def test_soft_deleted_schedule_disappears(db, band):
    admin, ana, _, guitar, _ = band
    schedule, _ = create_schedule(db, admin, schedule_payload(DAY, [(ana.id, guitar.id)]))

    soft_delete_schedule(db, admin, schedule.id)

    assert list_schedules(db, admin) == []
    with pytest.raises(NotFoundError):
        get_schedule(db, schedule.id)
