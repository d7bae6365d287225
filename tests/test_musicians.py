from datetime import date

import pytest

from agenda.core.errors import DuplicateError, NotFoundError, PermissionDenied, ValidationError
from agenda.crud.catalog import create_instrument
from agenda.crud.musician import list_musicians, soft_delete_musician, toggle_active, update_profile
from agenda.crud.unavailability import create_period, list_periods, soft_delete_period
from agenda.crud.user import change_password
from agenda.schemas.musician import MusicianProfileUpdate
from agenda.schemas.unavailability import UnavailabilityCreate
from agenda.services.availability import eligible_musician_ids
from tests.utils.factories import make_admin, make_musician, principal_of


def test_directory_visibility(db):
    admin = make_admin(db)
    ana = make_musician(db, "Ana", with_account=True)
    make_musician(db, "Bruno")

    assert [m.name for m in list_musicians(db, admin)] == ["Ana", "Bruno"]
    assert [m.name for m in list_musicians(db, principal_of(db, ana))] == ["Ana"]


def test_toggle_and_soft_delete(db):
    admin = make_admin(db)
    ana = make_musician(db, "Ana")

    assert toggle_active(db, admin, ana.id).active is False
    assert eligible_musician_ids(db, date(2024, 6, 1)) == set()
    assert toggle_active(db, admin, ana.id).active is True

    soft_delete_musician(db, admin, ana.id)
    assert list_musicians(db, admin) == []
    with pytest.raises(NotFoundError):
        toggle_active(db, admin, ana.id)


def test_musicians_cannot_manage_directory(db):
    ana = make_musician(db, "Ana", with_account=True)

    with pytest.raises(PermissionDenied):
        toggle_active(db, principal_of(db, ana), ana.id)


def test_update_own_profile(db):
    ana = make_musician(db, "Ana", with_account=True)

    updated = update_profile(db, principal_of(db, ana), MusicianProfileUpdate(whatsapp="+551100"))

    assert (updated.name, updated.whatsapp) == ("Ana", "+551100")


def test_unavailability_is_owned(db):
    admin = make_admin(db)
    ana = make_musician(db, "Ana", with_account=True)
    bruno = make_musician(db, "Bruno", with_account=True)
    me = principal_of(db, ana)

    period = create_period(
        db, me, UnavailabilityCreate(start_date=date(2024, 6, 1), end_date=date(2024, 6, 5))
    )
    assert [p.id for p in list_periods(db, me)] == [period.id]
    assert list_periods(db, principal_of(db, bruno)) == []
    assert eligible_musician_ids(db, date(2024, 6, 2)) == {bruno.id}

    with pytest.raises(PermissionDenied):
        soft_delete_period(db, principal_of(db, bruno), period.id)

    soft_delete_period(db, admin, period.id)
    assert list_periods(db, admin) == []


def test_unavailability_range_must_be_ordered():
    with pytest.raises(ValueError):
        UnavailabilityCreate(start_date=date(2024, 6, 5), end_date=date(2024, 6, 1))


def test_change_password_checks_current(db):
    ana = make_musician(db, "Ana", with_account=True)

    with pytest.raises(ValidationError):
        change_password(db, principal_of(db, ana), "wrong-one", "newsecret")
    change_password(db, principal_of(db, ana), "secret123", "newsecret")


def test_instrument_names_are_unique(db):
    admin = make_admin(db)
    create_instrument(db, admin, "Guitar")

    with pytest.raises(DuplicateError):
        create_instrument(db, admin, " guitar ")
