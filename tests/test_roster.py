import pytest

from agenda.core.errors import IncompleteSchedule, ValidationError
from agenda.services.roster import Roster


def test_empty_roster_is_incomplete():
    with pytest.raises(IncompleteSchedule):
        Roster().validate()


def test_rows_are_edited_by_index():
    roster = Roster()
    roster.add_row()
    roster.add_row()
    roster.set_musician(0, 7)
    roster.set_instrument(0, 3)
    roster.set_musician(1, 8)
    roster.set_instrument(1, 4)
    roster.remove_row(0)

    assert len(roster) == 1
    assert roster.rows[0].musician_id == 8
    assert roster.musician_ids() == {8}
    roster.validate()


def test_out_of_range_index_raises_index_error():
    roster = Roster()
    with pytest.raises(IndexError):
        roster.set_musician(0, 1)
    with pytest.raises(IndexError):
        roster.remove_row(2)


def test_half_filled_row_fails_validation():
    roster = Roster()
    roster.add_row()
    roster.set_musician(0, 1)

    with pytest.raises(ValidationError) as exc:
        roster.validate()
    assert exc.value.details == {"row": 0}


def test_musician_can_appear_only_once():
    roster = Roster()
    for instrument_id in (1, 2):
        row = roster.add_row()
        row.musician_id = 5
        row.instrument_id = instrument_id

    with pytest.raises(ValidationError) as exc:
        roster.validate()
    assert exc.value.details["musician_id"] == 5
