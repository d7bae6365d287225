# agenda/services/roster.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from agenda.core.errors import IncompleteSchedule, ValidationError


@dataclass
class RosterRow:
    musician_id: Optional[int] = None
    instrument_id: Optional[int] = None


@dataclass
class Roster:
    """
    Working list of (musician, instrument) rows while a schedule is authored.
    Rows may be half-filled until ``validate`` runs at submit time.
    """

    rows: List[RosterRow] = field(default_factory=list)

    @classmethod
    def from_pairs(cls, pairs: Iterable) -> "Roster":
        return cls(
            rows=[
                RosterRow(musician_id=p.musician_id, instrument_id=p.instrument_id)
                for p in pairs
            ]
        )

    def __len__(self) -> int:
        return len(self.rows)

    def add_row(self) -> RosterRow:
        row = RosterRow()
        self.rows.append(row)
        return row

    def remove_row(self, index: int) -> None:
        del self.rows[index]

    def set_musician(self, index: int, musician_id: int) -> None:
        self.rows[index].musician_id = musician_id

    def set_instrument(self, index: int, instrument_id: int) -> None:
        self.rows[index].instrument_id = instrument_id

    def musician_ids(self) -> Set[int]:
        return {r.musician_id for r in self.rows if r.musician_id is not None}

    def validate(self) -> None:
        if not self.rows:
            raise IncompleteSchedule("Add at least one musician to the schedule")

        seen: Set[int] = set()
        for index, row in enumerate(self.rows):
            if row.musician_id is None or row.instrument_id is None:
                raise ValidationError(
                    "Every roster row needs a musician and an instrument",
                    details={"row": index},
                )
            if row.musician_id in seen:
                raise ValidationError(
                    "A musician can only be assigned once per schedule",
                    details={"row": index, "musician_id": row.musician_id},
                )
            seen.add(row.musician_id)
