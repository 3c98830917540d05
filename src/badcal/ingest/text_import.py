"""Parse free-form roster text (one player per line) into player records."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from badcal.models import Player


# "Ann 3", "Ann, 1.5", "Mary Jane ,2": trailing number is the hours value.
_NAME_HOURS_PATTERN = re.compile(r"^(.+?)[\s,]+(\d+(?:\.\d+)?)$")


class ImportedRow(BaseModel):
    name: str
    hours: Optional[float] = Field(default=None, ge=0.0)
    line: str = ""

    @property
    def has_explicit_hours(self) -> bool:
        return self.hours is not None


def parse_roster_text(text: str) -> List[ImportedRow]:
    rows: List[ImportedRow] = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue
        match = _NAME_HOURS_PATTERN.match(trimmed)
        if match:
            rows.append(ImportedRow(name=match.group(1).strip(), hours=float(match.group(2)), line=trimmed))
        else:
            rows.append(ImportedRow(name=trimmed, line=trimmed))
    return rows


def rows_to_players(rows: Sequence[ImportedRow], *, start_id: int, default_hours: float) -> List[Player]:
    """Rows without explicit hours land on ``default_hours``; ids run from ``start_id``."""

    return [
        Player(
            id=start_id + index,
            name=row.name,
            hours=row.hours if row.hours is not None else default_hours,
        )
        for index, row in enumerate(rows)
    ]
