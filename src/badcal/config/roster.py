"""Roster limits and hour-step configuration."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any

HOUR_STEP = 0.5
MAX_QUICK_ADD = 50
DEFAULT_MAX_PLAYERS = 100
DEFAULT_COURT_HOURS = 2.0


@dataclass(frozen=True)
class RosterRules:
    hour_step: float = HOUR_STEP
    max_players: int = DEFAULT_MAX_PLAYERS
    max_quick_add: int = MAX_QUICK_ADD
    default_court_hours: float = DEFAULT_COURT_HOURS

    def with_overrides(self, **overrides: Any) -> "RosterRules":
        """Return a copy with the non-``None`` overrides applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def clamp_int(value: Any, lo: int, hi: int) -> int:
    """Floor ``value`` into ``[lo, hi]``; anything non-numeric or non-finite becomes ``lo``."""

    try:
        number = float(value)
    except (TypeError, ValueError):
        return lo
    if not math.isfinite(number):
        return lo
    return max(lo, min(hi, math.floor(number)))
