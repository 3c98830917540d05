"""Configuration helpers for roster limits and hour quantization."""

from .roster import (
    DEFAULT_COURT_HOURS,
    DEFAULT_MAX_PLAYERS,
    HOUR_STEP,
    MAX_QUICK_ADD,
    RosterRules,
    clamp_int,
)

__all__ = [
    "DEFAULT_COURT_HOURS",
    "DEFAULT_MAX_PLAYERS",
    "HOUR_STEP",
    "MAX_QUICK_ADD",
    "RosterRules",
    "clamp_int",
]
