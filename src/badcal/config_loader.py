"""Persist and load roster rule profiles."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from badcal.config import RosterRules


logger = logging.getLogger(__name__)

ENV_OVERRIDES: dict[str, tuple[str, Callable[[str], object]]] = {
    "BADCAL_HOUR_STEP": ("hour_step", float),
    "BADCAL_MAX_PLAYERS": ("max_players", int),
    "BADCAL_MAX_QUICK_ADD": ("max_quick_add", int),
    "BADCAL_COURT_HOURS": ("default_court_hours", float),
}


@dataclass
class RulesProfile:
    hour_step: Optional[float] = None
    max_players: Optional[int] = None
    max_quick_add: Optional[int] = None
    default_court_hours: Optional[float] = None

    @classmethod
    def load(cls, path: Path) -> "RulesProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            hour_step=data.get("hour_step"),
            max_players=data.get("max_players"),
            max_quick_add=data.get("max_quick_add"),
            default_court_hours=data.get("default_court_hours"),
        )

    def save(self, path: Path) -> None:
        payload = {
            "hour_step": self.hour_step,
            "max_players": self.max_players,
            "max_quick_add": self.max_quick_add,
            "default_court_hours": self.default_court_hours,
        }
        payload = {key: value for key, value in payload.items() if value is not None}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def to_rules(self, base: RosterRules | None = None) -> RosterRules:
        return (base or RosterRules()).with_overrides(
            hour_step=self.hour_step,
            max_players=self.max_players,
            max_quick_add=self.max_quick_add,
            default_court_hours=self.default_court_hours,
        )


def _env_overrides() -> dict[str, object]:
    overrides: dict[str, object] = {}
    for env_name, (field_name, parse) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            continue
        try:
            overrides[field_name] = parse(raw.strip())
        except ValueError:
            logger.warning("Ignoring %s=%r: not a valid %s", env_name, raw, parse.__name__)
    return overrides


def resolve_rules(path: Path | None = None) -> RosterRules:
    """Build rules from defaults, an optional JSON profile, then ``BADCAL_*`` env vars."""

    rules = RosterRules()
    if path is not None:
        rules = RulesProfile.load(path).to_rules(rules)
    return rules.with_overrides(**_env_overrides())
