import json
import math
from pathlib import Path

import pytest

from badcal.config import HOUR_STEP, MAX_QUICK_ADD, RosterRules, clamp_int
from badcal.config_loader import RulesProfile, resolve_rules


def test_default_rules():
    rules = RosterRules()
    assert rules.hour_step == HOUR_STEP == 0.5
    assert rules.max_quick_add == MAX_QUICK_ADD == 50
    assert rules.default_court_hours == 2.0


def test_with_overrides_skips_none():
    rules = RosterRules().with_overrides(max_players=12, hour_step=None)
    assert rules.max_players == 12
    assert rules.hour_step == 0.5


@pytest.mark.parametrize(
    "value, expected",
    [
        (3.9, 3),
        (-4, 0),
        (500, 50),
        ("7", 7),
        ("abc", 0),
        (None, 0),
        (math.nan, 0),
        (math.inf, 0),
    ],
)
def test_clamp_int_coerces(value, expected):
    assert clamp_int(value, 0, 50) == expected


def test_profile_round_trip_and_to_rules(tmp_path: Path):
    path = tmp_path / "rules.json"
    RulesProfile(hour_step=0.25, max_players=8).save(path)

    assert json.loads(path.read_text()) == {"hour_step": 0.25, "max_players": 8}
    rules = RulesProfile.load(path).to_rules()
    assert rules.hour_step == 0.25
    assert rules.max_players == 8
    assert rules.max_quick_add == 50


def test_resolve_rules_env_overrides_profile(tmp_path: Path, monkeypatch):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"max_players": 8, "default_court_hours": 1.5}))
    monkeypatch.setenv("BADCAL_MAX_PLAYERS", "20")
    monkeypatch.setenv("BADCAL_HOUR_STEP", "not-a-number")

    rules = resolve_rules(path)

    assert rules.max_players == 20
    assert rules.default_court_hours == 1.5
    assert rules.hour_step == 0.5
