import math

import pytest

from badcal.buckets import (
    Advisory,
    BucketContext,
    build_bucket_view_models,
    index_by_bucket,
    normalize_hours,
    set_count_for_bucket,
)
from badcal.errors import RosterInvariantError
from badcal.models import Player


def _context(max_players: int = 10, next_id: int = 100, step: float = 0.5) -> BucketContext:
    return BucketContext(step=step, max_players=max_players, next_id=next_id)


def _named(count: int, hours: float = 2, start: int = 1) -> list[Player]:
    return [Player(id=start + i, name=f"Player {start + i}", hours=hours) for i in range(count)]


def _anonymous(count: int, hours: float = 2, start: int = 50) -> list[Player]:
    return [Player(id=start + i, name="", hours=hours) for i in range(count)]


@pytest.mark.parametrize(
    "step, hours, expected",
    [
        (0.5, 1.2, 1.0),
        (0.5, 1.25, 1.5),
        (0.5, 1.74, 1.5),
        (0.5, 2, 2.0),
        (0.5, -1, 0.0),
        (0.5, math.nan, 0.0),
        (0.5, math.inf, 0.0),
        (0.5, "abc", 0.0),
        (0, 1.37, 1.37),
        (-1, 1.37, 1.37),
        (0.1, 0.3, 0.3),
        (1e-10, 5e-10, 5e-10),
        (1e-10, 5.4e-10, 5e-10),
    ],
)
def test_normalize_hours(step, hours, expected):
    assert normalize_hours(step, hours) == pytest.approx(expected)


@pytest.mark.parametrize("step", [0.1, 0.25, 0.5, 1.0, 1.5])
def test_normalize_hours_is_idempotent_and_monotonic(step):
    values = [i * 0.07 for i in range(200)]
    snapped = [normalize_hours(step, value) for value in values]

    assert all(normalize_hours(step, value) == value for value in snapped)
    assert all(a <= b for a, b in zip(snapped, snapped[1:]))


def test_index_by_bucket_counts_named_and_anonymous():
    players = [
        Player(id=1, name="Ann", hours=2),
        Player(id=2, name="", hours=2.1),
        Player(id=3, name=" ", hours=1),
        Player(id=4, name="Bob", hours=1.9),
    ]

    index = index_by_bucket(players, 0.5)

    assert set(index) == {1.0, 2.0}
    assert index[2.0].count == 3
    assert index[2.0].named_count == 2
    assert index[2.0].named_ids == [1, 4]
    assert index[2.0].anonymous_ids == [2]
    assert index[1.0].anonymous_ids == [3]


def test_view_models_include_empty_default_bucket():
    players = [Player(id=1, name="Ann", hours=3), Player(id=2, name="", hours=1)]

    buckets = build_bucket_view_models(players, default_hours=2, step=0.5)

    assert [bucket.hours for bucket in buckets] == [1.0, 2.0, 3.0]
    assert [bucket.is_default for bucket in buckets] == [False, True, False]
    assert buckets[1].count == 0


def test_view_models_single_default_flag_for_populated_default():
    players = _named(2, hours=2) + _anonymous(1, hours=2)

    buckets = build_bucket_view_models(players, default_hours=2.1, step=0.5)

    assert len(buckets) == 1
    assert buckets[0].is_default
    assert buckets[0].count == 3
    assert buckets[0].named_count == 2


def test_scenario_grow_bucket_with_named_player():
    roster = [Player(id=1, name="Ann", hours=2)]

    update = set_count_for_bucket(roster, 2, 3, _context(max_players=10, next_id=100))

    assert len(update.players) == 3
    assert update.players[0] == roster[0]
    assert all(player.hours == 2 for player in update.players)
    assert [player.id for player in update.players[1:]] == [100, 101]
    assert all(not player.is_named for player in update.players[1:])
    assert update.next_id == 102
    assert update.advisory is None


def test_scenario_all_named_cannot_shrink():
    roster = _named(5, hours=2)

    update = set_count_for_bucket(roster, 2, 2, _context())

    assert update.players == roster
    assert update.advisory is Advisory.CANNOT_REMOVE_NAMED
    assert update.next_id == 100


def test_scenario_capacity_limited_growth():
    roster = _named(9, hours=1)

    update = set_count_for_bucket(roster, 2, 5, _context(max_players=10))

    assert len(update.players) == 10
    assert [player.hours for player in update.players[9:]] == [2.0]
    assert update.advisory is Advisory.MAX_PLAYERS
    assert update.next_id == 101


def test_growth_at_full_roster_flags_max_players():
    roster = _named(10, hours=1)

    update = set_count_for_bucket(roster, 1, 11, _context(max_players=10))

    assert update.players == roster
    assert update.advisory is Advisory.MAX_PLAYERS


def test_same_count_is_noop():
    roster = _named(2) + _anonymous(1)

    update = set_count_for_bucket(roster, 2, 3, _context())

    assert update.players == roster
    assert update.advisory is None
    assert update.next_id == 100


def test_target_bucket_is_normalized():
    roster = _anonymous(2, hours=1.5)

    update = set_count_for_bucket(roster, 1.6, 3, _context())

    assert update.players[-1].hours == 1.5


def test_shrink_removes_newest_anonymous_first():
    roster = [
        Player(id=1, name="", hours=2),
        Player(id=2, name="Ann", hours=2),
        Player(id=3, name="", hours=2),
        Player(id=4, name="", hours=1),
        Player(id=5, name="", hours=2),
    ]

    update = set_count_for_bucket(roster, 2, 2, _context())

    assert [player.id for player in update.players] == [1, 2, 4]
    assert update.advisory is None


def test_shrink_below_named_floor_caps_and_flags():
    roster = _named(2) + _anonymous(3)

    update = set_count_for_bucket(roster, 2, 1, _context())

    assert [player.id for player in update.players] == [1, 2]
    assert update.advisory is Advisory.CANNOT_REMOVE_NAMED


def test_shrink_exactly_to_named_floor_has_no_advisory():
    roster = _named(2) + _anonymous(3)

    update = set_count_for_bucket(roster, 2, 2, _context())

    assert [player.id for player in update.players] == [1, 2]
    assert update.advisory is None


def test_shrink_leaves_other_buckets_alone():
    roster = _anonymous(3, hours=2) + _anonymous(2, hours=3, start=80)

    update = set_count_for_bucket(roster, 2, 0, _context())

    assert [player.id for player in update.players] == [80, 81]


def test_desired_count_is_coerced():
    roster = _anonymous(2)

    negative = set_count_for_bucket(roster, 2, -5, _context())
    garbage = set_count_for_bucket(roster, 2, "lots", _context())
    fractional = set_count_for_bucket(roster, 2, 3.9, _context())

    assert negative.players == []
    assert garbage.players == []
    assert len(fractional.players) == 3


def test_roster_never_exceeds_max_players():
    roster = _named(3, hours=1) + _anonymous(3, hours=2)
    for hours in (0.5, 1, 2, 3):
        for desired in range(0, 15):
            update = set_count_for_bucket(roster, hours, desired, _context(max_players=8))
            assert len(update.players) <= 8


def test_named_player_kept_while_anonymous_remain():
    roster = [
        Player(id=1, name="Ann", hours=2),
        Player(id=2, name="", hours=2),
        Player(id=3, name="Bob", hours=2),
        Player(id=4, name="", hours=2),
    ]
    named_ids = {1, 3}
    for desired in range(0, 4):
        update = set_count_for_bucket(roster, 2, desired, _context())
        assert named_ids <= {player.id for player in update.players}


def test_growth_id_clash_is_invariant_error():
    roster = [Player(id=100, name="Ann", hours=2)]

    with pytest.raises(RosterInvariantError):
        set_count_for_bucket(roster, 2, 2, _context(next_id=100))


def test_duplicate_ids_detected_on_shrink():
    roster = [Player(id=7, name="", hours=2), Player(id=7, name="", hours=2)]

    with pytest.raises(RosterInvariantError):
        set_count_for_bucket(roster, 2, 1, _context())
