"""Helpers for grouping a roster into hour buckets and resizing a bucket."""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Sequence

from badcal.config import clamp_int
from badcal.errors import RosterInvariantError
from badcal.models import Player


logger = logging.getLogger(__name__)

# Snapped values keep this many decimals beyond the step's own magnitude so
# float noise such as 0.30000000000000004 does not open a second bucket next to 0.3.
_HOURS_PRECISION = 9


class Advisory(str, Enum):
    """Non-fatal policy outcome surfaced to the UI as a toast reason."""

    MAX_PLAYERS = "MAX_PLAYERS"
    CANNOT_REMOVE_NAMED = "CANNOT_REMOVE_NAMED"


@dataclass
class BucketStats:
    """Players sharing one normalized hours value, in roster order."""

    hours: float
    count: int = 0
    named_count: int = 0
    anonymous_ids: list[int] = field(default_factory=list)
    named_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class BucketViewModel:
    hours: float
    count: int
    named_count: int
    is_default: bool


@dataclass(frozen=True)
class BucketContext:
    step: float
    max_players: int
    next_id: int


@dataclass(frozen=True)
class BucketUpdate:
    """Full roster after a bucket edit plus the advanced id counter."""

    players: list[Player]
    next_id: int
    advisory: Advisory | None = None


def normalize_hours(step: Any, hours: Any) -> float:
    """Snap ``hours`` to the nearest multiple of ``step`` (ties round up), never below 0.

    Non-numeric, non-finite and negative hours become 0. A non-positive step
    leaves the value as-is.
    """

    try:
        value = float(hours)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0

    try:
        step_value = float(step)
    except (TypeError, ValueError):
        step_value = 0.0
    if not math.isfinite(step_value) or step_value <= 0:
        return value

    snapped = math.floor(value / step_value + 0.5) * step_value
    decimals = _HOURS_PRECISION + max(0, -math.floor(math.log10(step_value)))
    return max(0.0, round(snapped, decimals))


def index_by_bucket(players: Iterable[Player], step: float) -> dict[float, BucketStats]:
    buckets: dict[float, BucketStats] = {}
    for player in players:
        hours = normalize_hours(step, player.hours)
        stats = buckets.get(hours)
        if stats is None:
            stats = buckets[hours] = BucketStats(hours=hours)
        stats.count += 1
        if player.is_named:
            stats.named_count += 1
            stats.named_ids.append(player.id)
        else:
            stats.anonymous_ids.append(player.id)
    return buckets


def build_bucket_view_models(
    players: Iterable[Player],
    default_hours: float,
    step: float,
) -> list[BucketViewModel]:
    """Visible buckets: every populated bucket plus the default one, ascending by hours."""

    index = index_by_bucket(players, step)
    default_bucket = normalize_hours(step, default_hours)
    visible = set(index) | {default_bucket}

    view_models: list[BucketViewModel] = []
    for hours in sorted(visible):
        stats = index.get(hours) or BucketStats(hours=hours)
        view_models.append(
            BucketViewModel(
                hours=hours,
                count=stats.count,
                named_count=stats.named_count,
                is_default=hours == default_bucket,
            )
        )
    return view_models


def set_count_for_bucket(
    players: Sequence[Player],
    target_hours: float,
    desired_count: Any,
    context: BucketContext,
) -> BucketUpdate:
    """Grow or shrink one bucket to ``desired_count`` players.

    Growth adds anonymous players at the bucket's hours, limited by
    ``context.max_players``. Shrinking removes anonymous players first, newest
    first, and never goes below the bucket's named count. Policy limits are
    reported through ``BucketUpdate.advisory``; nothing here raises for them.
    """

    roster = list(players)
    bucket_hours = normalize_hours(context.step, target_hours)
    stats = index_by_bucket(roster, context.step).get(bucket_hours) or BucketStats(hours=bucket_hours)
    desired = clamp_int(desired_count, 0, sys.maxsize)

    delta = desired - stats.count
    if delta == 0:
        return BucketUpdate(players=roster, next_id=context.next_id)
    if delta > 0:
        return _grow_bucket(roster, bucket_hours, delta, context)
    return _shrink_bucket(roster, stats, desired, -delta, context)


def _grow_bucket(
    roster: list[Player],
    bucket_hours: float,
    requested: int,
    context: BucketContext,
) -> BucketUpdate:
    capacity = max(0, context.max_players - len(roster))
    actual = min(requested, capacity)

    existing_ids = {player.id for player in roster}
    added = [Player(id=context.next_id + offset, name="", hours=bucket_hours) for offset in range(actual)]
    clashes = [player.id for player in added if player.id in existing_ids]
    if clashes:
        raise RosterInvariantError(f"new player ids already present in roster: {clashes}")

    advisory = Advisory.MAX_PLAYERS if actual < requested or actual == 0 else None
    logger.debug(
        "Bucket %s: requested +%d, added %d (capacity %d)", bucket_hours, requested, actual, capacity
    )
    return BucketUpdate(players=roster + added, next_id=context.next_id + actual, advisory=advisory)


def _shrink_bucket(
    roster: list[Player],
    stats: BucketStats,
    desired: int,
    requested: int,
    context: BucketContext,
) -> BucketUpdate:
    max_removable = stats.count - stats.named_count
    if max_removable <= 0:
        logger.debug("Bucket %s: only named players left, nothing removed", stats.hours)
        return BucketUpdate(players=roster, next_id=context.next_id, advisory=Advisory.CANNOT_REMOVE_NAMED)

    actual = min(requested, max_removable)
    candidates = list(reversed(stats.anonymous_ids)) + list(reversed(stats.named_ids))
    doomed = set(candidates[:actual])

    remaining = [player for player in roster if player.id not in doomed]
    if len(roster) - len(remaining) != actual:
        raise RosterInvariantError(
            f"bucket {stats.hours} expected to remove {actual} players, removed {len(roster) - len(remaining)}"
        )

    # Flag whenever the request dipped under the named floor, even if the
    # anonymous players were all removed successfully.
    advisory = Advisory.CANNOT_REMOVE_NAMED if desired < stats.named_count else None
    logger.debug("Bucket %s: requested -%d, removed %d", stats.hours, requested, actual)
    return BucketUpdate(players=remaining, next_id=context.next_id, advisory=advisory)


__all__ = [
    "Advisory",
    "BucketContext",
    "BucketStats",
    "BucketUpdate",
    "BucketViewModel",
    "build_bucket_view_models",
    "index_by_bucket",
    "normalize_hours",
    "set_count_for_bucket",
]
