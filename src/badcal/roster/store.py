"""Stateful roster owning players, court hours and the custom-hours map."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from badcal.buckets import (
    Advisory,
    BucketContext,
    BucketViewModel,
    build_bucket_view_models,
    normalize_hours,
    set_count_for_bucket,
)
from badcal.config import RosterRules, clamp_int
from badcal.ingest import parse_roster_text, rows_to_players
from badcal.models import Player
from badcal.roster.sync import settle


logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "hours")

_UNSET: Any = object()


@dataclass(frozen=True)
class RosterSnapshot:
    players: tuple[Player, ...]
    court_hours: float
    default_hours: float
    custom_hours: Mapping[int, bool]


@dataclass(frozen=True)
class ImportReport:
    players: list[Player] = field(default_factory=list)
    skipped_lines: list[str] = field(default_factory=list)
    advisory: Optional[Advisory] = None


Listener = Callable[[RosterSnapshot], None]


class IdSource:
    """Hands out millisecond wall-clock ids that never repeat within one source."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._next = 0

    def peek(self) -> int:
        return max(int(self._clock() * 1000), self._next)

    def reserve(self, count: int) -> int:
        start = self.peek()
        self._next = start + max(0, count)
        return start

    def advance_to(self, next_id: int) -> None:
        self._next = max(self._next, next_id)

    def advance_past(self, ids: Iterable[int]) -> None:
        highest = max(ids, default=None)
        if highest is not None:
            self.advance_to(highest + 1)


def _coerce_hours(value: Any) -> float:
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(hours) or hours < 0:
        return 0.0
    return hours


def _coerce_court_hours(value: Any) -> float:
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    return hours if math.isfinite(hours) else 0.0


def _coerce_delta(value: Any) -> float:
    try:
        delta = float(value)
    except (TypeError, ValueError):
        return 0.0
    return delta if math.isfinite(delta) else 0.0


class RosterStore:
    """Single owner of the roster state.

    Every write runs the custom-hours reducer (see :mod:`badcal.roster.sync`)
    before returning, so readers always observe a settled roster. Listeners
    registered with :meth:`subscribe` are called once per write that actually
    changed something. Call :meth:`destroy` to detach the reducer and drop
    the listeners.
    """

    def __init__(
        self,
        players: Optional[Sequence[Player]] = None,
        court_hours: Optional[float] = None,
        *,
        rules: Optional[RosterRules] = None,
        id_source: Optional[IdSource] = None,
    ):
        self.rules = rules or RosterRules()
        self._ids = id_source or IdSource()
        self._players: list[Player] = list(players or [])
        self._court_hours = _coerce_court_hours(
            self.rules.default_court_hours if court_hours is None else court_hours
        )
        self._custom_hours: dict[int, bool] = {}
        self._listeners: list[Listener] = []
        self._attached = True

        self._ids.advance_past(player.id for player in self._players)
        self._commit()

    # -- read side -----------------------------------------------------

    @property
    def players(self) -> tuple[Player, ...]:
        return tuple(self._players)

    @property
    def court_hours(self) -> float:
        return self._court_hours

    @property
    def default_hours(self) -> float:
        return self._court_hours if self._court_hours > 0 else 1.0

    @property
    def custom_hours(self) -> dict[int, bool]:
        return dict(self._custom_hours)

    @property
    def buckets(self) -> list[BucketViewModel]:
        return build_bucket_view_models(self._players, self.default_hours, self.rules.hour_step)

    @property
    def destroyed(self) -> bool:
        return not self._attached

    def snapshot(self) -> RosterSnapshot:
        return RosterSnapshot(
            players=tuple(self._players),
            court_hours=self._court_hours,
            default_hours=self.default_hours,
            custom_hours=dict(self._custom_hours),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- actions -------------------------------------------------------

    def set_players(self, players: Sequence[Player]) -> None:
        if players is self._players:
            return
        replacement = list(players)
        if replacement == self._players:
            return
        self._ids.advance_past(player.id for player in replacement)
        self._commit(players=replacement)

    def set_court_hours(self, court_hours: Any) -> None:
        hours = _coerce_court_hours(court_hours)
        if hours == self._court_hours:
            return
        self._commit(court_hours=hours)

    def add_players(self, count: Any) -> Optional[Advisory]:
        """Quick-add anonymous players at the default hours."""

        requested = clamp_int(count, 0, self.rules.max_quick_add)
        if requested == 0:
            return None

        capacity = max(0, self.rules.max_players - len(self._players))
        actual = min(requested, capacity)
        if actual:
            start_id = self._ids.reserve(actual)
            hours = self.default_hours
            added = [Player(id=start_id + offset, name="", hours=hours) for offset in range(actual)]
            self._commit(players=self._players + added)

        if actual < requested:
            logger.warning(
                "Quick add limited to %d of %d players (max %d)", actual, requested, self.rules.max_players
            )
            return Advisory.MAX_PLAYERS
        return None

    def remove_player(self, player_id: int) -> None:
        remaining = [player for player in self._players if player.id != player_id]
        custom_hours = self._custom_hours
        if player_id in custom_hours:
            custom_hours = {key: value for key, value in custom_hours.items() if key != player_id}
        if len(remaining) == len(self._players) and custom_hours is self._custom_hours:
            return
        self._commit(players=remaining, custom_hours=custom_hours)

    def update_player(self, player_id: int, field_name: str, value: Any) -> None:
        """Edit ``name`` or ``hours``. An hours edit pins the player to its own value."""

        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"field must be one of {EDITABLE_FIELDS}, got {field_name!r}")

        coerced: Any = _coerce_hours(value) if field_name == "hours" else ("" if value is None else str(value))
        players = [
            player.model_copy(update={field_name: coerced}) if player.id == player_id else player
            for player in self._players
        ]
        custom_hours = self._custom_hours
        if field_name == "hours":
            custom_hours = {**custom_hours, player_id: True}
        self._commit(players=players, custom_hours=custom_hours)

    def add_hours(self, player_id: int, delta: Any) -> None:
        step = self.rules.hour_step
        change = _coerce_delta(delta)
        players = [
            player.model_copy(update={"hours": normalize_hours(step, (player.hours or 0) + change)})
            if player.id == player_id
            else player
            for player in self._players
        ]
        self._commit(players=players, custom_hours={**self._custom_hours, player_id: True})

    def enable_custom_hours(self, player_id: int) -> None:
        self._commit(custom_hours={**self._custom_hours, player_id: True})

    def use_default_hours(self, player_id: int) -> None:
        hours = self.default_hours
        players = [
            player.model_copy(update={"hours": hours}) if player.id == player_id else player
            for player in self._players
        ]
        self._commit(players=players, custom_hours={**self._custom_hours, player_id: False})

    def import_players_from_text(self, text: str) -> ImportReport:
        """Append one player per non-blank line; ``"<name> <hours>"`` pins explicit hours."""

        rows = parse_roster_text(text)
        if not rows:
            return ImportReport()

        capacity = max(0, self.rules.max_players - len(self._players))
        accepted, overflow = rows[:capacity], rows[capacity:]
        added: list[Player] = []
        if accepted:
            hours = self.default_hours
            added = rows_to_players(accepted, start_id=self._ids.reserve(len(accepted)), default_hours=hours)
            pinned = {player.id: row.has_explicit_hours for row, player in zip(accepted, added)}
            custom_hours = {**self._custom_hours, **pinned}
            self._commit(players=self._players + added, custom_hours=custom_hours)

        if overflow:
            logger.warning("Import skipped %d line(s): roster is full", len(overflow))
            return ImportReport(
                players=added,
                skipped_lines=[row.line or row.name for row in overflow],
                advisory=Advisory.MAX_PLAYERS,
            )
        return ImportReport(players=added)

    def set_count_for_bucket(self, hours: Any, desired_count: Any) -> Optional[Advisory]:
        context = BucketContext(
            step=self.rules.hour_step,
            max_players=self.rules.max_players,
            next_id=self._ids.peek(),
        )
        update = set_count_for_bucket(self._players, hours, desired_count, context)
        self._ids.advance_to(update.next_id)
        if update.players != self._players:
            self._commit(players=update.players)
        return update.advisory

    def destroy(self) -> None:
        if not self._attached:
            return
        self._attached = False
        self._listeners.clear()
        logger.debug("Roster store destroyed")

    # -- internals -----------------------------------------------------

    def _commit(
        self,
        *,
        players: Any = _UNSET,
        court_hours: Any = _UNSET,
        custom_hours: Any = _UNSET,
    ) -> bool:
        before = (self._players, self._court_hours, self._custom_hours)
        if players is not _UNSET:
            self._players = list(players)
        if court_hours is not _UNSET:
            self._court_hours = court_hours
        if custom_hours is not _UNSET:
            self._custom_hours = dict(custom_hours)

        if self._attached:
            result = settle(self._players, self._custom_hours, self.default_hours)
            if result.players_changed:
                self._players = result.players
            if result.custom_hours_changed:
                self._custom_hours = result.custom_hours

        changed = (self._players, self._court_hours, self._custom_hours) != before
        if changed and self._attached:
            snapshot = self.snapshot()
            for listener in list(self._listeners):
                listener(snapshot)
        return changed
