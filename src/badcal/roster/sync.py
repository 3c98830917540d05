"""Reducer that keeps the custom-hours map and player hours consistent.

Two rules are applied until neither changes anything:

1. every player without an entry in the custom-hours map gets one, ``True``
   when its hours already differ from the default (an implicit override) and
   ``False`` otherwise. Existing entries are never flipped; entries for
   players no longer on the roster are dropped.
2. every player whose flag is ``False`` and whose hours differ from the
   default is moved onto the default.

Rule 1 only adds entries and rule 2 only touches players already consistent
with a ``False`` flag, so a second pass never finds work to do.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from badcal.errors import RosterInvariantError
from badcal.models import Player


logger = logging.getLogger(__name__)

_MAX_PASSES = 4


@dataclass(frozen=True)
class SyncResult:
    players: list[Player]
    custom_hours: dict[int, bool]
    players_changed: bool
    custom_hours_changed: bool

    @property
    def changed(self) -> bool:
        return self.players_changed or self.custom_hours_changed


def complete_custom_hours(
    players: Sequence[Player],
    current: Mapping[int, bool],
    default_hours: float,
) -> tuple[dict[int, bool], bool]:
    completed: dict[int, bool] = {}
    for player in players:
        existing = current.get(player.id)
        completed[player.id] = existing if existing is not None else player.hours != default_hours
    return completed, completed != dict(current)


def apply_default_hours(
    players: Sequence[Player],
    custom_hours: Mapping[int, bool],
    default_hours: float,
) -> Optional[list[Player]]:
    """Return a new roster with tracking players on ``default_hours``, or ``None`` if none moved."""

    updated: Optional[list[Player]] = None
    for index, player in enumerate(players):
        if custom_hours.get(player.id):
            continue
        if player.hours == default_hours:
            continue
        if updated is None:
            updated = list(players)
        updated[index] = player.model_copy(update={"hours": default_hours})
    return updated


def settle(
    players: Sequence[Player],
    custom_hours: Mapping[int, bool],
    default_hours: float,
) -> SyncResult:
    current_players = list(players)
    current_map = dict(custom_hours)
    players_changed = False
    map_changed = False

    for attempt in range(1, _MAX_PASSES + 1):
        completed, completed_changed = complete_custom_hours(current_players, current_map, default_hours)
        if completed_changed:
            current_map = completed
            map_changed = True

        moved = apply_default_hours(current_players, current_map, default_hours)
        if moved is not None:
            current_players = moved
            players_changed = True

        if not completed_changed and moved is None:
            logger.debug("Custom hours settled after %d pass(es)", attempt)
            return SyncResult(
                players=current_players,
                custom_hours=current_map,
                players_changed=players_changed,
                custom_hours_changed=map_changed,
            )

    raise RosterInvariantError(f"custom hours did not settle within {_MAX_PASSES} passes")
