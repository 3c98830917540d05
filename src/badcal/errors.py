"""Exceptions raised by the roster core."""

from __future__ import annotations


class RosterError(Exception):
    """Base class for roster core failures."""


class RosterInvariantError(RosterError):
    """Internal consistency check failed; indicates a programming error."""
