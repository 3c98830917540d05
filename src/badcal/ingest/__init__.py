"""Input adapters that turn pasted roster text into players."""

from .text_import import ImportedRow, parse_roster_text, rows_to_players

__all__ = [
    "ImportedRow",
    "parse_roster_text",
    "rows_to_players",
]
