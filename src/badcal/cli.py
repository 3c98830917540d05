"""Command-line interface for reconciling a text roster into hour buckets."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from badcal.config_loader import resolve_rules
from badcal.roster import RosterStore


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Group a badminton roster into hour buckets")
    parser.add_argument("roster", type=Path, help="Text file with one player per line ('Name 1.5' or 'Name')")
    parser.add_argument("--court-hours", type=float, default=None, help="Session court hours (default from rules)")
    parser.add_argument(
        "--set-bucket",
        action="append",
        default=[],
        metavar="HOURS=COUNT",
        help="Resize a bucket to COUNT players (repeatable, applied in order)",
    )
    parser.add_argument("--profile", type=Path, default=None, help="Load roster rules JSON")
    parser.add_argument("--json", action="store_true", help="Print the final state as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _parse_bucket_edit(entry: str) -> tuple[float, int]:
    if "=" not in entry:
        raise ValueError(f"Invalid bucket entry '{entry}', expected HOURS=COUNT")
    hours, count = entry.split("=", 1)
    try:
        return float(hours.strip()), int(count.strip())
    except ValueError:
        raise ValueError(f"Invalid bucket entry '{entry}', expected HOURS=COUNT") from None


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        edits = [_parse_bucket_edit(entry) for entry in args.set_bucket]
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    rules = resolve_rules(args.profile)
    store = RosterStore(court_hours=args.court_hours, rules=rules)
    try:
        report = store.import_players_from_text(args.roster.read_text(encoding="utf-8"))
        if report.skipped_lines:
            print(f"Roster full, skipped: {', '.join(report.skipped_lines)}")

        for hours, count in edits:
            advisory = store.set_count_for_bucket(hours, count)
            if advisory is not None:
                print(f"Bucket {hours:g}h -> {count}: {advisory.value}")

        if args.json:
            payload = {
                "court_hours": store.court_hours,
                "default_hours": store.default_hours,
                "players": [player.model_dump() for player in store.players],
                "custom_hours": {str(key): value for key, value in store.custom_hours.items()},
                "buckets": [
                    {
                        "hours": bucket.hours,
                        "count": bucket.count,
                        "named_count": bucket.named_count,
                        "is_default": bucket.is_default,
                    }
                    for bucket in store.buckets
                ],
            }
            print(json.dumps(payload, indent=2))
            return

        for bucket in store.buckets:
            marker = "*" if bucket.is_default else " "
            print(f"{marker} {bucket.hours:>5g}h  {bucket.count:>3} players ({bucket.named_count} named)")
    finally:
        store.destroy()


if __name__ == "__main__":
    main()
