"""Lightweight REST client for the badcal API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def parse_bucket(entry: str) -> dict[str, float | int]:
    if "=" not in entry:
        raise SystemExit(f"Invalid bucket entry '{entry}', expected HOURS=COUNT")
    hours, count = entry.split("=", 1)
    try:
        return {"hours": float(hours), "count": int(count)}
    except ValueError as exc:
        raise SystemExit(f"Invalid bucket entry '{entry}': {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the badcal REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("roster", type=Path, nargs="?", help="Text roster to import into a new session")
    parser.add_argument("--court-hours", type=float, default=None, help="Session court hours")
    parser.add_argument("--set-bucket", action="append", default=[], metavar="HOURS=COUNT")
    parser.add_argument("--get-session", metavar="SESSION_ID", help="Fetch a session and exit")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.get_session:
            resp = client.get(f"/sessions/{args.get_session}")
            if resp.status_code == 404:
                raise SystemExit(f"session {args.get_session} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.roster is None:
            raise SystemExit("roster file is required unless using --get-session")

        payload = {"court_hours": args.court_hours, "text": args.roster.read_text(encoding="utf-8")}
        resp = client.post("/sessions", json=payload)
        resp.raise_for_status()
        state = resp.json()
        session_id = state["session_id"]
        print(f"Created session {session_id} with {len(state['players'])} players")

        for entry in args.set_bucket:
            resp = client.put(f"/sessions/{session_id}/buckets", json=parse_bucket(entry))
            resp.raise_for_status()
            state = resp.json()
            if state["advisory"]:
                print(f"{entry}: {state['advisory']}")

        print(json.dumps(state["buckets"], indent=2))


if __name__ == "__main__":
    main()
