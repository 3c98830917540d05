"""REST API exposing in-memory roster sessions."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException

from badcal.api.schemas import (
    AddHoursRequest,
    BucketCountRequest,
    BucketResponse,
    CourtHoursRequest,
    ImportRequest,
    PlayerPayload,
    PlayerUpdateRequest,
    QuickAddRequest,
    SessionCreateRequest,
    SessionStateResponse,
)
from badcal.buckets import Advisory
from badcal.config import RosterRules
from badcal.config_loader import resolve_rules
from badcal.models import Player
from badcal.roster import RosterStore


logger = logging.getLogger(__name__)

# Sessions live in memory only; the least recently used one is destroyed once
# this many are open.
DEFAULT_MAX_SESSIONS = 1000


def _state_response(
    session_id: str,
    store: RosterStore,
    advisory: Optional[Advisory] = None,
    skipped_lines: Optional[list[str]] = None,
) -> SessionStateResponse:
    return SessionStateResponse(
        session_id=session_id,
        court_hours=store.court_hours,
        default_hours=store.default_hours,
        players=[PlayerPayload(id=p.id, name=p.name, hours=p.hours) for p in store.players],
        custom_hours=store.custom_hours,
        buckets=[
            BucketResponse(
                hours=bucket.hours,
                count=bucket.count,
                named_count=bucket.named_count,
                is_default=bucket.is_default,
            )
            for bucket in store.buckets
        ],
        advisory=advisory.value if advisory else None,
        skipped_lines=skipped_lines or [],
    )


def create_app(rules: RosterRules | None = None, max_sessions: int = DEFAULT_MAX_SESSIONS) -> FastAPI:
    app = FastAPI(title="badcal roster")
    sessions: OrderedDict[str, RosterStore] = OrderedDict()
    app.state.sessions = sessions
    app.state.rules = rules or resolve_rules()

    def get_store(session_id: str) -> RosterStore:
        store = sessions.get(session_id)
        if store is None:
            raise HTTPException(status_code=404, detail="Session not found")
        sessions.move_to_end(session_id)
        return store

    def has_player(store: RosterStore, player_id: int) -> None:
        if not any(player.id == player_id for player in store.players):
            raise HTTPException(status_code=404, detail="Player not found")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/sessions", response_model=SessionStateResponse, status_code=201)
    async def create_session(payload: SessionCreateRequest) -> SessionStateResponse:
        ids = [player.id for player in payload.players]
        if len(ids) != len(set(ids)):
            raise HTTPException(status_code=400, detail="Player ids must be unique")
        if len(ids) > app.state.rules.max_players:
            raise HTTPException(
                status_code=400,
                detail=f"At most {app.state.rules.max_players} players are allowed",
            )

        store = RosterStore(
            [Player(id=p.id, name=p.name, hours=p.hours) for p in payload.players],
            payload.court_hours,
            rules=app.state.rules,
        )
        while len(sessions) >= max(1, max_sessions):
            evicted_id, evicted = sessions.popitem(last=False)
            evicted.destroy()
            logger.info("Evicted idle roster session %s", evicted_id)
        session_id = uuid4().hex
        sessions[session_id] = store
        logger.info("Created roster session %s with %d player(s)", session_id, len(ids))

        if payload.text:
            report = store.import_players_from_text(payload.text)
            return _state_response(session_id, store, report.advisory, report.skipped_lines)
        return _state_response(session_id, store)

    @app.get("/sessions/{session_id}", response_model=SessionStateResponse)
    async def get_session(session_id: str) -> SessionStateResponse:
        return _state_response(session_id, get_store(session_id))

    @app.delete("/sessions/{session_id}", status_code=204)
    async def delete_session(session_id: str) -> None:
        store = get_store(session_id)
        store.destroy()
        del sessions[session_id]

    @app.put("/sessions/{session_id}/court-hours", response_model=SessionStateResponse)
    async def set_court_hours(session_id: str, payload: CourtHoursRequest) -> SessionStateResponse:
        store = get_store(session_id)
        store.set_court_hours(payload.court_hours)
        return _state_response(session_id, store)

    @app.post("/sessions/{session_id}/players", response_model=SessionStateResponse)
    async def add_players(session_id: str, payload: QuickAddRequest) -> SessionStateResponse:
        store = get_store(session_id)
        advisory = store.add_players(payload.count)
        return _state_response(session_id, store, advisory)

    @app.delete("/sessions/{session_id}/players/{player_id}", response_model=SessionStateResponse)
    async def remove_player(session_id: str, player_id: int) -> SessionStateResponse:
        store = get_store(session_id)
        has_player(store, player_id)
        store.remove_player(player_id)
        return _state_response(session_id, store)

    @app.patch("/sessions/{session_id}/players/{player_id}", response_model=SessionStateResponse)
    async def update_player(
        session_id: str, player_id: int, payload: PlayerUpdateRequest
    ) -> SessionStateResponse:
        store = get_store(session_id)
        has_player(store, player_id)
        try:
            store.update_player(player_id, payload.field, payload.value)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _state_response(session_id, store)

    @app.post("/sessions/{session_id}/players/{player_id}/hours", response_model=SessionStateResponse)
    async def add_hours(session_id: str, player_id: int, payload: AddHoursRequest) -> SessionStateResponse:
        store = get_store(session_id)
        has_player(store, player_id)
        store.add_hours(player_id, payload.delta)
        return _state_response(session_id, store)

    @app.post(
        "/sessions/{session_id}/players/{player_id}/custom-hours",
        response_model=SessionStateResponse,
    )
    async def enable_custom_hours(session_id: str, player_id: int) -> SessionStateResponse:
        store = get_store(session_id)
        has_player(store, player_id)
        store.enable_custom_hours(player_id)
        return _state_response(session_id, store)

    @app.delete(
        "/sessions/{session_id}/players/{player_id}/custom-hours",
        response_model=SessionStateResponse,
    )
    async def use_default_hours(session_id: str, player_id: int) -> SessionStateResponse:
        store = get_store(session_id)
        has_player(store, player_id)
        store.use_default_hours(player_id)
        return _state_response(session_id, store)

    @app.post("/sessions/{session_id}/import", response_model=SessionStateResponse)
    async def import_players(session_id: str, payload: ImportRequest) -> SessionStateResponse:
        store = get_store(session_id)
        report = store.import_players_from_text(payload.text)
        return _state_response(session_id, store, report.advisory, report.skipped_lines)

    @app.put("/sessions/{session_id}/buckets", response_model=SessionStateResponse)
    async def set_bucket_count(session_id: str, payload: BucketCountRequest) -> SessionStateResponse:
        store = get_store(session_id)
        advisory = store.set_count_for_bucket(payload.hours, payload.count)
        return _state_response(session_id, store, advisory)

    return app
