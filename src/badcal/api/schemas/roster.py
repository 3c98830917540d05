from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field


class PlayerPayload(BaseModel):
    id: int
    name: str = ""
    hours: float = Field(default=0.0, ge=0.0)


class BucketResponse(BaseModel):
    hours: float
    count: int
    named_count: int
    is_default: bool


class SessionCreateRequest(BaseModel):
    court_hours: float | None = None
    players: List[PlayerPayload] = Field(default_factory=list)
    text: str | None = None


class CourtHoursRequest(BaseModel):
    court_hours: float


class QuickAddRequest(BaseModel):
    count: int = Field(default=1, ge=0)


class PlayerUpdateRequest(BaseModel):
    field: Literal["name", "hours"]
    value: str | float


class AddHoursRequest(BaseModel):
    delta: float


class ImportRequest(BaseModel):
    text: str


class BucketCountRequest(BaseModel):
    hours: float = Field(ge=0.0)
    count: int = Field(ge=0)


class SessionStateResponse(BaseModel):
    session_id: str
    court_hours: float
    default_hours: float
    players: List[PlayerPayload]
    custom_hours: dict[int, bool]
    buckets: List[BucketResponse]
    advisory: Literal["MAX_PLAYERS", "CANNOT_REMOVE_NAMED"] | None = None
    skipped_lines: List[str] = Field(default_factory=list)
