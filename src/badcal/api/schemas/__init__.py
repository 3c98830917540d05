"""Pydantic models for API I/O."""

from .roster import (
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

__all__ = [
    "AddHoursRequest",
    "BucketCountRequest",
    "BucketResponse",
    "CourtHoursRequest",
    "ImportRequest",
    "PlayerPayload",
    "PlayerUpdateRequest",
    "QuickAddRequest",
    "SessionCreateRequest",
    "SessionStateResponse",
]
