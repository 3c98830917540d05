"""Canonical player record shared by the bucket functions and the roster store."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Player(BaseModel):
    """Single roster entry. An empty (or blank) name marks an anonymous seat."""

    id: int
    name: str = ""
    hours: float = Field(default=0.0, ge=0.0)

    model_config = ConfigDict(frozen=True)

    @property
    def is_named(self) -> bool:
        return self.name.strip() != ""
