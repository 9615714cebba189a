"""Per-source collection outcome."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class SourceOutcome(BaseModel):
    """Result of collecting one entropy source: a payload or an error.

    Exactly one of ``payload`` / ``error`` is meaningful, decided by ``ok``.
    The caller decides how to fold a list of outcomes (skip or abort).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    filename: str
    essential: bool = False
    ok: bool
    payload: Any = None
    error: str | None = None
    attempts: int = 0
