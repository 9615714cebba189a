"""Pipeline phases selectable from the CLI."""

from __future__ import annotations

from enum import Enum


class Phase(str, Enum):
    CLEAN = "clean"
    COLLECT = "collect"
    GENERATE = "entropy-generate"
    VERIFY = "entropy-verify"
    INDEX = "entropy-index"
    UPLOAD = "entropy-upload-kv"


# Phases always run in this order regardless of how they were requested.
PHASE_ORDER: tuple[Phase, ...] = (
    Phase.CLEAN,
    Phase.COLLECT,
    Phase.GENERATE,
    Phase.VERIFY,
    Phase.INDEX,
    Phase.UPLOAD,
)
