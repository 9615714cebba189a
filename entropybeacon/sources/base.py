"""Entropy source definition."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx

from entropybeacon.errors import CollectionError


@dataclass(frozen=True)
class FetchContext:
    """Per-run inputs shared by every source fetch."""

    client: httpx.Client
    now: datetime
    timeout: float = 5.0


@dataclass(frozen=True)
class EntropySource:
    """A named external source and the payload file it produces.

    ``fetch`` returns a JSON-serialisable payload or raises.  Failure of an
    ``essential`` source aborts the collection phase; any other source is
    simply left out of the cycle.
    """

    name: str
    filename: str
    fetch: Callable[[FetchContext], Any]
    essential: bool = False


def expect_object(data: Any, source: str) -> dict[str, Any]:
    """Return *data* if it is a JSON object, else raise ``CollectionError``."""
    if not isinstance(data, dict):
        raise CollectionError(f"{source} : expected Object, got {data!r}")
    return data
