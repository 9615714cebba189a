"""Shared test fixtures for the entropy beacon."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest

from entropybeacon.bridge.crypto_bridge import generate_keypair
from entropybeacon.config import BeaconConfig

TEST_ITERATIONS = 5
FIXED_NOW = datetime(2024, 3, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed run time, 2024-03-01T12:30:45.123Z."""
    return FIXED_NOW


@pytest.fixture
def keypair() -> tuple[str, str]:
    """A fresh Ed25519 ``(private_hex, public_hex)`` pair."""
    return generate_keypair()


@pytest.fixture
def payload_dir(tmp_path: Path) -> Path:
    """A payload directory holding three small JSON payloads."""
    d = tmp_path / "entropy"
    d.mkdir()
    (d / "bitcoin.json").write_text(json.dumps({"height": 830000, "hash": "00ab"}))
    (d / "drand-beacon.json").write_text(json.dumps({"round": 42}))
    (d / "timestamp.json").write_text(json.dumps({"timestamp": "2024-03-01T12:30:45.123Z"}))
    return d


@pytest.fixture
def config(tmp_path: Path, keypair: tuple[str, str]) -> BeaconConfig:
    """Config rooted in a temp dir, with a small iteration count and no delays."""
    private_key, public_key = keypair
    return BeaconConfig(
        record_path=tmp_path / "entropy.json",
        payload_dir=tmp_path / "entropy",
        index_dir=tmp_path / "index" / "by" / "entropy_hash",
        hash_iterations=TEST_ITERATIONS,
        private_key=private_key,
        public_key=public_key,
        parent_commit_id="a" * 40,
        retry_delay=0.0,
        retry_max_tries=2,
        kv_account_id="acct",
        kv_namespace_id="ns",
        kv_auth_email="ops@example.com",
        kv_auth_key="secret",
    )


@pytest.fixture
def no_sleep() -> Callable[[float], None]:
    """A sleep replacement that records requested delays."""
    delays: list[float] = []

    def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays  # type: ignore[attr-defined]
    return _sleep


@pytest.fixture
def make_client() -> Callable[..., httpx.Client]:
    """Factory fixture: an ``httpx.Client`` answering from a URL -> reply map.

    A reply may be a JSON-serialisable body (served with 200), an
    ``httpx.Response``, an exception instance (raised), or a callable taking
    the request and returning any of those.  Unknown URLs answer 404.
    """

    def _factory(routes: dict[str, Any]) -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url).split("?")[0]
            if url not in routes:
                return httpx.Response(404, json={"error": "not found"})
            reply = routes[url]
            if callable(reply) and not isinstance(reply, httpx.Response):
                reply = reply(request)
            if isinstance(reply, Exception):
                raise reply
            if isinstance(reply, httpx.Response):
                return reply
            return httpx.Response(200, json=reply)

        return httpx.Client(transport=httpx.MockTransport(handler))

    return _factory
