"""Public randomness beacons: NIST and drand."""

from __future__ import annotations

from typing import Any

from entropybeacon.bridge.http import get_json
from entropybeacon.core.hasher import sha256_hex
from entropybeacon.errors import CollectionError
from entropybeacon.sources.base import FetchContext, expect_object

NIST_LAST_PULSE_URL = "https://beacon.nist.gov/beacon/2.0/pulse/last"
DRAND_URL = "https://drand.cloudflare.com"


def fetch_nist_beacon(ctx: FetchContext) -> Any:
    return get_json(ctx.client, NIST_LAST_PULSE_URL, timeout=ctx.timeout)


def fetch_drand_beacon(ctx: FetchContext) -> dict[str, Any]:
    """Chain info and the latest round from the drand HTTP API."""
    chain_info = expect_object(
        get_json(ctx.client, f"{DRAND_URL}/info", timeout=ctx.timeout), "drand-beacon"
    )
    randomness = expect_object(
        get_json(ctx.client, f"{DRAND_URL}/public/latest", timeout=ctx.timeout), "drand-beacon"
    )
    check_drand_round(randomness)
    return {"chainInfo": chain_info, "randomness": randomness}


def check_drand_round(beacon: dict[str, Any]) -> None:
    """Reject a drand round that is incomplete or internally inconsistent.

    The BLS signature is not verified against the chain's group key; only
    the derived value is checked: ``randomness`` must equal
    ``sha256(signature)`` whenever a signature is present.
    """
    round_number = beacon.get("round")
    randomness = beacon.get("randomness")
    if not isinstance(round_number, int) or isinstance(round_number, bool) or round_number < 1:
        raise CollectionError(f"drand-beacon : missing or invalid round: {round_number!r}")
    if not isinstance(randomness, str) or not randomness:
        raise CollectionError("drand-beacon : missing randomness")
    signature = beacon.get("signature")
    if signature is None:
        return
    try:
        expected = sha256_hex(bytes.fromhex(signature))
    except (TypeError, ValueError) as exc:
        raise CollectionError(f"drand-beacon : malformed signature: {exc}") from exc
    if randomness.lower() != expected:
        raise CollectionError(
            f"drand-beacon : round {round_number} randomness does not match its signature"
        )
