"""Blockchain tip sources: Bitcoin, Ethereum, Stellar."""

from __future__ import annotations

from typing import Any

from entropybeacon.bridge.http import get_json
from entropybeacon.sources.base import FetchContext, expect_object

BITCOIN_LATEST_BLOCK_URL = "https://blockchain.info/latestblock"
ETHEREUM_CHAIN_URL = "https://api.blockcypher.com/v1/eth/main"
STELLAR_HORIZON_URL = "https://horizon.stellar.org"


def fetch_bitcoin(ctx: FetchContext) -> dict[str, Any]:
    """Latest Bitcoin block, reduced to height, hash, time and block index."""
    data = expect_object(
        get_json(ctx.client, BITCOIN_LATEST_BLOCK_URL, timeout=ctx.timeout), "bitcoin"
    )
    return {
        "height": data.get("height"),
        "hash": data.get("hash"),
        "time": data.get("time"),
        "blockIndex": data.get("block_index"),
    }


def fetch_ethereum(ctx: FetchContext) -> Any:
    return get_json(ctx.client, ETHEREUM_CHAIN_URL, timeout=ctx.timeout)


def fetch_stellar(ctx: FetchContext) -> Any:
    """The ledger named by ``last_ledger`` in Horizon's fee stats."""
    fee_stats = expect_object(
        get_json(ctx.client, f"{STELLAR_HORIZON_URL}/fee_stats", timeout=ctx.timeout), "stellar"
    )
    last_ledger = fee_stats.get("last_ledger")
    return get_json(
        ctx.client, f"{STELLAR_HORIZON_URL}/ledgers/{last_ledger}", timeout=ctx.timeout
    )
