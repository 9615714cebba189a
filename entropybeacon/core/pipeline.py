"""Pipeline phases and their dispatch.

Each phase is a plain function taking an explicit ``BeaconConfig``; nothing
reads module-level state.  ``run_phases`` executes the requested phases in
the fixed ``PHASE_ORDER`` and lets any error propagate to the caller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

from entropybeacon.bridge.http import fetch_public_key
from entropybeacon.config import BeaconConfig
from entropybeacon.core.chain_index import ChainIndexer
from entropybeacon.core.collector import collect_sources, store_outcomes
from entropybeacon.core.record_builder import assemble_record, iso_timestamp, sign_record
from entropybeacon.core.record_store import PayloadStore, RecordStore, read_json
from entropybeacon.core.retry import RetryPolicy
from entropybeacon.core.verifier import verify_record
from entropybeacon.models.phases import PHASE_ORDER, Phase
from entropybeacon.models.records import ChainIndexEntry, EntropyRecord, SignedRecord
from entropybeacon.models.sources import SourceOutcome
from entropybeacon.publish.kv_store import publish_latest
from entropybeacon.sources import DEFAULT_SOURCES
from entropybeacon.sources.base import EntropySource, FetchContext

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Inputs shared by all phases of one run.

    ``now`` is fixed once per run so the timestamp payload and the record's
    ``createdAt`` agree.
    """

    config: BeaconConfig
    client: httpx.Client
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sources: Sequence[EntropySource] = DEFAULT_SOURCES
    sleep: Callable[[float], None] = time.sleep

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            delay=self.config.retry_delay, max_tries=self.config.retry_max_tries
        )


@dataclass
class RunResult:
    """What each executed phase produced."""

    removed: list[str] = field(default_factory=list)
    outcomes: list[SourceOutcome] = field(default_factory=list)
    generated: SignedRecord | None = None
    verified: EntropyRecord | None = None
    index_entry: ChainIndexEntry | None = None
    published: bool | None = None
    phases: list[Phase] = field(default_factory=list)


def record_store(config: BeaconConfig) -> RecordStore:
    return RecordStore(config.record_path, config.previous_record_path)


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------


def run_clean(config: BeaconConfig) -> list[str]:
    """Remove collected payloads, keeping the previous-record copy."""
    removed = PayloadStore(config.payload_dir).clean(
        keep=frozenset({config.previous_record_name})
    )
    logger.info("clean : removed %d payload files", len(removed))
    return removed


def run_collect(ctx: RunContext) -> list[SourceOutcome]:
    """Collect ``ctx.sources`` into the payload directory."""
    fetch_ctx = FetchContext(client=ctx.client, now=ctx.now, timeout=ctx.config.http_timeout)
    outcomes = collect_sources(ctx.sources, fetch_ctx, ctx.retry_policy, sleep=ctx.sleep)
    written = store_outcomes(outcomes, PayloadStore(ctx.config.payload_dir))
    logger.info("collect : wrote %s", ", ".join(written) or "nothing")
    return outcomes


def run_generate(config: BeaconConfig, now: datetime) -> SignedRecord:
    """Rotate the current record, build and sign a new one, and save it."""
    private_key = config.require_private_key()
    store = record_store(config)
    store.rotate()
    record = assemble_record(
        config.payload_dir,
        hash_iterations=config.hash_iterations,
        previous=store.load_previous(),
        created_at=iso_timestamp(now),
        hash_type=config.hash_type,
    )
    signed = sign_record(record, private_key)
    store.save(signed)
    logger.info("entropy : generated %s", signed.commitment_hash)
    return signed


def run_verify(
    config: BeaconConfig,
    fetch_key: Callable[[], str],
) -> EntropyRecord:
    """Verify the current record file.  Returns the persisted record."""
    store = record_store(config)
    return verify_record(
        store.load_current(),
        config.payload_dir,
        fetch_key,
        hash_iterations=config.hash_iterations,
        previous=store.load_previous(),
        hash_type=config.hash_type,
    )


def run_index(config: BeaconConfig) -> ChainIndexEntry | None:
    """Index the previous record under the configured parent commit id."""
    previous = record_store(config).load_previous()
    return ChainIndexer(config.index_dir).index_previous(previous, config.parent_commit_id)


def run_upload(
    config: BeaconConfig,
    client: httpx.Client,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Publish the current record file as-is."""
    try:
        document: Any = read_json(config.record_path)
    except ValueError as exc:
        logger.warning("entropy-upload-kv : failed : entropy file is not valid JSON : %s", exc)
        return False
    if not document:
        logger.warning("entropy-upload-kv : failed : unable to read entropy file")
        return False
    return publish_latest(document, config, client, sleep=sleep)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def public_key_provider(ctx: RunContext) -> Callable[[], str]:
    """Use the configured public key if set, otherwise fetch it."""
    if ctx.config.public_key:
        return lambda: ctx.config.public_key
    return lambda: fetch_public_key(
        ctx.client,
        ctx.config.public_key_url,
        ctx.retry_policy,
        timeout=ctx.config.http_timeout,
    )


def order_phases(phases: Iterable[Phase]) -> list[Phase]:
    requested = set(phases)
    return [p for p in PHASE_ORDER if p in requested]


def run_phases(phases: Iterable[Phase], ctx: RunContext) -> RunResult:
    """Run the requested phases in ``PHASE_ORDER``."""
    result = RunResult()
    for phase in order_phases(phases):
        logger.debug("phase : %s", phase.value)
        if phase is Phase.CLEAN:
            result.removed = run_clean(ctx.config)
        elif phase is Phase.COLLECT:
            result.outcomes = run_collect(ctx)
        elif phase is Phase.GENERATE:
            result.generated = run_generate(ctx.config, ctx.now)
        elif phase is Phase.VERIFY:
            result.verified = run_verify(ctx.config, public_key_provider(ctx))
        elif phase is Phase.INDEX:
            result.index_entry = run_index(ctx.config)
        elif phase is Phase.UPLOAD:
            result.published = run_upload(ctx.config, ctx.client, sleep=ctx.sleep)
        result.phases.append(phase)
    return result
