"""Entropy collection: run sources, then fold the outcomes.

``collect_sources`` never raises for a failing source.  It returns one
``SourceOutcome`` per source and leaves the decision to ``store_outcomes``:
payloads are written, non-essential failures are logged and dropped, and an
essential failure raises.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from entropybeacon.core.record_store import PayloadStore
from entropybeacon.core.retry import RetryPolicy, retry_call
from entropybeacon.errors import CollectionError, TooManyRetriesError
from entropybeacon.models.sources import SourceOutcome
from entropybeacon.sources.base import EntropySource, FetchContext

logger = logging.getLogger(__name__)


def collect_source(
    source: EntropySource,
    ctx: FetchContext,
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> SourceOutcome:
    """Collect one source under *policy*, returning its outcome."""

    def _attempt():
        logger.info("collect attempt : %s", source.name)
        return source.fetch(ctx)

    try:
        payload = retry_call(_attempt, policy, label=f"collect {source.name}", sleep=sleep)
    except TooManyRetriesError as exc:
        logger.error("collect %s tooManyRetries : %s", source.name, exc)
        return SourceOutcome(
            name=source.name,
            filename=source.filename,
            essential=source.essential,
            ok=False,
            error=str(exc.last_error),
            attempts=exc.attempts,
        )
    return SourceOutcome(
        name=source.name,
        filename=source.filename,
        essential=source.essential,
        ok=True,
        payload=payload,
    )


def collect_sources(
    sources: Iterable[EntropySource],
    ctx: FetchContext,
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> list[SourceOutcome]:
    """Collect each source independently, in order."""
    return [collect_source(s, ctx, policy, sleep=sleep) for s in sources]


def store_outcomes(outcomes: Iterable[SourceOutcome], store: PayloadStore) -> list[str]:
    """Write successful payloads; skip failed non-essential sources.

    Returns the names of the files written.

    Raises
    ------
    CollectionError
        If an essential source failed.  Payloads collected before it are
        still written.
    """
    written: list[str] = []
    failed_essential: list[SourceOutcome] = []
    for outcome in outcomes:
        if outcome.ok:
            store.write(outcome.filename, outcome.payload)
            written.append(outcome.filename)
        elif outcome.essential:
            failed_essential.append(outcome)
        else:
            logger.warning("collect %s skipped : %s", outcome.name, outcome.error)
    if failed_essential:
        names = ", ".join(o.name for o in failed_essential)
        raise CollectionError(f"essential source(s) failed: {names}")
    return written
