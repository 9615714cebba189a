"""Fixed-delay, bounded-attempt retry.

Every network touchpoint (source collection, public-key fetch, publishing)
uses the same policy: a constant delay between attempts and a fixed maximum
number of attempts.  Exhaustion raises ``TooManyRetriesError``; whether that
is fatal is the caller's decision.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from entropybeacon.errors import TooManyRetriesError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    delay: float = 1.0
    max_tries: int = 3


def retry_call(
    op: Callable[[], T],
    policy: RetryPolicy,
    *,
    label: str = "",
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call *op* until it returns, at most ``policy.max_tries`` times.

    Only ``Exception`` subclasses are retried; the last one is attached to
    the raised ``TooManyRetriesError``.
    """
    attempts = max(1, policy.max_tries)
    attempt = 1
    while True:
        try:
            return op()
        except Exception as exc:
            logger.warning(
                "%s attempt %d/%d failed : %s", label or "operation", attempt, attempts, exc
            )
            if attempt >= attempts:
                raise TooManyRetriesError(attempts, exc) from exc
        sleep(policy.delay)
        attempt += 1
