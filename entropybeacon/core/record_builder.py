"""Record assembly: payload directory -> PartialRecord -> EntropyRecord -> SignedRecord.

Generation walks all three steps.  Verification stops at ``EntropyRecord``
and compares the result with the persisted record.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from entropybeacon.bridge.crypto_bridge import sign_hash
from entropybeacon.core.hasher import (
    HASH_TYPE,
    compute_commitment,
    hash_file_set,
    sort_file_records,
)
from entropybeacon.errors import ConfigurationError
from entropybeacon.models.records import EntropyRecord, PartialRecord, SignedRecord

logger = logging.getLogger(__name__)


def iso_timestamp(moment: datetime | None = None) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(timezone.utc)
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def build_partial_record(
    payload_dir: Path,
    *,
    hash_iterations: int,
    previous: EntropyRecord | None = None,
    created_at: str | None = None,
    hash_type: str = HASH_TYPE,
) -> PartialRecord:
    """Hash and sort the payload files and link to *previous*, if any."""
    if hash_type != HASH_TYPE:
        raise ConfigurationError(
            f"unsupported hash type {hash_type!r}; only {HASH_TYPE!r} is supported"
        )
    files = sort_file_records(hash_file_set(payload_dir))
    return PartialRecord(
        files=tuple(files),
        hash_type=hash_type,
        hash_iterations=hash_iterations,
        prev_hash=previous.commitment_hash if previous is not None else None,
        created_at=created_at,
    )


def commit_record(partial: PartialRecord) -> EntropyRecord:
    """Run the slow hash over *partial*'s files and seal the commitment."""
    logger.info(
        "Computing commitment over %d files (%d iterations)",
        len(partial.files),
        partial.hash_iterations,
    )
    return partial.commit(compute_commitment(partial.files, partial.hash_iterations))


def assemble_record(
    payload_dir: Path,
    *,
    hash_iterations: int,
    previous: EntropyRecord | None = None,
    created_at: str | None = None,
    hash_type: str = HASH_TYPE,
) -> EntropyRecord:
    """Build the unsigned record for the current contents of *payload_dir*."""
    partial = build_partial_record(
        payload_dir,
        hash_iterations=hash_iterations,
        previous=previous,
        created_at=created_at if created_at is not None else iso_timestamp(),
        hash_type=hash_type,
    )
    return commit_record(partial)


def sign_record(record: EntropyRecord, private_key: str) -> SignedRecord:
    """Sign the commitment hash of *record*.

    Raises ``ConfigurationError`` if *private_key* is empty.
    """
    if not private_key:
        raise ConfigurationError("missing required Ed25519 private key for signing")
    return record.sign_with(sign_hash(record.commitment_hash, private_key))
