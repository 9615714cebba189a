"""Verification of a persisted beacon record.

A record is trusted only if both checks pass:

1. its signature over the commitment hash verifies under the beacon's
   public key, and
2. recomputing the record from the current payload directory yields the
   same committed fields (everything except ``createdAt`` and
   ``signature``).

There is no partial mode: the first failed check raises.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from entropybeacon.bridge.crypto_bridge import verify_hash
from entropybeacon.core.hasher import HASH_TYPE
from entropybeacon.core.record_builder import assemble_record
from entropybeacon.errors import (
    InvalidSignatureError,
    KeyUnavailableError,
    MissingRecordError,
    RecordMismatchError,
)
from entropybeacon.models.records import EntropyRecord

logger = logging.getLogger(__name__)


def _file_map(files: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    return {f.get("name", ""): f for f in files}


def diff_records(persisted: EntropyRecord, fresh: EntropyRecord) -> list[str]:
    """Return the committed fields on which the two records disagree.

    File-level differences are reported as ``files[<name>]`` for a changed
    digest, ``files[+<name>]`` / ``files[-<name>]`` for a file present only
    in the fresh / persisted record, and ``files(order)`` when the same
    files appear in a different order.
    """
    left = persisted.committed_fields()
    right = fresh.committed_fields()
    differences: list[str] = []

    for key in sorted(set(left) | set(right)):
        if key == "files":
            continue
        if left.get(key) != right.get(key):
            differences.append(key)

    old_files = left.get("files", [])
    new_files = right.get("files", [])
    if old_files != new_files:
        old_map = _file_map(old_files)
        new_map = _file_map(new_files)
        for name in sorted(set(old_map) - set(new_map)):
            differences.append(f"files[-{name}]")
        for name in sorted(set(new_map) - set(old_map)):
            differences.append(f"files[+{name}]")
        for name in sorted(set(old_map) & set(new_map)):
            if old_map[name] != new_map[name]:
                differences.append(f"files[{name}]")
        if not any(d.startswith("files[") for d in differences):
            differences.append("files(order)")

    return differences


def verify_record(
    persisted: EntropyRecord | None,
    payload_dir: Path,
    fetch_public_key: Callable[[], str],
    *,
    hash_iterations: int,
    previous: EntropyRecord | None = None,
    hash_type: str = HASH_TYPE,
) -> EntropyRecord:
    """Verify *persisted* against the current payload directory.

    Parameters
    ----------
    persisted:
        The record being verified; ``None`` if no record file was found.
    payload_dir:
        Directory holding the payload files the record commits to.
    fetch_public_key:
        Returns the hex public key.  Expected to do its own retrying.
    hash_iterations:
        Iteration count to recompute with.
    previous:
        The previous cycle's record, supplying the expected ``prevHash``.

    Returns
    -------
    EntropyRecord
        *persisted*, once both checks have passed.

    Raises
    ------
    MissingRecordError, KeyUnavailableError, InvalidSignatureError,
    RecordMismatchError
    """
    if persisted is None:
        raise MissingRecordError("required entropy record file not found")

    public_key = fetch_public_key()
    if not public_key:
        raise KeyUnavailableError("unable to retrieve public key for verification")

    if not persisted.signature:
        raise InvalidSignatureError("record carries no signature")
    if not verify_hash(persisted.commitment_hash, persisted.signature, public_key):
        raise InvalidSignatureError("invalid hash signature")

    fresh = assemble_record(
        payload_dir,
        hash_iterations=hash_iterations,
        previous=previous,
        hash_type=hash_type,
    )
    differences = diff_records(persisted, fresh)
    if differences:
        raise RecordMismatchError(differences)

    logger.info("entropy : verified %s", persisted.commitment_hash)
    return persisted
