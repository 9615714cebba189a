"""Deterministic hashing of the payload directory.

The commitment for a cycle is built in four steps:

1. every ``*.json`` payload file is hashed (``hash_file_set``),
2. the file records are sorted case-insensitively (``sort_file_records``),
3. the hex digests are concatenated with no separator,
4. the concatenation is re-hashed ``iterations`` times (``slow_hash``).

Each round of step 4 hashes the UTF-8 bytes of the previous round's
lowercase *hex string*, not its decoded binary form.  Published commitments
depend on this, so it must not change.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from entropybeacon.models.records import FileRecord

logger = logging.getLogger(__name__)

HASH_TYPE = "sha256"
PAYLOAD_SUFFIX = ".json"


def sha256_hex(data: bytes | str) -> str:
    """Return the lowercase SHA-256 hex digest of *data*.

    ``str`` input is encoded as UTF-8 first.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def hash_file_set(payload_dir: Path) -> list[FileRecord]:
    """Hash every regular ``*.json`` file directly inside *payload_dir*.

    The result is in filesystem enumeration order.  Any unreadable directory
    or file raises ``OSError``: a silently skipped source would produce a
    wrong commitment that still gets signed.
    """
    records: list[FileRecord] = []
    for path in Path(payload_dir).iterdir():
        if not path.is_file() or not path.name.endswith(PAYLOAD_SUFFIX):
            continue
        records.append(
            FileRecord(
                name=path.name,
                digest_hex=sha256_hex(path.read_bytes()),
                digest_algorithm=HASH_TYPE,
            )
        )
    logger.debug("Hashed %d payload files in %s", len(records), payload_dir)
    return records


def sort_file_records(records: Iterable[FileRecord]) -> list[FileRecord]:
    """Sort by upper-cased name; equal keys keep their input order."""
    return sorted(records, key=lambda r: r.name.upper())


def concatenate_digests(records: Sequence[FileRecord]) -> str:
    return "".join(r.digest_hex for r in records)


def slow_hash(seed: str, iterations: int) -> str:
    """Apply SHA-256 to the running hex string *iterations* times.

    With ``iterations == 0`` the seed is returned unchanged.
    """
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")
    acc = seed
    for _ in range(iterations):
        acc = hashlib.sha256(acc.encode("utf-8")).hexdigest()
    return acc


def compute_commitment(records: Sequence[FileRecord], iterations: int) -> str:
    """Commitment hash for records that are already sorted."""
    return slow_hash(concatenate_digests(records), iterations)
