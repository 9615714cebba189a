"""Content-addressed chain index.

Each cycle writes ``{index_dir}/{previous_hash}.json`` containing
``{"id": <external id>}``, so that the revision which published a record
can be found from the record's commitment hash.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from entropybeacon.core.record_store import write_json
from entropybeacon.errors import InvalidInputError
from entropybeacon.models.records import ChainIndexEntry, EntropyRecord

logger = logging.getLogger(__name__)

# Matched with fullmatch: a trailing newline is not part of an id.
SHA1_PATTERN = re.compile(r"(?:0x)*(?:[A-Fa-f0-9]{2}){20}")
SHA256_PATTERN = re.compile(r"(?:0x)*(?:[A-Fa-f0-9]{2}){32}")


def is_revision_id(value: str) -> bool:
    """A 40 hex char SHA-1 revision id (``0x`` prefix tolerated)."""
    return bool(value) and SHA1_PATTERN.fullmatch(value) is not None


def is_sha256_hex(value: str) -> bool:
    return bool(value) and SHA256_PATTERN.fullmatch(value) is not None


class ChainIndexer:
    """Writes chain index entries under *index_dir*.

    Parameters
    ----------
    index_dir:
        Root of the index, e.g. ``index/by/entropy_hash``.
    """

    def __init__(self, index_dir: Path) -> None:
        self._index_dir = Path(index_dir)

    def path_for(self, commitment_hash: str) -> Path:
        return self._index_dir / f"{commitment_hash}.json"

    def index(self, previous_hash: str, external_id: str) -> ChainIndexEntry:
        """Write the entry keyed by *previous_hash*.

        Both inputs are validated before anything touches the filesystem.

        Raises
        ------
        InvalidInputError
            If *external_id* is not a revision id or *previous_hash* is not
            a SHA-256 hex digest.
        """
        if not is_revision_id(external_id):
            raise InvalidInputError(
                "invalid parent commit id, must be a SHA1 commit ID"
            )
        if not is_sha256_hex(previous_hash):
            raise InvalidInputError("missing or invalid entropy hash in previous record")

        entry = ChainIndexEntry(keyed_by=previous_hash, external_id=external_id)
        path = self.path_for(previous_hash)
        write_json(path, entry.to_document())
        logger.info(
            "entropy-index : index file written : '%s' : %s", path, external_id
        )
        return entry

    def index_previous(
        self, previous: EntropyRecord | None, external_id: str
    ) -> ChainIndexEntry | None:
        """Index *previous* if there is one.

        With no previous record there is nothing to index yet; this is a
        no-op returning ``None``.  The external id is still validated first.
        """
        if not is_revision_id(external_id):
            raise InvalidInputError(
                "invalid parent commit id, must be a SHA1 commit ID"
            )
        if previous is None:
            logger.info("entropy-index : no previous record, nothing to index")
            return None
        return self.index(previous.commitment_hash, external_id)
