"""Filesystem storage for payload blobs and beacon records.

Layout (defaults)::

    entropy.json                     current record
    entropy/                         payload directory (hashed)
        timestamp.json, bitcoin.json, ...
        entropy_previous.json        copy of the previous cycle's record
    index/by/entropy_hash/<hash>.json

JSON is written with two-space indentation.  Records are immutable once
written; a new cycle rotates the current record into the payload directory.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from entropybeacon.errors import MissingRecordError
from entropybeacon.models.records import EntropyRecord

logger = logging.getLogger(__name__)


def write_json(path: Path, data: Any) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def read_json(path: Path) -> Any | None:
    """Return the decoded JSON at *path*, or ``None`` if there is no file."""
    path = Path(path)
    if not path.is_file():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


class PayloadStore:
    """Named JSON blobs in the payload directory.

    Parameters
    ----------
    base_path:
        The payload directory.  Created lazily on first write.
    """

    suffix = ".json"

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base

    def path_for(self, name: str) -> Path:
        if Path(name).name != name:
            raise ValueError(f"payload name must be a bare file name: {name!r}")
        return self._base / name

    def write(self, name: str, payload: Any) -> Path:
        path = self.path_for(name)
        write_json(path, payload)
        return path

    def read(self, name: str) -> Any | None:
        return read_json(self.path_for(name))

    def names(self) -> list[str]:
        """Names of stored payload blobs, sorted; empty if no directory yet."""
        if not self._base.is_dir():
            return []
        return sorted(
            p.name for p in self._base.iterdir()
            if p.is_file() and p.name.endswith(self.suffix)
        )

    def clean(self, *, keep: frozenset[str] = frozenset()) -> list[str]:
        """Delete every payload blob whose name is not in *keep*."""
        removed: list[str] = []
        for name in self.names():
            if name in keep:
                continue
            self.path_for(name).unlink()
            removed.append(name)
        return removed


class RecordStore:
    """The current record file and its previous-cycle copy.

    Parameters
    ----------
    record_path:
        Path of the current record file.
    previous_path:
        Where the previous cycle's record is kept (inside the payload
        directory, so it is hashed into the next commitment).
    """

    def __init__(self, record_path: Path, previous_path: Path) -> None:
        self._record_path = Path(record_path)
        self._previous_path = Path(previous_path)

    @property
    def record_path(self) -> Path:
        return self._record_path

    @property
    def previous_path(self) -> Path:
        return self._previous_path

    @staticmethod
    def _load(path: Path) -> EntropyRecord | None:
        try:
            document = read_json(path)
        except ValueError as exc:
            raise MissingRecordError(f"record file '{path}' is not valid JSON: {exc}") from exc
        if document is None:
            return None
        try:
            return EntropyRecord.from_document(document)
        except ValidationError as exc:
            raise MissingRecordError(f"record file '{path}' is not a valid record: {exc}") from exc

    def load_current(self) -> EntropyRecord | None:
        return self._load(self._record_path)

    def load_previous(self) -> EntropyRecord | None:
        return self._load(self._previous_path)

    def save(self, record: EntropyRecord) -> Path:
        write_json(self._record_path, record.to_document())
        return self._record_path

    def rotate(self) -> bool:
        """Copy the current record over the previous-record slot.

        The bytes are copied verbatim so the previous record hashes the
        same as when it was published.  Returns ``False`` when there is no
        current record yet.
        """
        if not self._record_path.is_file():
            return False
        self._previous_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(self._record_path, self._previous_path)
        logger.info("entropy : copied to '%s'", self._previous_path)
        return True
