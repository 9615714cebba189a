"""Unit tests for payload and record storage."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from entropybeacon.core.record_store import PayloadStore, RecordStore, read_json, write_json
from entropybeacon.errors import MissingRecordError
from entropybeacon.models.records import EntropyRecord, FileRecord


def _record(commitment: str = "c" * 64) -> EntropyRecord:
    return EntropyRecord(
        files=(FileRecord(name="a.json", digest_hex="a" * 64, digest_algorithm="sha256"),),
        hash_type="sha256",
        hash_iterations=3,
        commitment_hash=commitment,
        created_at="2024-03-01T00:00:00.000Z",
    )


class TestJsonHelpers:
    def test_write_uses_two_space_indent_and_creates_parents(self, tmp_path: Path):
        path = tmp_path / "deep" / "x.json"
        write_json(path, {"a": 1})
        assert path.read_text() == '{\n  "a": 1\n}'

    def test_read_missing_returns_none(self, tmp_path: Path):
        assert read_json(tmp_path / "missing.json") is None

    def test_non_ascii_written_verbatim(self, tmp_path: Path):
        path = tmp_path / "x.json"
        write_json(path, {"title": "café"})
        assert "café" in path.read_text(encoding="utf-8")


class TestPayloadStore:
    def test_write_read_and_list(self, tmp_path: Path):
        store = PayloadStore(tmp_path / "entropy")
        assert store.names() == []
        store.write("bitcoin.json", {"height": 1})
        store.write("timestamp.json", {"timestamp": "t"})
        (tmp_path / "entropy" / "readme.txt").write_text("not a payload")
        assert store.names() == ["bitcoin.json", "timestamp.json"]
        assert store.read("bitcoin.json") == {"height": 1}
        assert store.read("missing.json") is None

    def test_rejects_names_with_path_components(self, tmp_path: Path):
        store = PayloadStore(tmp_path)
        with pytest.raises(ValueError):
            store.write("../escape.json", {})

    def test_clean_keeps_listed_names(self, tmp_path: Path):
        store = PayloadStore(tmp_path)
        store.write("bitcoin.json", {})
        store.write("entropy_previous.json", {})
        removed = store.clean(keep=frozenset({"entropy_previous.json"}))
        assert removed == ["bitcoin.json"]
        assert store.names() == ["entropy_previous.json"]


class TestRecordStore:
    @pytest.fixture
    def store(self, tmp_path: Path) -> RecordStore:
        return RecordStore(tmp_path / "entropy.json", tmp_path / "entropy" / "entropy_previous.json")

    def test_missing_records_load_as_none(self, store: RecordStore):
        assert store.load_current() is None
        assert store.load_previous() is None

    def test_save_and_load(self, store: RecordStore):
        rec = _record()
        store.save(rec)
        assert store.load_current() == rec

    def test_rotate_copies_bytes_verbatim(self, store: RecordStore):
        assert store.rotate() is False
        store.save(_record())
        assert store.rotate() is True
        assert store.previous_path.read_bytes() == store.record_path.read_bytes()
        assert store.load_previous() == _record()

    def test_invalid_json_is_missing_record(self, store: RecordStore):
        store.record_path.write_text("{not json")
        with pytest.raises(MissingRecordError, match="not valid JSON"):
            store.load_current()

    def test_wrong_shape_is_missing_record(self, store: RecordStore):
        store.record_path.write_text(json.dumps({"files": []}))
        with pytest.raises(MissingRecordError, match="not a valid record"):
            store.load_current()
