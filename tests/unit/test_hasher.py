"""Unit tests for the digest primitive, file-set hasher, sorter and slow hash."""

from __future__ import annotations

import hashlib
import itertools
from pathlib import Path

import pytest

from entropybeacon.core.hasher import (
    HASH_TYPE,
    compute_commitment,
    concatenate_digests,
    hash_file_set,
    sha256_hex,
    slow_hash,
    sort_file_records,
)
from entropybeacon.models.records import FileRecord

ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def _rec(name: str, digest: str = "") -> FileRecord:
    return FileRecord(name=name, digest_hex=digest or sha256_hex(name), digest_algorithm=HASH_TYPE)


# ---------------------------------------------------------------------------
# Test: Digest primitive
# ---------------------------------------------------------------------------


class TestSha256Hex:
    def test_known_vectors(self):
        assert sha256_hex(b"abc") == ABC_SHA256
        assert sha256_hex(b"") == EMPTY_SHA256

    def test_str_is_utf8_encoded(self):
        assert sha256_hex("abc") == sha256_hex(b"abc")

    def test_output_is_lowercase_hex(self):
        digest = sha256_hex(b"entropy")
        assert len(digest) == 64
        assert digest == digest.lower()


# ---------------------------------------------------------------------------
# Test: File set hasher
# ---------------------------------------------------------------------------


class TestHashFileSet:
    def test_hashes_every_json_file(self, payload_dir: Path):
        records = hash_file_set(payload_dir)
        names = sorted(r.name for r in records)
        assert names == ["bitcoin.json", "drand-beacon.json", "timestamp.json"]
        for r in records:
            assert r.digest_hex == sha256_hex((payload_dir / r.name).read_bytes())
            assert r.digest_algorithm == "sha256"

    def test_ignores_other_extensions_and_directories(self, payload_dir: Path):
        (payload_dir / "notes.txt").write_text("ignored")
        (payload_dir / "nested.json").mkdir()
        names = {r.name for r in hash_file_set(payload_dir)}
        assert "notes.txt" not in names
        assert "nested.json" not in names

    def test_missing_directory_raises_oserror(self, tmp_path: Path):
        with pytest.raises(OSError):
            hash_file_set(tmp_path / "does-not-exist")

    def test_empty_directory_yields_no_records(self, tmp_path: Path):
        assert hash_file_set(tmp_path) == []


# ---------------------------------------------------------------------------
# Test: Deterministic sorter
# ---------------------------------------------------------------------------


class TestSortFileRecords:
    def test_sort_is_case_insensitive(self):
        records = [_rec("b.json"), _rec("A.json"), _rec("c.json"), _rec("a.json")]
        ordered = [r.name for r in sort_file_records(records)]
        assert ordered.index("A.json") in (0, 1)
        assert ordered.index("a.json") in (0, 1)
        assert ordered[2:] == ["b.json", "c.json"]

    def test_case_ties_keep_insertion_order(self):
        upper_first = sort_file_records([_rec("A.json"), _rec("a.json")])
        lower_first = sort_file_records([_rec("a.json"), _rec("A.json")])
        assert [r.name for r in upper_first] == ["A.json", "a.json"]
        assert [r.name for r in lower_first] == ["a.json", "A.json"]

    def test_uppercase_collation_not_lowercase(self):
        # '_' (0x5F) sorts after 'A'-'Z' but before 'a'-'z'; upper-casing
        # puts "a_b" after "aB" whereas lower-casing would put it before.
        ordered = [r.name for r in sort_file_records([_rec("a_b.json"), _rec("aB.json")])]
        assert ordered == ["aB.json", "a_b.json"]

    def test_permutation_invariance(self):
        records = [_rec("timestamp.json"), _rec("Bitcoin.json"), _rec("drand.json"), _rec("nist.json")]
        expected = [r.name for r in sort_file_records(records)]
        for perm in itertools.permutations(records):
            assert [r.name for r in sort_file_records(perm)] == expected


# ---------------------------------------------------------------------------
# Test: Slow hash / commitment
# ---------------------------------------------------------------------------


class TestSlowHash:
    def test_zero_iterations_returns_seed(self):
        assert slow_hash("seed", 0) == "seed"

    def test_negative_iterations_rejected(self):
        with pytest.raises(ValueError):
            slow_hash("seed", -1)

    def test_three_rounds_match_manual_chain(self):
        seed = "abc"
        h1 = hashlib.sha256(seed.encode()).hexdigest()
        h2 = hashlib.sha256(h1.encode()).hexdigest()
        h3 = hashlib.sha256(h2.encode()).hexdigest()
        assert slow_hash(seed, 3) == h3

    def test_hashes_hex_text_not_raw_bytes(self):
        h1 = sha256_hex("abc")
        text_round = hashlib.sha256(h1.encode("utf-8")).hexdigest()
        raw_round = hashlib.sha256(bytes.fromhex(h1)).hexdigest()
        assert slow_hash("abc", 2) == text_round
        assert slow_hash("abc", 2) != raw_round

    def test_deterministic(self):
        assert slow_hash("x" * 64, 50) == slow_hash("x" * 64, 50)

    def test_n_and_n_plus_one_differ(self):
        for n in range(0, 10):
            assert slow_hash("seed", n) != slow_hash("seed", n + 1)


class TestCommitment:
    def test_concatenation_has_no_separator(self):
        records = [_rec("a.json", "11"), _rec("b.json", "22"), _rec("c.json", "33")]
        assert concatenate_digests(records) == "112233"

    def test_three_file_scenario(self, payload_dir: Path):
        files = sort_file_records(hash_file_set(payload_dir))
        d1, d2, d3 = (f.digest_hex for f in files)
        concat = d1 + d2 + d3
        expected = sha256_hex(sha256_hex(sha256_hex(concat)))
        assert compute_commitment(files, 3) == expected

    def test_reverse_enumeration_gives_same_commitment(self, payload_dir: Path):
        records = hash_file_set(payload_dir)
        forward = compute_commitment(sort_file_records(records), 3)
        backward = compute_commitment(sort_file_records(list(reversed(records))), 3)
        assert forward == backward

    def test_single_byte_flip_changes_commitment(self, payload_dir: Path):
        before = compute_commitment(sort_file_records(hash_file_set(payload_dir)), 3)
        path = payload_dir / "bitcoin.json"
        data = bytearray(path.read_bytes())
        data[0] ^= 0x01
        path.write_bytes(bytes(data))
        after = compute_commitment(sort_file_records(hash_file_set(payload_dir)), 3)
        assert before != after
