"""End-to-end integration tests — full beacon cycles through every phase.

Each cycle runs clean → collect → generate → verify → index → upload
against a mocked HTTP transport.  Two consecutive cycles must form a hash
chain: the second record commits to the first through ``prevHash`` and
through the ``entropy_previous.json`` payload copy.
"""

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from entropybeacon.core.hasher import sha256_hex
from entropybeacon.core.pipeline import RunContext, run_phases
from entropybeacon.models.phases import PHASE_ORDER, Phase
from entropybeacon.publish.kv_store import CLOUDFLARE_API_URL
from entropybeacon.sources.beacons import DRAND_URL
from entropybeacon.sources.chains import BITCOIN_LATEST_BLOCK_URL
from entropybeacon.sources.feeds import USER_ENTROPY_URL

KV_URL = f"{CLOUDFLARE_API_URL}/accounts/acct/storage/kv/namespaces/ns/values/latest"


class FakeNetwork:
    """Mutable upstream state plus a log of what was published."""

    def __init__(self) -> None:
        self.height = 830000
        self.published: list[dict] = []

    def bitcoin(self, _request):
        return {"height": self.height, "hash": f"{self.height:064x}", "time": 1, "block_index": 7}

    def kv_put(self, request):
        self.published.append(json.loads(request.content))
        return {"success": True}

    def routes(self) -> dict:
        return {
            BITCOIN_LATEST_BLOCK_URL: self.bitcoin,
            f"{DRAND_URL}/info": {"period": 30},
            f"{DRAND_URL}/public/latest": {"round": 1, "randomness": "ab"},
            USER_ENTROPY_URL: [{"entropy": "hello"}],
            KV_URL: self.kv_put,
        }


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def run_cycle(config, make_client, network, no_sleep, fixed_now):
    """Run every phase once; each call advances the clock by a minute."""
    cycles: list[int] = []

    def _run():
        now = fixed_now + timedelta(minutes=len(cycles))
        cycles.append(1)
        with make_client(network.routes()) as client:
            ctx = RunContext(config=config, client=client, now=now, sleep=no_sleep)
            return run_phases(PHASE_ORDER, ctx)

    return _run


class TestSingleCycle:
    def test_all_phases_run_in_order(self, run_cycle):
        result = run_cycle()
        assert result.phases == list(PHASE_ORDER)

    def test_unreachable_sources_are_skipped(self, run_cycle, config):
        result = run_cycle()
        ok = {o.name for o in result.outcomes if o.ok}
        assert ok == {"timestamp", "bitcoin", "user-entropy", "drand-beacon"}
        written = sorted(p.name for p in config.payload_dir.glob("*.json"))
        assert written == [
            "bitcoin.json",
            "drand-beacon.json",
            "timestamp.json",
            "user-entropy.json",
        ]

    def test_record_generated_verified_and_published(self, run_cycle, network, config):
        result = run_cycle()
        assert result.generated is not None
        assert result.verified.to_document() == result.generated.to_document()
        assert result.published is True
        assert network.published == [json.loads(config.record_path.read_text())]

    def test_first_cycle_has_nothing_to_index(self, run_cycle, config):
        result = run_cycle()
        assert result.generated.prev_hash is None
        assert result.index_entry is None
        assert not config.index_dir.exists()


class TestChainedCycles:
    def test_second_cycle_links_to_first(self, run_cycle, network, config):
        first = run_cycle().generated
        first_bytes = config.record_path.read_bytes()
        network.height += 1
        second = run_cycle().generated

        assert second.prev_hash == first.commitment_hash
        files = {f.name: f.digest_hex for f in second.files}
        assert files["entropy_previous.json"] == sha256_hex(first_bytes)
        assert files["bitcoin.json"] != {f.name: f.digest_hex for f in first.files}["bitcoin.json"]

    def test_second_cycle_indexes_first_record(self, run_cycle, config):
        first = run_cycle().generated
        result = run_cycle()
        assert result.index_entry is not None
        assert result.index_entry.keyed_by == first.commitment_hash
        entry = config.index_dir / f"{first.commitment_hash}.json"
        assert json.loads(entry.read_text()) == {"id": config.parent_commit_id}

    def test_clean_keeps_previous_record_copy(self, run_cycle, config):
        run_cycle()
        run_cycle()
        result = run_cycle()
        assert "entropy_previous.json" not in result.removed
        assert (config.payload_dir / "entropy_previous.json").is_file()

    def test_published_record_tracks_latest_cycle(self, run_cycle, network):
        run_cycle()
        second = run_cycle().generated
        assert len(network.published) == 2
        assert network.published[-1]["hash"] == second.commitment_hash
        assert network.published[-1]["prevHash"] == second.prev_hash
