"""Entropy sources, in collection order.

Each source writes one payload file.  Only the timestamp source is
essential; every network source may drop out of a cycle.
"""

from __future__ import annotations

from entropybeacon.sources.base import EntropySource, FetchContext
from entropybeacon.sources.beacons import fetch_drand_beacon, fetch_nist_beacon
from entropybeacon.sources.chains import fetch_bitcoin, fetch_ethereum, fetch_stellar
from entropybeacon.sources.feeds import fetch_hacker_news, fetch_timestamp, fetch_user_entropy

DEFAULT_SOURCES: tuple[EntropySource, ...] = (
    EntropySource("timestamp", "timestamp.json", fetch_timestamp, essential=True),
    EntropySource("bitcoin", "bitcoin.json", fetch_bitcoin),
    EntropySource("ethereum", "ethereum.json", fetch_ethereum),
    EntropySource("nist-beacon", "nist-beacon.json", fetch_nist_beacon),
    EntropySource("user-entropy", "user-entropy.json", fetch_user_entropy),
    EntropySource("stellar", "stellar.json", fetch_stellar),
    EntropySource("drand-beacon", "drand-beacon.json", fetch_drand_beacon),
    EntropySource("hacker-news", "hacker-news.json", fetch_hacker_news),
)

SOURCES_BY_NAME: dict[str, EntropySource] = {s.name: s for s in DEFAULT_SOURCES}

__all__ = [
    "DEFAULT_SOURCES",
    "SOURCES_BY_NAME",
    "EntropySource",
    "FetchContext",
]
