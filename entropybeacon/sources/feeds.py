"""Non-chain sources: the run timestamp, user submissions, Hacker News."""

from __future__ import annotations

from typing import Any

from entropybeacon.bridge.http import get_json
from entropybeacon.core.record_builder import iso_timestamp
from entropybeacon.errors import CollectionError
from entropybeacon.sources.base import FetchContext

USER_ENTROPY_URL = "https://entropy.truestamp.com/entries"
HN_API_URL = "https://hacker-news.firebaseio.com/v0"
HN_STORY_COUNT = 10


def fetch_timestamp(ctx: FetchContext) -> dict[str, str]:
    return {"timestamp": iso_timestamp(ctx.now)}


def fetch_user_entropy(ctx: FetchContext) -> dict[str, Any]:
    data = get_json(ctx.client, USER_ENTROPY_URL, timeout=ctx.timeout)
    if not isinstance(data, list):
        raise CollectionError(f"user-entropy : expected Array, got {data!r}")
    return {"data": data}


def fetch_hacker_news(ctx: FetchContext) -> dict[str, Any]:
    """The newest stories, in the order Hacker News lists them."""
    story_ids = get_json(ctx.client, f"{HN_API_URL}/newstories.json", timeout=ctx.timeout)
    if not isinstance(story_ids, list):
        raise CollectionError(f"hacker-news : expected Array, got {story_ids!r}")
    stories = [
        get_json(ctx.client, f"{HN_API_URL}/item/{story_id}.json", timeout=ctx.timeout)
        for story_id in story_ids[:HN_STORY_COUNT]
    ]
    return {"stories": stories}
