"""Publish the latest record to Cloudflare Workers KV, then ping a heartbeat.

Publishing is best-effort: a failed PUT or heartbeat is logged and the run
continues.  Missing credentials are a configuration error.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from entropybeacon.bridge.http import ping, put_json
from entropybeacon.config import BeaconConfig
from entropybeacon.core.retry import RetryPolicy, retry_call
from entropybeacon.errors import BeaconError, ConfigurationError, TooManyRetriesError

logger = logging.getLogger(__name__)

CLOUDFLARE_API_URL = "https://api.cloudflare.com/client/v4"


def kv_value_url(config: BeaconConfig) -> str:
    """The KV value URL for the configured account, namespace and key."""
    if not config.kv_account_id or not config.kv_namespace_id:
        raise ConfigurationError(
            "missing KV account or namespace id: set ENTROPYBEACON_KV_ACCOUNT_ID "
            "and ENTROPYBEACON_KV_NAMESPACE_ID"
        )
    return (
        f"{CLOUDFLARE_API_URL}/accounts/{config.kv_account_id}"
        f"/storage/kv/namespaces/{config.kv_namespace_id}"
        f"/values/{config.kv_key_name}?expiration_ttl={config.kv_expiration_ttl}"
    )


def ping_heartbeat(client: httpx.Client, url: str, *, timeout: float) -> bool:
    """GET the heartbeat URL; ``False`` (logged) on any failure."""
    try:
        ping(client, url, timeout=timeout)
    except BeaconError as exc:
        logger.error("heartbeat failed : %s", exc)
        return False
    logger.info("entropy-upload-kv : success : heartbeat logged")
    return True


def publish_latest(
    document: dict[str, Any],
    config: BeaconConfig,
    client: httpx.Client,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """PUT *document* as the latest record.  Returns ``True`` on success."""
    url = kv_value_url(config)
    headers = {
        "X-Auth-Email": config.kv_auth_email,
        "X-Auth-Key": config.kv_auth_key,
        "Content-Type": "application/json",
    }
    policy = RetryPolicy(delay=config.retry_delay, max_tries=config.retry_max_tries)

    def _attempt() -> Any:
        logger.info("entropy-upload-kv : PUT")
        return put_json(client, url, document, headers=headers, timeout=config.http_timeout)

    try:
        reply = retry_call(_attempt, policy, label="entropy-upload-kv", sleep=sleep)
    except TooManyRetriesError as exc:
        logger.error("entropy-upload-kv tooManyRetries : %s", exc)
        return False

    logger.info("entropy-upload-kv : success : latest record written to KV : %s", reply)
    if config.heartbeat_url:
        ping_heartbeat(client, config.heartbeat_url, timeout=config.http_timeout)
    else:
        logger.info("entropy-upload-kv : heartbeat not logged : no heartbeat URL configured")
    return True
