"""JSON over HTTP with a bounded timeout (httpx).

Transport problems are normalised to ``HttpFetchError`` so callers see one
error type: 408 for a timeout, 503 when the service could not be reached,
the response status for a non-2xx reply.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from entropybeacon.errors import HttpFetchError, KeyUnavailableError, TooManyRetriesError
from entropybeacon.core.retry import RetryPolicy, retry_call

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
STATUS_REQUEST_TIMEOUT = 408
STATUS_SERVICE_UNAVAILABLE = 503


def _request(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    timeout: float,
    **kwargs: Any,
) -> httpx.Response:
    try:
        resp = client.request(method, url, timeout=timeout, **kwargs)
    except httpx.TimeoutException as exc:
        raise HttpFetchError(url, STATUS_REQUEST_TIMEOUT, str(exc)) from exc
    except httpx.TransportError as exc:
        raise HttpFetchError(url, STATUS_SERVICE_UNAVAILABLE, str(exc)) from exc
    if resp.is_error:
        raise HttpFetchError(url, resp.status_code)
    return resp


def _send(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    timeout: float,
    **kwargs: Any,
) -> Any:
    resp = _request(client, method, url, timeout=timeout, **kwargs)
    try:
        return resp.json()
    except ValueError as exc:
        raise HttpFetchError(url, STATUS_SERVICE_UNAVAILABLE, "response is not JSON") from exc


def get_json(client: httpx.Client, url: str, *, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """GET *url* and return the decoded JSON body."""
    return _send(client, "GET", url, timeout=timeout)


def put_json(
    client: httpx.Client,
    url: str,
    body: Any,
    *,
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """PUT *body* as JSON to *url* and return the decoded JSON reply."""
    return _send(client, "PUT", url, timeout=timeout, json=body, headers=headers)


def fetch_public_key(
    client: httpx.Client,
    url: str,
    policy: RetryPolicy,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Fetch ``{"key": <hex>}`` from the key endpoint, retrying on failure.

    Raises ``KeyUnavailableError`` once retries are exhausted, including
    when the endpoint answers without a usable key.
    """

    def _attempt() -> str:
        logger.info("verify : retrieve public key")
        data = get_json(client, url, timeout=timeout)
        key = data.get("key") if isinstance(data, dict) else None
        if not key:
            raise KeyUnavailableError(f"failed to retrieve Ed25519 public key from {url}")
        return str(key)

    try:
        return retry_call(_attempt, policy, label="public key fetch")
    except TooManyRetriesError as exc:
        raise KeyUnavailableError(
            f"unable to retrieve public key for verification : {exc}"
        ) from exc


def ping(client: httpx.Client, url: str, *, timeout: float = DEFAULT_TIMEOUT) -> int:
    """GET *url*, ignoring the body.  Returns the status code."""
    return _request(client, "GET", url, timeout=timeout).status_code
