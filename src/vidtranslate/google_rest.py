"""
Thin helpers for calling Google Cloud REST endpoints with an API key.
"""

import logging
from typing import Any

import httpx

from .errors import StageTimeoutError, UpstreamServiceError

logger = logging.getLogger("vidtranslate")

USER_AGENT = "video-translator/1.0"


def make_client(timeout: float = 120.0, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Create the HTTP client shared by the stages of one pipeline run."""
    return httpx.Client(
        follow_redirects=True,
        timeout=timeout,
        headers={"User-Agent": USER_AGENT, "Content-Type": "application/json"},
        transport=transport,
    )


def _error_summary(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return r.text[:300]
    # Gateways in front of the API may answer with a list or a bare string.
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return r.text[:300]


def post_json(
    client: httpx.Client, service: str, url: str, api_key: str | None, payload: dict[str, Any]
) -> dict[str, Any]:
    """POST a JSON payload and return the decoded JSON body."""
    params = {"key": api_key} if api_key else None
    try:
        r = client.post(url, params=params, json=payload)
    except httpx.TimeoutException as e:
        timeout = client.timeout.read or 0.0
        raise StageTimeoutError(f"{service} request", timeout) from e
    except httpx.HTTPError as e:
        raise UpstreamServiceError(service, f"{service} request failed: {e}") from e

    if r.status_code >= 400:
        summary = _error_summary(r)
        logger.error("%s returned HTTP %d: %s", service, r.status_code, summary)
        raise UpstreamServiceError(
            service, f"{service} failed: {r.status_code} {summary}", status_code=r.status_code
        )
    try:
        data = r.json()
    except ValueError as e:
        raise UpstreamServiceError(
            service, f"{service} returned a non-JSON body", status_code=r.status_code
        ) from e
    if not isinstance(data, dict):
        raise UpstreamServiceError(service, f"{service} returned unexpected payload", r.status_code)
    return data
