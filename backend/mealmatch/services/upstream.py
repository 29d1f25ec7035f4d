"""Shared HTTP helpers for third-party provider calls.

Every provider call is a single attempt: non-2xx responses and transport
errors are raised as UpstreamError for the caller to report.
"""

import logging
from typing import Any

import httpx

from mealmatch.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop None/empty values and render booleans the way the providers expect."""
    cleaned = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = str(value).lower()
        cleaned[key] = value
    return cleaned


async def fetch_json(
    http: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
) -> Any:
    """GET a URL and decode the JSON body."""
    try:
        response = await http.get(url, params=clean_params(params))
    except httpx.HTTPError as e:
        logger.error(f"Request to {url} failed: {e}")
        raise UpstreamError(f"Request failed: {e}") from e

    if response.is_error:
        logger.error(f"Request to {url} returned {response.status_code}")
        raise UpstreamError(
            f"Request failed ({response.status_code}): {response.text}",
            upstream_status=response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(f"Invalid JSON from {url}") from e
