from __future__ import annotations

"""Async JSON GET helper over httpx.

A single attempt per call: rate refreshes are single-flight and must issue
exactly one request per cycle, so retrying belongs to the caller if anywhere.
"""
from typing import Any, Dict, Optional

import httpx


class HttpError(Exception):
    pass


async def get_json(
    url: str,
    *,
    timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """GET ``url`` and decode a JSON object body.

    ``timeout=None`` leaves the transport default in place. Raises HttpError
    on transport failure, status >= 400 or a body that is not a JSON object.
    When ``client`` is given it is used and left open.
    """
    kwargs: Dict[str, Any] = {}
    if timeout is not None:
        kwargs["timeout"] = timeout
    try:
        if client is not None:
            resp = await client.get(url, **kwargs)
        else:
            async with httpx.AsyncClient() as own_client:
                resp = await own_client.get(url, **kwargs)
    # InvalidURL (bad base url or key) is not an HTTPError subclass
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise HttpError(f"Failed to fetch JSON from {url}: {e}") from e
    if resp.status_code >= 400:
        raise HttpError(f"HTTP {resp.status_code} for {url}")
    try:
        data = resp.json()
    except ValueError as e:  # JSON decode
        raise HttpError(f"Invalid JSON from {url}: {e}") from e
    if not isinstance(data, dict):
        raise HttpError(f"Expected a JSON object from {url}")
    return data
