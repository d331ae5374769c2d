from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import IntegrationError

logger = logging.getLogger(__name__)


async def send(client: httpx.AsyncClient, method: str, url: str, *, operation: str, **kwargs: Any) -> httpx.Response:
    """Send a request and translate transport and HTTP failures into ``IntegrationError``.

    Args:
        client: Shared async client.
        method: HTTP method.
        url: Absolute URL.
        operation: Short label used in error messages and logs (e.g. ``"linkedin.create_post"``).
        **kwargs: Passed through to ``httpx.AsyncClient.request``.
    """
    logger.debug("%s: %s %s", operation, method, url)
    try:
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise IntegrationError(
            f"{operation} failed: API Error {e.response.status_code}",
            status_code=e.response.status_code,
            details=e.response.text[:500],
        ) from e
    except httpx.RequestError as e:
        raise IntegrationError(f"{operation} failed: network error ({type(e).__name__}: {e})") from e
    return response


def json_body(response: httpx.Response, *, operation: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise IntegrationError(
            f"{operation} returned a non-JSON response", status_code=response.status_code, details=response.text[:500]
        ) from e
