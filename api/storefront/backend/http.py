from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from storefront.core.config import settings
from storefront.utils.redaction import redact_cookies, redact_secrets

logger = logging.getLogger("storefront.backend")

MultipartParts = Sequence[tuple[str, tuple[str | None, Any] | tuple[str | None, Any, str]]]


class BackendError(Exception):
    """Raised for transport failures and non-success backend responses."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BackendServerError(BackendError):
    pass


def _client(transport: httpx.AsyncBaseTransport | None, cookies: dict[str, str] | None) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.backend_timeout_seconds, transport=transport, cookies=cookies)


async def fetch_json(
    url: str,
    *,
    params: dict | None = None,
    cookies: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict:
    """GET a JSON document, retrying transport errors and 5xx responses.

    Whatever is left after the last attempt surfaces as ``BackendError``.
    """
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(settings.backend_read_attempts, 1)),
            wait=wait_exponential_jitter(initial=1, max=8),
            retry=retry_if_exception_type((httpx.TransportError, BackendServerError)),
            reraise=True,
        ):
            with attempt:
                async with _client(transport, cookies) as client:
                    response = await client.get(url, params=params, headers={"Cache-Control": "no-store"})
                    if response.status_code >= 500:
                        raise BackendServerError(
                            f"Server error {response.status_code}", status_code=response.status_code
                        )
                    if response.status_code >= 400:
                        raise BackendError(
                            f"Request failed with status {response.status_code}", status_code=response.status_code
                        )
                    return response.json()
    except httpx.HTTPError as exc:
        logger.warning("GET %s failed: %s", redact_secrets(url), redact_secrets(str(exc)))
        raise BackendError(f"Could not reach backend: {exc.__class__.__name__}") from exc
    except ValueError as exc:
        logger.warning("GET %s returned a non-JSON body", redact_secrets(url))
        raise BackendError("Backend returned an unreadable response") from exc
    raise BackendError("Unreachable")


async def send(
    method: str,
    url: str,
    *,
    files: MultipartParts | None = None,
    cookies: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    expected: tuple[int, ...] = (200, 201),
) -> httpx.Response:
    """Send a single write request; writes are never retried."""
    logger.debug("%s %s with cookies %s", method, redact_secrets(url), redact_cookies(cookies))
    try:
        async with _client(transport, cookies) as client:
            response = await client.request(method, url, files=files)
    except httpx.HTTPError as exc:
        logger.warning("%s %s failed: %s", method, redact_secrets(url), redact_secrets(str(exc)))
        raise BackendError(f"Could not reach backend: {exc.__class__.__name__}") from exc
    if response.status_code not in expected:
        logger.warning("%s %s returned %s", method, redact_secrets(url), response.status_code)
        raise BackendError(
            f"Request failed with status {response.status_code}", status_code=response.status_code
        )
    return response
