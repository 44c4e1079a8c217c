"""HTTP request primitive for the Shield client.

Internal module - not part of the public API. Used exclusively by
:mod:`~elysium_shield.client.client`.

Contains:
- Request URL resolution and header construction
- Rate-limit header parsing (``X-RateLimit-*`` and ``Retry-After``)
- ``send``: one request/response round-trip with a hard deadline, JSON
  parsing, and mapping of every failure onto
  :class:`~elysium_shield.core.exceptions.ShieldOperationError`
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from elysium_shield.config.constants import (
    API_KEY_HEADER,
    RATELIMIT_LIMIT_HEADER,
    RATELIMIT_REMAINING_HEADER,
    RATELIMIT_RESET_HEADER,
    RETRY_AFTER_HEADER,
    SDK_NAME,
)
from elysium_shield.core.exceptions import (
    ShieldParseError,
    ShieldTimeoutError,
    ShieldTransportError,
    error_for_status,
)
from elysium_shield.core.schemas import ClientConfig, RateLimitInfo

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------


@dataclass
class ShieldResponse:
    """Outcome of a successful (2xx, valid JSON) Shield request.

    Attributes:
        status_code: HTTP status code of the response.
        body: Parsed JSON body.  When it is an object and rate-limit headers
            were present, it carries an injected ``rateLimit`` key.
        rate_limit: Rate-limit snapshot from the response headers, or
            ``None`` when the response carried none.
    """

    status_code: int
    body: Any
    rate_limit: RateLimitInfo | None = None


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------


def resolve_url(api_url: str, path: str) -> httpx.URL:
    """Resolve *path* against *api_url* following RFC 3986.

    An absolute *path* replaces the base URL's path component:

    >>> str(resolve_url("https://elysium-online.xyz/api", "/api/v1/shield/stats"))
    'https://elysium-online.xyz/api/v1/shield/stats'
    """
    return httpx.URL(api_url).join(path)


def build_headers(config: ClientConfig) -> dict[str, str]:
    """Return the headers sent with every Shield request."""
    return {
        "Content-Type": "application/json",
        API_KEY_HEADER: config.api_key,
        "User-Agent": f"{SDK_NAME}/{config.client_version}",
    }


# ---------------------------------------------------------------------------
# Rate-limit headers
# ---------------------------------------------------------------------------


def _parse_int_header(value: str | None, debug: bool = False) -> int | None:
    """Parse a numeric header value, tolerating fractional seconds.

    Returns ``None`` for absent, empty or non-numeric values.
    """
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError:
        pass
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        if debug:
            logger.debug("shield: ignoring non-numeric rate-limit header", value=value)
        return None


def parse_rate_limit(headers: httpx.Headers, debug: bool = False) -> RateLimitInfo | None:
    """Extract rate-limit state from response *headers*.

    Each of the four headers is optional and parsed independently.  A reset
    header (Unix epoch seconds) yields both ``reset_at`` (ISO-8601) and
    ``reset_timestamp``.  Unusable values are skipped, and logged when
    *debug* is set.

    Returns:
        :class:`RateLimitInfo`, or ``None`` if no usable header was present.
    """
    fields: dict[str, Any] = {}

    limit = _parse_int_header(headers.get(RATELIMIT_LIMIT_HEADER), debug)
    if limit is not None:
        fields["limit"] = limit

    remaining = _parse_int_header(headers.get(RATELIMIT_REMAINING_HEADER), debug)
    if remaining is not None:
        fields["remaining"] = remaining

    retry_after = _parse_int_header(headers.get(RETRY_AFTER_HEADER), debug)
    if retry_after is not None:
        fields["retry_after"] = retry_after

    info = RateLimitInfo(**fields)
    reset = _parse_int_header(headers.get(RATELIMIT_RESET_HEADER), debug)
    if reset is not None:
        try:
            info = RateLimitInfo.from_reset_timestamp(reset, **fields)
        except (ValueError, OverflowError, OSError):
            if debug:
                logger.debug("shield: ignoring out-of-range reset header", reset=reset)

    return None if info.is_empty else info


# ---------------------------------------------------------------------------
# HTTP request dispatch
# ---------------------------------------------------------------------------


async def send(
    client: httpx.AsyncClient,
    config: ClientConfig,
    method: str,
    path: str,
    body: dict[str, Any] | None = None,
) -> ShieldResponse:
    """Perform one Shield API round-trip.

    The whole round-trip (connect, send, read the full body) must finish
    within ``config.timeout_ms``; otherwise the request task is cancelled,
    which closes its connection, and :class:`ShieldTimeoutError` is raised.

    Args:
        client: HTTP client used for the request.
        config: Client configuration supplying URL, credential and deadline.
        method: HTTP method (``"GET"`` or ``"POST"``).
        path: API path, resolved against ``config.api_url``.
        body: Optional JSON request body.

    Returns:
        :class:`ShieldResponse` for a 2xx response with a JSON body.

    Raises:
        ShieldTimeoutError: The deadline elapsed before a full response.
        ShieldTransportError: DNS, connection or protocol failure.
        ShieldParseError: The body is not valid JSON (any status code).
        ShieldOperationError: Non-2xx status (or the 401/403/429 subclass).
    """
    url = resolve_url(config.api_url, path)
    log = logger.bind(method=method, url=str(url))
    if config.debug:
        log.debug("shield: sending request", body=body)

    content = json.dumps(body).encode("utf-8") if body is not None else None
    timeout = config.timeout_seconds

    try:
        response = await asyncio.wait_for(
            client.request(
                method,
                url,
                content=content,
                headers=build_headers(config),
                timeout=httpx.Timeout(timeout),
            ),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        if config.debug:
            log.debug("shield: request timed out", timeout_ms=config.timeout_ms)
        raise ShieldTimeoutError(
            "Request timeout",
            error=f"Request exceeded {config.timeout_ms}ms",
        ) from exc
    except httpx.RequestError as exc:
        if config.debug:
            log.debug("shield: request error", error=str(exc))
        raise ShieldTransportError("Network error", error=str(exc) or type(exc).__name__) from exc

    status = response.status_code
    try:
        payload = response.json()
    except ValueError as exc:
        if config.debug:
            log.debug("shield: unparseable response body", status=status)
        raise ShieldParseError(
            "Failed to parse response",
            status_code=status,
            error=str(exc),
        ) from exc

    rate_limit = parse_rate_limit(response.headers, config.debug)
    if rate_limit is not None and isinstance(payload, dict):
        payload["rateLimit"] = rate_limit.to_dict()

    if 200 <= status < 300:
        if config.debug:
            log.debug(
                "shield: request successful",
                status=status,
                rate_limit=rate_limit.to_dict() if rate_limit else None,
            )
        return ShieldResponse(status_code=status, body=payload, rate_limit=rate_limit)

    detail = payload if isinstance(payload, dict) else {}
    message = detail.get("message") or detail.get("error") or "Request failed"
    error = detail.get("error") or "Unknown error"
    if config.debug:
        log.debug("shield: request failed", status=status, response=payload)
    raise error_for_status(status)(
        str(message),
        status_code=status,
        error=str(error),
        rate_limit=rate_limit,
    )
