"""Unit tests for the request primitive in ``elysium_shield.client._http``.

Covers URL resolution, header construction, rate-limit header parsing and
the response/error normalisation performed by ``send()``.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest
import respx

from elysium_shield.client._http import (
    ShieldResponse,
    build_headers,
    parse_rate_limit,
    resolve_url,
    send,
)
from elysium_shield.core.exceptions import (
    ShieldOperationError,
    ShieldParseError,
    ShieldRateLimitError,
    ShieldTransportError,
)
from elysium_shield.core.schemas import ClientConfig

STATS_URL = "https://elysium-online.xyz/api/v1/shield/stats"


def _config(**overrides: Any) -> ClientConfig:
    return ClientConfig(api_key="sk_test_key", **overrides)


# ---------------------------------------------------------------------------
# resolve_url / build_headers
# ---------------------------------------------------------------------------


class TestResolveUrl:
    def test_absolute_path_replaces_base_path(self) -> None:
        url = resolve_url("https://elysium-online.xyz/api", "/api/v1/shield/check")

        assert str(url) == "https://elysium-online.xyz/api/v1/shield/check"

    def test_base_without_path(self) -> None:
        url = resolve_url("http://localhost:8080", "/api/v1/shield/stats")

        assert str(url) == "http://localhost:8080/api/v1/shield/stats"


def test_build_headers() -> None:
    headers = build_headers(_config(client_version="2.0.0"))

    assert headers == {
        "Content-Type": "application/json",
        "x-api-key": "sk_test_key",
        "User-Agent": "Elysium-Shield-SDK/2.0.0",
    }


# ---------------------------------------------------------------------------
# parse_rate_limit
# ---------------------------------------------------------------------------


class TestParseRateLimit:
    def test_no_headers_returns_none(self) -> None:
        assert parse_rate_limit(httpx.Headers({"content-type": "application/json"})) is None

    def test_all_headers(self) -> None:
        rate_limit = parse_rate_limit(
            httpx.Headers(
                {
                    "X-RateLimit-Limit": "100",
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": "1763566621",
                    "Retry-After": "42",
                }
            )
        )

        assert rate_limit is not None
        assert rate_limit.limit == 100
        assert rate_limit.remaining == 0
        assert rate_limit.retry_after == 42
        assert rate_limit.reset_timestamp == 1763566621
        assert rate_limit.reset_at == "2025-11-19T15:37:01.000Z"

    def test_remaining_zero_is_kept(self) -> None:
        """A reported remaining of 0 is distinct from an absent header."""
        rate_limit = parse_rate_limit(httpx.Headers({"x-ratelimit-remaining": "0"}))

        assert rate_limit is not None
        assert rate_limit.remaining == 0
        assert rate_limit.to_dict() == {"remaining": 0}

    def test_reset_encoding_is_stable(self) -> None:
        headers = httpx.Headers({"x-ratelimit-reset": "1763566621"})

        first = parse_rate_limit(headers)
        second = parse_rate_limit(headers)

        assert first is not None and second is not None
        assert first.reset_at == second.reset_at

    def test_fractional_retry_after_is_truncated(self) -> None:
        rate_limit = parse_rate_limit(httpx.Headers({"retry-after": "1.5"}))

        assert rate_limit is not None
        assert rate_limit.retry_after == 1

    def test_non_numeric_headers_are_ignored(self) -> None:
        rate_limit = parse_rate_limit(
            httpx.Headers(
                {
                    "x-ratelimit-limit": "lots",
                    "retry-after": "Wed, 21 Oct 2015 07:28:00 GMT",
                    "x-ratelimit-remaining": "5",
                }
            )
        )

        assert rate_limit is not None
        assert rate_limit.to_dict() == {"remaining": 5}

    def test_only_unusable_headers_returns_none(self) -> None:
        headers = httpx.Headers({"retry-after": "soon", "x-ratelimit-reset": "1e30"})

        assert parse_rate_limit(headers) is None


# ---------------------------------------------------------------------------
# send
# ---------------------------------------------------------------------------


class TestSend:
    @pytest.mark.asyncio
    async def test_success_injects_rate_limit_into_body(self) -> None:
        with respx.mock:
            respx.get(STATS_URL).mock(
                return_value=httpx.Response(
                    200,
                    json={"success": True, "data": {}},
                    headers={"x-ratelimit-limit": "60", "x-ratelimit-remaining": "59"},
                )
            )
            async with httpx.AsyncClient() as client:
                response = await send(client, _config(), "GET", "/api/v1/shield/stats")

        assert isinstance(response, ShieldResponse)
        assert response.status_code == 200
        assert response.body == {
            "success": True,
            "data": {},
            "rateLimit": {"limit": 60, "remaining": 59},
        }
        assert response.rate_limit is not None
        assert response.rate_limit.remaining == 59

    @pytest.mark.asyncio
    async def test_success_without_rate_limit_headers_leaves_body_untouched(self) -> None:
        with respx.mock:
            respx.get(STATS_URL).mock(
                return_value=httpx.Response(200, json={"success": True})
            )
            async with httpx.AsyncClient() as client:
                response = await send(client, _config(), "GET", "/api/v1/shield/stats")

        assert response.body == {"success": True}
        assert response.rate_limit is None

    @pytest.mark.asyncio
    async def test_non_object_json_body_is_returned_as_is(self) -> None:
        with respx.mock:
            respx.get(STATS_URL).mock(
                return_value=httpx.Response(
                    200, json=[1, 2, 3], headers={"x-ratelimit-remaining": "3"}
                )
            )
            async with httpx.AsyncClient() as client:
                response = await send(client, _config(), "GET", "/api/v1/shield/stats")

        assert response.body == [1, 2, 3]
        assert response.rate_limit is not None

    @pytest.mark.asyncio
    async def test_error_message_prefers_message_then_error(self) -> None:
        with respx.mock:
            respx.get(STATS_URL).mock(
                return_value=httpx.Response(400, json={"error": "Bad Request"})
            )
            async with httpx.AsyncClient() as client:
                with pytest.raises(ShieldOperationError) as exc_info:
                    await send(client, _config(), "GET", "/api/v1/shield/stats")

        err = exc_info.value
        assert err.message == "Bad Request"
        assert err.error == "Bad Request"
        assert err.status_code == 400
        assert err.rate_limit is None

    @pytest.mark.asyncio
    async def test_429_error_shape(self) -> None:
        with respx.mock:
            respx.get(STATS_URL).mock(
                return_value=httpx.Response(
                    429,
                    json={"message": "Too many requests", "error": "rate_limited"},
                    headers={"x-ratelimit-remaining": "0", "retry-after": "42"},
                )
            )
            async with httpx.AsyncClient() as client:
                with pytest.raises(ShieldRateLimitError) as exc_info:
                    await send(client, _config(), "GET", "/api/v1/shield/stats")

        assert exc_info.value.to_dict() == {
            "statusCode": 429,
            "message": "Too many requests",
            "error": "rate_limited",
            "rateLimit": {"remaining": 0, "retryAfter": 42},
        }

    @pytest.mark.asyncio
    async def test_empty_body_is_parse_error(self) -> None:
        with respx.mock:
            respx.get(STATS_URL).mock(return_value=httpx.Response(204))
            async with httpx.AsyncClient() as client:
                with pytest.raises(ShieldParseError) as exc_info:
                    await send(client, _config(), "GET", "/api/v1/shield/stats")

        assert exc_info.value.status_code == 204
        assert exc_info.value.message == "Failed to parse response"
        assert exc_info.value.error

    @pytest.mark.asyncio
    async def test_parse_error_on_error_status_keeps_status(self) -> None:
        with respx.mock:
            respx.get(STATS_URL).mock(
                return_value=httpx.Response(502, text="<html>Bad Gateway</html>")
            )
            async with httpx.AsyncClient() as client:
                with pytest.raises(ShieldParseError) as exc_info:
                    await send(client, _config(), "GET", "/api/v1/shield/stats")

        assert exc_info.value.status_code == 502
        assert exc_info.value.rate_limit is None

    @pytest.mark.asyncio
    async def test_transport_error_has_no_status(self) -> None:
        with respx.mock:
            respx.get(STATS_URL).mock(side_effect=httpx.ConnectError("Name or service not known"))
            async with httpx.AsyncClient() as client:
                with pytest.raises(ShieldTransportError) as exc_info:
                    await send(client, _config(), "GET", "/api/v1/shield/stats")

        assert exc_info.value.to_dict() == {
            "message": "Network error",
            "error": "Name or service not known",
        }

    @pytest.mark.asyncio
    async def test_debug_mode_does_not_change_outcome(self) -> None:
        with respx.mock:
            respx.get(STATS_URL).mock(return_value=httpx.Response(200, json={"success": True}))
            async with httpx.AsyncClient() as client:
                response = await send(client, _config(debug=True), "GET", "/api/v1/shield/stats")

        assert response.body == {"success": True}
