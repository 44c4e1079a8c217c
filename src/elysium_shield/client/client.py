"""Shield client implementation.

Async client for the Elysium Shield moderation-intelligence API. Exposes
four operations:

- **check_user()**: risk profile of a Discord user (``POST /shield/check``).
- **report_action()**: contribute a moderation action to the network
  (``POST /shield/report-action``). Requires an API key with the
  ``shield:report_action`` permission.
- **get_network_stats()**: aggregate network statistics
  (``GET /shield/stats``).
- **verify_api_key()**: boolean probe built on ``get_network_stats()``.

Every request goes through :func:`~elysium_shield.client._http.send`, which
normalises transport failures, timeouts, unparseable bodies and non-2xx
statuses into :class:`~elysium_shield.core.exceptions.ShieldOperationError`.
Each operation re-raises those errors with an operation-specific message
prefix while keeping the concrete error class, status code and rate-limit
snapshot.

The client does not retry and does not throttle. Rate-limit headers are
reported back through :meth:`ShieldClient.get_rate_limit` and on errors, for
the caller to act on.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from elysium_shield.client._http import ShieldResponse, send
from elysium_shield.config.constants import (
    CHECK_USER_PATH,
    NETWORK_STATS_PATH,
    REPORT_ACTION_PATH,
    REQUIRED_ACTION_FIELDS,
    VALID_ACTION_TYPES,
)
from elysium_shield.config.settings import ShieldSettings, get_settings
from elysium_shield.core.exceptions import (
    ShieldConfigurationError,
    ShieldError,
    ShieldOperationError,
    ShieldParseError,
    ShieldValidationError,
)
from elysium_shield.core.schemas import (
    ActionReport,
    ActionReportResult,
    ClientConfig,
    NetworkStats,
    RateLimitInfo,
    UserCheckResult,
)

logger = structlog.get_logger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

# snake_case spellings accepted for report fields passed as a plain mapping
_SNAKE_CASE_FIELDS: dict[str, str] = {
    "userId": "user_id",
    "guildId": "guild_id",
    "actionType": "action_type",
    "reason": "reason",
    "moderatorId": "moderator_id",
    "accountCreated": "account_created",
}


class ShieldClient:
    """Async client for the Elysium Shield API.

    Usage::

        async with ShieldClient(os.environ["SHIELD_API_KEY"]) as shield:
            result = await shield.check_user(str(member.id))
            if result.flagged:
                ...

    Args:
        api_key: Shield API key.  Required.
        api_url: Base URL override.  Defaults to the public Shield endpoint.
        timeout: Per-request deadline in milliseconds.  Defaults to 10000.
        debug: Emit a diagnostic log record for every request, response and
            error (the API key is never logged).
        http_client: Optional injected :class:`httpx.AsyncClient`.  Inject for
            testing or to share a connection pool; the caller keeps ownership
            and must close it.  If ``None``, a client is created on the first
            request and closed by :meth:`aclose`.

    Raises:
        ShieldConfigurationError: If *api_key* is empty, or another option is
            invalid (e.g. a non-positive timeout).
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        api_url: str | None = None,
        timeout: int | None = None,
        debug: bool = False,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ShieldConfigurationError(
                "Shield API key is required. Get one at https://elysium-online.xyz/profile"
            )

        options: dict[str, Any] = {"api_key": api_key, "debug": debug}
        if api_url:
            options["api_url"] = api_url
        if timeout:
            options["timeout_ms"] = timeout
        try:
            self._config = ClientConfig(**options)
        except ValidationError as exc:
            raise ShieldConfigurationError(f"Invalid Shield client configuration: {exc}") from exc

        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._last_rate_limit: RateLimitInfo | None = None

        if self._config.debug:
            logging.getLogger("elysium_shield").setLevel(logging.DEBUG)
            logger.debug("shield: client initialized", api_url=self._config.api_url)

    @classmethod
    def from_settings(
        cls,
        settings: ShieldSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> ShieldClient:
        """Build a client from ``SHIELD_*`` environment settings.

        Args:
            settings: Explicit settings; defaults to :func:`get_settings`.
            http_client: Optional injected HTTP client.

        Raises:
            ShieldConfigurationError: If ``SHIELD_API_KEY`` is not set.
        """
        settings = settings or get_settings()
        return cls(
            settings.api_key,
            api_url=settings.api_url,
            timeout=settings.timeout_ms,
            debug=settings.debug,
            http_client=http_client,
        )

    @property
    def config(self) -> ClientConfig:
        """The immutable configuration of this client."""
        return self._config

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> ShieldClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get_rate_limit(self) -> RateLimitInfo | None:
        """Return the rate limit reported by the most recent successful request.

        Returns ``None`` before any request has completed, or when the last
        response carried no rate-limit headers.  Rate limits attached to
        failed requests are available on the raised error instead.

        Example::

            await shield.get_network_stats()
            rate_limit = shield.get_rate_limit()
            if rate_limit and rate_limit.remaining == 0:
                ...
        """
        return self._last_rate_limit

    async def check_user(self, user_id: str) -> UserCheckResult:
        """Check whether a Discord user is flagged in the Shield network.

        Args:
            user_id: Discord user snowflake ID.

        Returns:
            :class:`UserCheckResult` with ``flagged``, ``trust_score``,
            ``risk_level``, ``action_count``, ``categories`` and
            ``recommendation``.

        Raises:
            ShieldValidationError: If *user_id* is empty.
            ShieldOperationError: On any request failure, prefixed with
                ``"Failed to check user"``.
        """
        if not user_id:
            raise ShieldValidationError("User ID is required", field="user_id")

        prefix = "Failed to check user"
        try:
            response = await self._send("POST", CHECK_USER_PATH, {"userId": str(user_id)})
            body = _require_success(response, prefix)
            return _parse_model(UserCheckResult, _require_data(body, response), response)
        except ShieldOperationError as exc:
            raise exc.with_prefix(prefix) from exc

    async def report_action(
        self,
        action: ActionReport | Mapping[str, Any],
    ) -> ActionReportResult:
        """Report a moderation action to Shield.

        Example::

            await shield.report_action({
                "userId": "123456789",
                "guildId": "987654321",
                "actionType": "ban",
                "reason": "Spam",
                "moderatorId": "111222333",
            })

        Args:
            action: An :class:`ActionReport`, or a mapping with the fields
                ``userId``, ``guildId``, ``actionType``, ``reason``,
                ``moderatorId`` and optionally ``accountCreated`` (camelCase
                or snake_case keys).

        Returns:
            The full :class:`ActionReportResult`, including the top-level
            acknowledgement and the nested ``data`` detail.

        Raises:
            ShieldValidationError: If a required field is missing or the
                action type is not one of :data:`VALID_ACTION_TYPES`.
            ShieldOperationError: On any request failure, prefixed with
                ``"Failed to report action"``.
        """
        report = action if isinstance(action, ActionReport) else _build_action_report(action)

        prefix = "Failed to report action"
        try:
            response = await self._send("POST", REPORT_ACTION_PATH, report.to_payload())
            body = _require_success(response, prefix)
            return _parse_model(ActionReportResult, body, response)
        except ShieldOperationError as exc:
            raise exc.with_prefix(prefix) from exc

    async def get_network_stats(self) -> NetworkStats:
        """Fetch aggregate Shield network statistics.

        Returns:
            :class:`NetworkStats` (participating servers, users checked,
            threats detected, ...).

        Raises:
            ShieldOperationError: On any request failure, prefixed with
                ``"Failed to get network stats"``.
        """
        prefix = "Failed to get network stats"
        try:
            response = await self._send("GET", NETWORK_STATS_PATH)
            body = _require_success(response, prefix)
            return _parse_model(NetworkStats, _require_data(body, response), response)
        except ShieldOperationError as exc:
            raise exc.with_prefix(prefix) from exc

    async def verify_api_key(self) -> bool:
        """Return ``True`` if the API key works, ``False`` otherwise.

        Implemented as a :meth:`get_network_stats` call.  Never raises.
        """
        try:
            await self.get_network_stats()
        except ShieldError as exc:
            if self._config.debug:
                logger.debug("shield: API key verification failed", error=str(exc))
            return False
        except Exception as exc:  # noqa: BLE001
            logger.warning("shield: unexpected error verifying API key", error=str(exc))
            return False
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> ShieldResponse:
        """Send one request and record its rate-limit snapshot."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
        response = await send(self._http_client, self._config, method, path, body)
        self._last_rate_limit = response.rate_limit
        return response


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _require_success(response: ShieldResponse, fallback: str) -> dict[str, Any]:
    """Return the response body, raising if it reports ``success: false``.

    Raises:
        ShieldParseError: If the body is not a JSON object.
        ShieldOperationError: If the body's ``success`` flag is not truthy.
    """
    body = response.body
    if not isinstance(body, dict):
        raise ShieldParseError(
            "Unexpected response shape",
            status_code=response.status_code,
            error=f"expected a JSON object, got {type(body).__name__}",
            rate_limit=response.rate_limit,
        )
    if not body.get("success"):
        error = body.get("error") or fallback
        raise ShieldOperationError(
            str(error),
            status_code=response.status_code,
            error=str(error),
            rate_limit=response.rate_limit,
        )
    return body


def _require_data(body: dict[str, Any], response: ShieldResponse) -> dict[str, Any]:
    """Return the ``data`` object of a successful response.

    Raises:
        ShieldParseError: If ``data`` is missing or not a JSON object.
    """
    data = body.get("data")
    if not isinstance(data, dict):
        raise ShieldParseError(
            "Unexpected response shape",
            status_code=response.status_code,
            error=f"expected a 'data' object, got {type(data).__name__}",
            rate_limit=response.rate_limit,
        )
    return data


def _parse_model(model: type[_ModelT], data: Any, response: ShieldResponse) -> _ModelT:
    """Validate *data* into *model*, reporting shape mismatches as parse errors."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ShieldParseError(
            "Unexpected response shape",
            status_code=response.status_code,
            error=str(exc),
            rate_limit=response.rate_limit,
        ) from exc


def _build_action_report(action: Mapping[str, Any]) -> ActionReport:
    """Validate a report mapping and convert it to :class:`ActionReport`.

    Required fields are checked in wire order so the error names the first
    one missing.

    Raises:
        ShieldValidationError: On a missing field, an unknown action type or
            an otherwise invalid value.
    """
    values: dict[str, Any] = {}
    for wire_name, field_name in _SNAKE_CASE_FIELDS.items():
        value = action.get(wire_name)
        if value is None:
            value = action.get(field_name)
        values[field_name] = value

    for wire_name in REQUIRED_ACTION_FIELDS:
        if not values[_SNAKE_CASE_FIELDS[wire_name]]:
            raise ShieldValidationError(f"{wire_name} is required", field=wire_name)

    action_type = values["action_type"]
    action_type = getattr(action_type, "value", action_type)
    if action_type not in VALID_ACTION_TYPES:
        raise ShieldValidationError(
            f"Invalid action type. Must be one of: {', '.join(VALID_ACTION_TYPES)}",
            field="actionType",
        )
    values["action_type"] = action_type

    try:
        return ActionReport(**values)
    except ValidationError as exc:
        raise ShieldValidationError(f"Invalid action report: {exc}") from exc
