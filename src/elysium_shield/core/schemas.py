"""Pydantic records exchanged with the Shield API.

Request payloads are validated here before any network call is attempted;
response payloads are parsed into typed models so bot code can use
attributes instead of dictionary lookups.  The wire format is camelCase; all
models accept either the camelCase alias or the snake_case field name.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from elysium_shield.config.constants import DEFAULT_API_URL, DEFAULT_TIMEOUT_MS, SDK_VERSION


class ActionType(str, Enum):
    """Moderation actions that can be reported to Shield."""

    BAN = "ban"
    KICK = "kick"
    TIMEOUT = "timeout"
    MUTE = "mute"
    WARN = "warn"
    UNBAN = "unban"
    UNTIMEOUT = "untimeout"
    UNMUTE = "unmute"
    REMOVE_WARNING = "remove_warning"


class RiskLevel(str, Enum):
    """Risk bucket assigned to a user by the Shield backend."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class _WireModel(BaseModel):
    """Base for response models: camelCase aliases, unknown fields kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


# ---------------------------------------------------------------------------
# Client configuration
# ---------------------------------------------------------------------------


class ClientConfig(BaseModel):
    """Immutable settings owned by a single :class:`ShieldClient`.

    Attributes:
        api_key: Shield API credential.  Must be non-empty.
        api_url: Base URL the API paths are resolved against.
        timeout_ms: Per-request deadline in milliseconds.
        debug: Emit diagnostic log records for each request.
        client_version: SDK version reported in the ``User-Agent`` header.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1)
    api_url: str = DEFAULT_API_URL
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    debug: bool = False
    client_version: str = SDK_VERSION

    @property
    def timeout_seconds(self) -> float:
        """The deadline in seconds, as expected by ``httpx`` and ``asyncio``."""
        return self.timeout_ms / 1000


# ---------------------------------------------------------------------------
# Rate limits
# ---------------------------------------------------------------------------


class RateLimitInfo(BaseModel):
    """Rate-limit state reported by Shield in the headers of one response.

    Every field is optional and absent fields stay ``None``: a missing
    ``remaining`` means "not reported", which is different from ``0``.

    Attributes:
        limit: Requests allowed in the current window.
        remaining: Requests left in the current window.
        reset_at: ISO-8601 UTC time at which the window resets.
        reset_timestamp: The same instant as Unix epoch seconds.
        retry_after: Seconds to wait before retrying (sent with HTTP 429).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset_at: Optional[str] = None
    reset_timestamp: Optional[int] = None
    retry_after: Optional[int] = None

    @classmethod
    def from_reset_timestamp(cls, reset_timestamp: int, **fields: Any) -> RateLimitInfo:
        """Build an instance, deriving ``reset_at`` from an epoch timestamp."""
        return cls(
            reset_at=epoch_to_iso(reset_timestamp),
            reset_timestamp=reset_timestamp,
            **fields,
        )

    @property
    def is_empty(self) -> bool:
        """``True`` when no rate-limit header was present."""
        return not self.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire form with absent fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


def epoch_to_iso(timestamp: int) -> str:
    """Encode Unix epoch seconds as an ISO-8601 UTC string with milliseconds.

    >>> epoch_to_iso(1763566621)
    '2025-11-19T15:37:01.000Z'
    """
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class ActionReport(BaseModel):
    """A moderation action to contribute to the Shield network.

    Attributes:
        user_id: Discord ID of the user the action was taken against.
        guild_id: Discord ID of the guild where it happened.
        action_type: What was done.
        reason: Moderator-supplied reason.
        moderator_id: Discord ID of the moderator.
        account_created: Optional creation time of the target account.
            Accepts an ISO-8601 string or a datetime; sent as ISO-8601.
    """

    # Discord IDs often arrive as ints from bot frameworks.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    user_id: str = Field(..., min_length=1)
    guild_id: str = Field(..., min_length=1)
    action_type: ActionType
    reason: str = Field(..., min_length=1)
    moderator_id: str = Field(..., min_length=1)
    account_created: Optional[str] = None

    @field_validator("account_created", mode="before")
    @classmethod
    def datetime_to_iso(cls, v: Any) -> Any:
        """Serialise datetimes as ISO-8601; treat empty strings as absent."""
        if isinstance(v, datetime):
            if v.tzinfo is None:
                v = v.replace(tzinfo=timezone.utc)
            return v.isoformat()
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON request body for ``POST /shield/report-action``."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------------------------------------------------------------------------
# Response payloads
# ---------------------------------------------------------------------------


class Recommendation(_WireModel):
    """Suggested response to a flagged user."""

    action: str = "none"
    reason: Optional[str] = None
    confidence: Optional[float] = None


class UserCheckResult(_WireModel):
    """Risk profile returned by ``POST /shield/check``.

    ``flagged``, ``risk_level`` and ``action_count`` have no defaults: a
    response that omits them is rejected rather than read as a clean user.
    """

    user_id: Optional[str] = None
    flagged: bool
    trust_score: Optional[int] = None
    risk_level: RiskLevel
    action_count: int
    categories: list[str] = Field(default_factory=list)
    recommendation: Optional[Recommendation] = None


class ActionClassification(_WireModel):
    """How Shield classified a reported action."""

    category: Optional[str] = None
    confidence: Optional[float] = None
    severity: Optional[str] = None


class ActionReportDetail(_WireModel):
    """Nested ``data`` object of a report-action response."""

    success: bool = True
    user: Optional[dict[str, Any]] = None
    action: Optional[ActionClassification] = None


class ActionReportResult(_WireModel):
    """Full response of ``POST /shield/report-action``.

    The top-level ``success``/``message`` acknowledge receipt; ``data``
    holds the per-user detail.
    """

    success: bool
    message: Optional[str] = None
    data: Optional[ActionReportDetail] = None
    rate_limit: Optional[RateLimitInfo] = None


class NetworkStats(_WireModel):
    """Aggregate statistics returned by ``GET /shield/stats``."""

    participating_servers: int = 0
    total_users: int = 0
    users_checked: int = 0
    threats_detected: int = 0
    actions_contributed: int = 0
