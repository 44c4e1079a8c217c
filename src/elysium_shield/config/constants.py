"""Constants for the Shield REST API.

Endpoint paths, header names and SDK identity used by
:mod:`elysium_shield.client._http` and
:class:`~elysium_shield.client.client.ShieldClient`.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# SDK identity
# ---------------------------------------------------------------------------

SDK_NAME: str = "Elysium-Shield-SDK"
"""Product token sent in the ``User-Agent`` header."""

SDK_VERSION: str = "1.0.0"
"""SDK version reported to the Shield backend."""

# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

DEFAULT_API_URL: str = "https://elysium-online.xyz/api"
"""Default Shield base URL.

API paths are absolute (``/api/v1/...``), so the path component of this base
is replaced rather than extended when a request URL is resolved.
"""

DEFAULT_TIMEOUT_MS: int = 10_000
"""Per-request deadline applied when no timeout is configured."""

CHECK_USER_PATH: str = "/api/v1/shield/check"
REPORT_ACTION_PATH: str = "/api/v1/shield/report-action"
NETWORK_STATS_PATH: str = "/api/v1/shield/stats"

# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------

API_KEY_HEADER: str = "x-api-key"

RATELIMIT_LIMIT_HEADER: str = "x-ratelimit-limit"
RATELIMIT_REMAINING_HEADER: str = "x-ratelimit-remaining"
RATELIMIT_RESET_HEADER: str = "x-ratelimit-reset"
RETRY_AFTER_HEADER: str = "retry-after"

# ---------------------------------------------------------------------------
# Moderation actions
# ---------------------------------------------------------------------------

VALID_ACTION_TYPES: tuple[str, ...] = (
    "ban",
    "kick",
    "timeout",
    "mute",
    "warn",
    "unban",
    "untimeout",
    "unmute",
    "remove_warning",
)
"""Action types accepted by ``POST /api/v1/shield/report-action``.

Order matters: it is the order listed in validation error messages.
"""

REQUIRED_ACTION_FIELDS: tuple[str, ...] = (
    "userId",
    "guildId",
    "actionType",
    "reason",
    "moderatorId",
)
"""Wire names of the report fields that must be non-empty, in check order."""
