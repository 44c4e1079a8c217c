"""Elysium Shield SDK.

Cross-server moderation intelligence for Discord bots: check a user's risk
profile, report moderation actions, and read network statistics::

    from elysium_shield import ShieldClient

    async with ShieldClient(api_key) as shield:
        result = await shield.check_user("123456789")
"""

from __future__ import annotations

from elysium_shield.client.client import ShieldClient
from elysium_shield.config.constants import SDK_VERSION, VALID_ACTION_TYPES
from elysium_shield.core.exceptions import (
    ShieldAuthError,
    ShieldConfigurationError,
    ShieldError,
    ShieldOperationError,
    ShieldParseError,
    ShieldPermissionError,
    ShieldRateLimitError,
    ShieldTimeoutError,
    ShieldTransportError,
    ShieldValidationError,
)
from elysium_shield.core.schemas import (
    ActionReport,
    ActionReportResult,
    ActionType,
    NetworkStats,
    RateLimitInfo,
    RiskLevel,
    UserCheckResult,
)

__version__ = SDK_VERSION

__all__ = [
    "__version__",
    "VALID_ACTION_TYPES",
    # client
    "ShieldClient",
    # schemas
    "ActionReport",
    "ActionReportResult",
    "ActionType",
    "NetworkStats",
    "RateLimitInfo",
    "RiskLevel",
    "UserCheckResult",
    # errors
    "ShieldError",
    "ShieldConfigurationError",
    "ShieldValidationError",
    "ShieldOperationError",
    "ShieldTransportError",
    "ShieldTimeoutError",
    "ShieldParseError",
    "ShieldAuthError",
    "ShieldPermissionError",
    "ShieldRateLimitError",
]
