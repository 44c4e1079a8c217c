"""Configuration package for the Shield SDK.

Re-exports the most commonly used configuration symbols so that
callers can write::

    from elysium_shield.config import get_settings, DEFAULT_API_URL
"""

from __future__ import annotations

from elysium_shield.config.constants import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT_MS,
    SDK_NAME,
    SDK_VERSION,
    VALID_ACTION_TYPES,
)
from elysium_shield.config.settings import ShieldSettings, get_settings

__all__ = [
    # settings
    "ShieldSettings",
    "get_settings",
    # constants
    "DEFAULT_API_URL",
    "DEFAULT_TIMEOUT_MS",
    "SDK_NAME",
    "SDK_VERSION",
    "VALID_ACTION_TYPES",
]
