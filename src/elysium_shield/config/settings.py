"""SDK settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.  Every
variable carries the ``SHIELD_`` prefix, so a bot only needs::

    SHIELD_API_KEY=sk_live_...

in its environment (or ``.env`` file) to build a client with
:meth:`~elysium_shield.client.client.ShieldClient.from_settings`.

Usage::

    from elysium_shield.config.settings import get_settings

    settings = get_settings()
    timeout = settings.timeout_ms
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from elysium_shield.config.constants import DEFAULT_API_URL, DEFAULT_TIMEOUT_MS


class ShieldSettings(BaseSettings):
    """Shield SDK configuration backed by environment variables and an optional .env file.

    ``api_key`` has a default of ``""`` so that settings can always be loaded;
    the missing credential is reported by the client at construction time
    with a :class:`~elysium_shield.core.exceptions.ShieldConfigurationError`.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHIELD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str = ""
    """Shield API key issued from the Elysium dashboard.  Never commit this."""

    api_url: str = DEFAULT_API_URL
    """Base URL of the Shield API.  Override for staging or self-hosted setups."""

    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    """Per-request deadline in milliseconds."""

    debug: bool = False
    """Emit a diagnostic log record for every request, response and error."""

    log_level: str = "INFO"
    """Logging verbosity used by the CLI.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""


@lru_cache
def get_settings() -> ShieldSettings:
    """Return the cached SDK settings singleton.

    In tests, call ``get_settings.cache_clear()`` after patching environment
    variables.

    Returns:
        ShieldSettings: The validated settings object.
    """
    return ShieldSettings()
