"""Structured logging configuration using structlog.

The SDK itself never configures logging: its modules obtain loggers with
``structlog.get_logger(__name__)`` and emit diagnostic records only when a
client is constructed with ``debug=True``.  Bots that do not already have a
logging setup can call ``configure_logging()`` once at startup::

    from elysium_shield.core.logging_config import configure_logging

    configure_logging("DEBUG")

Records emitted through either the stdlib ``logging`` API or structlog end
up in the same handler, rendered as JSON (or coloured console output at
``DEBUG``).  Values of credential-bearing keys are always redacted.
"""

from __future__ import annotations

import logging
import logging.config
import sys

import structlog
from structlog.types import EventDict, WrappedLogger

# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------


_SECRET_SUBSTRINGS: frozenset[str] = frozenset({
    "api_key",
    "apikey",
    "x-api-key",
    "password",
    "secret",
    "token",
    "credential",
    "bearer",
    "authorization",
})
"""Lower-cased substrings that identify log event-dict keys whose values
must be redacted before the record reaches any renderer."""

_REDACTED = "[REDACTED]"


def _redact_secrets(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace values of secret-bearing keys with a redaction marker.

    Scans both top-level keys and any nested ``dict`` values one level deep
    (e.g. ``headers={...}``).  Keys are matched case-insensitively against
    :data:`_SECRET_SUBSTRINGS`.

    Args:
        logger: The wrapped logger instance (unused).
        method_name: The log method name (unused).
        event_dict: Mutable event dictionary being assembled.

    Returns:
        The event dict with sensitive values replaced by ``"[REDACTED]"``.
    """
    for key in list(event_dict.keys()):
        if _is_secret_key(key):
            event_dict[key] = _REDACTED
            continue
        val = event_dict[key]
        if isinstance(val, dict):
            # Copy so the caller's dict (e.g. live request headers) is untouched.
            event_dict[key] = {
                k: (_REDACTED if isinstance(k, str) and _is_secret_key(k) else v)
                for k, v in val.items()
            }
    return event_dict


def _is_secret_key(key: str) -> bool:
    key_lower = key.lower()
    return any(secret in key_lower for secret in _SECRET_SUBSTRINGS)


# ---------------------------------------------------------------------------
# Public configuration entry-point
# ---------------------------------------------------------------------------


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog with JSON output.

    At any level other than ``"DEBUG"`` output is newline-delimited JSON.
    At ``"DEBUG"`` structlog's ``ConsoleRenderer`` is used for readable
    coloured output, and ``httpx``/``httpcore`` are not silenced.

    Standard fields added to every log record:

    - ``timestamp``: ISO 8601 string.
    - ``level``: Log level name (``"info"``, ``"warning"``, etc.).
    - ``logger``: Module name that emitted the record.
    - ``event``: The log message string.

    Calling this more than once is safe: handlers are replaced, not stacked.

    Args:
        log_level: Logging verbosity string.  One of ``"DEBUG"``, ``"INFO"``,
            ``"WARNING"``, ``"ERROR"``, ``"CRITICAL"``.  Case-insensitive.
    """
    level_upper = log_level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)
    is_development = level_upper == "DEBUG"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _redact_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if is_development:
        final_renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(
            colors=True,
        )
    else:
        final_renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        # Processors run only on records that enter via stdlib logging.
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    if not is_development:
        for noisy_logger in ("httpx", "httpcore"):
            logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure between cases; cached loggers would keep stale processors.
        cache_logger_on_first_use=False,
    )
