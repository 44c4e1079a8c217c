"""SDK-wide exception hierarchy for the Shield client.

All custom exceptions subclass ``ShieldError``, enabling consistent error
handling in bot code.  Every failure that involves (or would have involved)
the network is a ``ShieldOperationError`` carrying the same payload:
``status_code``, ``message``, ``error`` and ``rate_limit``.

Hierarchy::

    ShieldError
    ├── ShieldConfigurationError
    ├── ShieldValidationError        (field: str | None)
    └── ShieldOperationError         (status_code, error, rate_limit)
        ├── ShieldTransportError
        ├── ShieldTimeoutError
        ├── ShieldParseError
        ├── ShieldAuthError          (HTTP 401)
        ├── ShieldPermissionError    (HTTP 403)
        └── ShieldRateLimitError     (HTTP 429, retry_after: int | None)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from elysium_shield.core.schemas import RateLimitInfo


class ShieldError(Exception):
    """Base class for all Shield SDK exceptions.

    Callers can catch the entire hierarchy with a single ``except`` clause
    when they only care that a Shield call did not succeed.
    """


# ---------------------------------------------------------------------------
# Local (pre-flight) exceptions
# ---------------------------------------------------------------------------


class ShieldConfigurationError(ShieldError):
    """Raised when the client cannot be constructed, e.g. no API key.

    This is fatal: fix the configuration rather than catching it.
    """


class ShieldValidationError(ShieldError):
    """Raised when a required argument is missing or invalid.

    No request is sent when this is raised.

    Args:
        message: Human-readable description of the problem.
        field: Name of the offending field, when there is one.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


# ---------------------------------------------------------------------------
# Request exceptions
# ---------------------------------------------------------------------------


class ShieldOperationError(ShieldError):
    """Raised when a Shield request does not produce a successful result.

    Raised directly for non-2xx responses without a more specific subclass
    and for 2xx responses whose body reports ``"success": false``.

    Args:
        message: Human-readable description of the failure.
        status_code: HTTP status of the response, ``None`` when no response
            was received.
        error: Short machine-oriented error detail (the backend's ``error``
            field, or the underlying exception text).
        rate_limit: Rate-limit snapshot parsed from the response headers.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error: str | None = None,
        rate_limit: RateLimitInfo | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error if error is not None else message
        self.rate_limit = rate_limit

    def with_prefix(self, prefix: str) -> ShieldOperationError:
        """Return a copy of this error whose message is prefixed with *prefix*.

        The copy keeps the concrete class, status code, error detail and rate
        limit, so callers can still branch on ``status_code`` or on the
        exception type after an operation has added its own context.
        """
        return type(self)(
            f"{prefix}: {self.message}",
            status_code=self.status_code,
            error=self.error,
            rate_limit=self.rate_limit,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the ``{statusCode?, message, error, rateLimit?}`` shape."""
        payload: dict[str, Any] = {}
        if self.status_code is not None:
            payload["statusCode"] = self.status_code
        payload["message"] = self.message
        payload["error"] = self.error
        if self.rate_limit is not None:
            payload["rateLimit"] = self.rate_limit.to_dict()
        return payload


class ShieldTransportError(ShieldOperationError):
    """Raised on DNS, connection or protocol failures.  No status code."""


class ShieldTimeoutError(ShieldOperationError):
    """Raised when a request exceeds the configured deadline.

    The in-flight request is cancelled before this is raised, so its
    connection is not left open.
    """


class ShieldParseError(ShieldOperationError):
    """Raised when the response body is not valid JSON, whatever its status."""


class ShieldAuthError(ShieldOperationError):
    """Raised on HTTP 401: the API key is missing, invalid or revoked."""


class ShieldPermissionError(ShieldOperationError):
    """Raised on HTTP 403: the API key lacks the permission for this endpoint.

    Reporting actions requires the ``shield:report_action`` permission.
    """


class ShieldRateLimitError(ShieldOperationError):
    """Raised on HTTP 429.

    Shield only reports its quota; waiting and retrying is up to the caller.
    """

    @property
    def retry_after(self) -> int | None:
        """Seconds to wait before retrying, from the ``Retry-After`` header."""
        if self.rate_limit is None:
            return None
        return self.rate_limit.retry_after


_STATUS_ERRORS: dict[int, type[ShieldOperationError]] = {
    401: ShieldAuthError,
    403: ShieldPermissionError,
    429: ShieldRateLimitError,
}


def error_for_status(status_code: int) -> type[ShieldOperationError]:
    """Return the exception class used for a non-2xx *status_code*."""
    return _STATUS_ERRORS.get(status_code, ShieldOperationError)
