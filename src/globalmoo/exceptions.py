"""Typed failures raised by the client.

Callers branch on the class; every failure carries the context needed to act on
it (parameter name, HTTP status, or the last underlying cause).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from globalmoo.models import ApiError


class GlobalMooError(Exception):
    """Base class for all client errors."""


class InvalidArgumentError(GlobalMooError, ValueError):
    """Caller-supplied data failed a local check before any I/O."""

    def __init__(self, parameter: str, reason: str) -> None:
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"{parameter}: {reason}")


class InvalidStateError(GlobalMooError, RuntimeError):
    """The client reached a state it should never be in."""


class OperationCancelled(GlobalMooError):
    """The caller aborted the operation via its cancel event."""


class TransportError(GlobalMooError):
    """Base for failures of an HTTP exchange."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class TransientError(TransportError):
    """A network failure, 429 or 5xx response. Retried automatically."""


class PermanentError(TransportError):
    """A non-retryable error response (4xx other than 429)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        error: ApiError | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.error = error
        self.body = body


class MaxRetriesExceededError(TransportError):
    """All attempts failed with transient errors."""

    def __init__(self, *, attempts: int, last_error: TransientError) -> None:
        super().__init__(
            f"Maximum number of retries reached after {attempts} attempts: {last_error}",
            status_code=last_error.status_code,
        )
        self.attempts = attempts
        self.last_error = last_error


class MalformedResponseError(TransportError):
    """A successful response whose body could not be decoded."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message, status_code=status_code)
        self.body = body
