"""Authenticated, retried JSON exchange with the globalMOO API.

Every logical operation goes through :meth:`Transport.request`, which:

1. builds the request (bearer token, ``Accept: application/json``, camelCase body)
2. classifies the outcome as success, transient (network, 429, 5xx) or permanent
3. retries transient failures with bounded exponential backoff
4. decodes a successful body against the expected type

Cancellation is cooperative: a ``threading.Event`` is checked before each
attempt, after each response, and interrupts the backoff wait.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import requests
from pydantic import TypeAdapter, ValidationError

from globalmoo.exceptions import (
    MalformedResponseError,
    MaxRetriesExceededError,
    OperationCancelled,
    PermanentError,
    TransientError,
)
from globalmoo.models import ApiError

logger = logging.getLogger(__name__)

# Returns True if the wait was interrupted by cancellation.
WaitFunc = Callable[[float, "threading.Event | None"], bool]

_BODY_SNIPPET_LENGTH = 500


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded exponential backoff.

    The wait before retry ``n`` (counted from 1) is
    ``min(initial_delay * multiplier ** (n - 1), max_delay)``.
    """

    max_attempts: int = 3
    initial_delay: float = 4.0
    multiplier: float = 2.0
    max_delay: float = 10.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, retry_number: int) -> float:
        return min(self.initial_delay * self.multiplier ** (retry_number - 1), self.max_delay)


def is_transient_status(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code <= 599


def wait_for_retry(seconds: float, cancel_event: threading.Event | None) -> bool:
    """Sleep for ``seconds`` unless ``cancel_event`` is set first."""

    return (cancel_event or threading.Event()).wait(seconds)


class Transport:
    """Executes logical operations against one base URI with one credential.

    The session is shared across calls and threads. It is closed by
    :meth:`close` only when this transport created it.
    """

    def __init__(
        self,
        *,
        base_uri: str,
        api_key: str,
        session: requests.Session | None = None,
        verify_tls: bool = True,
        timeout: float = 30.0,
        retry_policy: RetryPolicy | None = None,
        wait: WaitFunc | None = None,
    ) -> None:
        self._base_uri = base_uri.rstrip("/") + "/"
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        self._verify_tls = verify_tls
        self._timeout = timeout
        self._retry_policy = retry_policy or RetryPolicy()
        self._wait = wait or wait_for_retry

        if session is None:
            self._session = requests.Session()
            self._session.verify = verify_tls
            self._owns_session = True
        else:
            self._session = session
            self._owns_session = False
        self._closed = False

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def owns_session(self) -> bool:
        return self._owns_session

    def url_for(self, path: str) -> str:
        return self._base_uri + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str,
        *,
        response_type: Any,
        payload: dict[str, Any] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Any:
        """Run one logical operation and return the decoded body.

        Raises:
            PermanentError: On a non-retryable error status.
            MaxRetriesExceededError: When every attempt failed transiently.
            MalformedResponseError: When a successful body does not decode.
            OperationCancelled: When ``cancel_event`` is set.
        """

        policy = self._retry_policy
        last_error: TransientError | None = None

        for attempt in range(1, policy.max_attempts + 1):
            self._raise_if_cancelled(cancel_event, method=method, path=path)
            try:
                return self._execute(
                    method,
                    path,
                    response_type=response_type,
                    payload=payload,
                    cancel_event=cancel_event,
                )
            except TransientError as e:
                last_error = e

            if attempt >= policy.max_attempts:
                break

            delay = policy.delay_for(attempt)
            logger.warning(
                "Transient API failure, retrying",
                extra={
                    "method": method,
                    "path": path,
                    "attempt": attempt,
                    "delay_seconds": delay,
                    "status_code": last_error.status_code,
                    "error": str(last_error),
                },
            )
            if self._wait(delay, cancel_event):
                raise OperationCancelled(f"{method} {path} cancelled during retry backoff")

        assert last_error is not None
        logger.error(
            "API call failed after retries",
            extra={"method": method, "path": path, "attempts": policy.max_attempts},
        )
        raise MaxRetriesExceededError(
            attempts=policy.max_attempts, last_error=last_error
        ) from last_error

    def _execute(
        self,
        method: str,
        path: str,
        *,
        response_type: Any,
        payload: dict[str, Any] | None,
        cancel_event: threading.Event | None,
    ) -> Any:
        url = self.url_for(path)
        kwargs: dict[str, Any] = {
            "headers": self._headers,
            "timeout": self._timeout,
            "verify": self._verify_tls,
        }
        if payload is not None and method.upper() != "GET":
            kwargs["json"] = payload

        logger.debug("API request", extra={"method": method, "url": url})
        try:
            resp = self._session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise TransientError(f"{method} {path} failed: {e}") from e

        self._raise_if_cancelled(cancel_event, method=method, path=path)

        status = resp.status_code
        if is_transient_status(status):
            raise TransientError(
                f"{method} {path} returned HTTP {status}: {_snippet(resp.text)}",
                status_code=status,
            )
        if not 200 <= status < 300:
            raise PermanentError(
                f"{method} {path} returned HTTP {status}: {_snippet(resp.text)}",
                status_code=status,
                error=_decode_api_error(resp),
                body=_snippet(resp.text),
            )

        return _decode_body(resp, response_type, method=method, path=path)

    @staticmethod
    def _raise_if_cancelled(
        cancel_event: threading.Event | None, *, method: str, path: str
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise OperationCancelled(f"{method} {path} cancelled")

    def close(self) -> None:
        """Release the session if this transport created it. Safe to call twice."""

        if self._closed:
            return
        self._closed = True
        if self._owns_session:
            self._session.close()
            logger.debug("API session closed")


def _snippet(text: str) -> str:
    return text[:_BODY_SNIPPET_LENGTH]


def _decode_api_error(resp: requests.Response) -> ApiError | None:
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return ApiError.model_validate(data)
    except ValidationError:
        return None


def _decode_body(resp: requests.Response, response_type: Any, *, method: str, path: str) -> Any:
    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"{method} {path} returned a body that is not valid JSON",
            status_code=resp.status_code,
            body=_snippet(resp.text),
        ) from e

    try:
        return _type_adapter(response_type).validate_python(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"{method} {path} returned a body that does not match {response_type!r}: {e}",
            status_code=resp.status_code,
            body=_snippet(resp.text),
        ) from e


_ADAPTERS: dict[Any, TypeAdapter[Any]] = {}


def _type_adapter(response_type: Any) -> TypeAdapter[Any]:
    adapter = _ADAPTERS.get(response_type)
    if adapter is None:
        adapter = TypeAdapter(response_type)
        _ADAPTERS[response_type] = adapter
    return adapter
