"""Pre-flight argument checks for write operations.

Each helper raises :class:`InvalidArgumentError` naming the offending parameter,
so a request is never built from arguments the server would reject for shape.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from urllib.parse import urlparse

from globalmoo.enums import VALID_INPUT_TYPES
from globalmoo.exceptions import InvalidArgumentError

OFFICIAL_DOMAIN = "globalmoo.com"


def require_positive_id(value: Any, parameter: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(parameter, f"must be a positive integer, got {value!r}")
    return value


def require_positive_count(value: Any, parameter: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(parameter, f"must be greater than zero, got {value!r}")
    return value


def require_text(value: Any, parameter: str, *, min_length: int = 1) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(parameter, "cannot be empty")
    if len(value.strip()) < min_length:
        raise InvalidArgumentError(parameter, f"must be at least {min_length} characters long")
    return value


def require_sequence(value: Any, parameter: str) -> list[Any]:
    if value is None:
        raise InvalidArgumentError(parameter, "is required")
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidArgumentError(parameter, f"must be a list, got {type(value).__name__}")
    return list(value)


def require_non_empty(values: Sequence[Any], parameter: str) -> None:
    if len(values) == 0:
        raise InvalidArgumentError(parameter, "cannot be empty")


def require_length(
    values: Sequence[Any], parameter: str, *, expected: int, expected_name: str
) -> None:
    if len(values) != expected:
        raise InvalidArgumentError(
            parameter,
            f"length of {parameter} ({len(values)}) does not match {expected_name} ({expected})",
        )


def require_input_types(values: Sequence[Any], parameter: str = "input_types") -> list[str]:
    """Check each entry against the closed input type set and lowercase it."""

    normalized: list[str] = []
    for value in values:
        lowered = value.lower() if isinstance(value, str) else ""
        if lowered not in VALID_INPUT_TYPES:
            raise InvalidArgumentError(
                parameter,
                f"invalid input type: {value!r}. Valid types are: "
                + ", ".join(sorted(VALID_INPUT_TYPES)),
            )
        normalized.append(lowered)
    return normalized


def require_categories(values: Sequence[Any], parameter: str = "categories") -> list[str]:
    for value in values:
        if not isinstance(value, str) or not value:
            raise InvalidArgumentError(parameter, "cannot contain null or empty strings")
    return list(values)


def require_output_cases(
    cases: Sequence[Any], output_count: int, parameter: str = "output_cases"
) -> list[list[float]]:
    rows: list[list[float]] = []
    for index, case in enumerate(cases):
        if case is None:
            raise InvalidArgumentError(parameter, f"entry {index} is null")
        if isinstance(case, (str, bytes)) or not isinstance(case, Sequence):
            raise InvalidArgumentError(
                parameter, f"entry {index} must be a list, got {type(case).__name__}"
            )
        row = list(case)
        if len(row) != output_count:
            raise InvalidArgumentError(
                parameter,
                f"all output cases must have length {output_count}; "
                f"entry {index} has length {len(row)}",
            )
        rows.append(row)
    return rows


def require_base_uri(value: Any, parameter: str = "base_uri") -> str:
    text = require_text(value, parameter)
    parsed = urlparse(text.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidArgumentError(parameter, f"must be a valid absolute URI, got {value!r}")
    return text.strip()


def is_official_host(base_uri: str) -> bool:
    # A trailing dot is the fully-qualified form of the same host.
    host = (urlparse(base_uri).hostname or "").lower().rstrip(".")
    return host == OFFICIAL_DOMAIN or host.endswith("." + OFFICIAL_DOMAIN)


def require_tls_for_official_host(base_uri: str, validate_tls: bool) -> None:
    if not validate_tls and is_official_host(base_uri):
        raise InvalidArgumentError(
            "validate_tls",
            "TLS validation must be enabled when using the official globalMOO domain",
        )
