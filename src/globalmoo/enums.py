"""Enumerations shared by the request builders and response models."""

from __future__ import annotations

from enum import Enum, IntEnum

from globalmoo.exceptions import InvalidArgumentError, InvalidStateError


class ObjectiveType(str, Enum):
    EXACT = "Exact"
    PERCENT = "Percent"
    VALUE = "Value"
    LESS_THAN = "LessThan"
    LESS_THAN_EQUAL = "LessThanEqual"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_EQUAL = "GreaterThanEqual"
    MINIMIZE = "Minimize"
    MAXIMIZE = "Maximize"


class InputType(str, Enum):
    BOOLEAN = "boolean"
    CATEGORY = "category"
    FLOAT = "float"
    INTEGER = "integer"


class StopReason(IntEnum):
    """Why a search stopped. Values match the server's integer encoding."""

    RUNNING = 0
    SATISFIED = 1
    STOPPED = 2
    EXHAUSTED = 3


class EventName(str, Enum):
    PROJECT_CREATED = "ProjectCreated"
    INVERSE_SUGGESTED = "InverseSuggested"


OBJECTIVE_TYPE_WIRE_TOKENS: dict[ObjectiveType, str] = {
    ObjectiveType.EXACT: "exact",
    ObjectiveType.PERCENT: "percent",
    ObjectiveType.VALUE: "value",
    ObjectiveType.LESS_THAN: "lessthan",
    ObjectiveType.LESS_THAN_EQUAL: "lessthan_equal",
    ObjectiveType.GREATER_THAN: "greaterthan",
    ObjectiveType.GREATER_THAN_EQUAL: "greaterthan_equal",
    ObjectiveType.MINIMIZE: "minimize",
    ObjectiveType.MAXIMIZE: "maximize",
}

_unmapped = set(ObjectiveType) - set(OBJECTIVE_TYPE_WIRE_TOKENS)
if _unmapped:
    raise InvalidStateError(
        f"Objective types without a wire token: {sorted(t.name for t in _unmapped)}"
    )

_OBJECTIVE_TYPES_BY_TOKEN: dict[str, ObjectiveType] = {
    token: objective_type for objective_type, token in OBJECTIVE_TYPE_WIRE_TOKENS.items()
}

VALID_INPUT_TYPES: frozenset[str] = frozenset(t.value for t in InputType)


def objective_type_to_wire(objective_type: ObjectiveType) -> str:
    """Return the lowercase token the API expects for ``objective_type``.

    Raises:
        InvalidStateError: If the enum member has no entry in the mapping table.
    """

    try:
        return OBJECTIVE_TYPE_WIRE_TOKENS[objective_type]
    except KeyError:
        raise InvalidStateError(f"Unknown objective type: {objective_type!r}") from None


def objective_type_from_wire(token: str) -> ObjectiveType:
    normalized = token.strip().lower() if isinstance(token, str) else ""
    objective_type = _OBJECTIVE_TYPES_BY_TOKEN.get(normalized)
    if objective_type is None:
        raise InvalidArgumentError("objective_type", f"Unknown objective type token: {token!r}")
    return objective_type
