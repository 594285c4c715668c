"""Response records returned by the globalMOO API.

JSON keys are camelCase on the wire and matched case-insensitively here, so
``inputCount``, ``InputCount`` and ``input_count`` all populate the same field.
Records are snapshots: nothing in this module talks to the network.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from globalmoo.enums import (
    VALID_INPUT_TYPES,
    EventName,
    ObjectiveType,
    StopReason,
    objective_type_from_wire,
)


class GlobalMooModel(BaseModel):
    """Base for all wire records (camelCase, case-insensitive keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        by_lower_key: dict[str, str] = {}
        for name, field in cls.model_fields.items():
            by_lower_key[name.lower()] = name
            if field.alias:
                by_lower_key[field.alias.lower()] = name

        normalized: dict[str, Any] = {}
        for key, value in data.items():
            name = by_lower_key.get(key.lower()) if isinstance(key, str) else None
            if name is None:
                continue
            # Server-sent nulls for list fields fall back to the empty default.
            if value is None and cls.model_fields[name].default_factory is not None:
                continue
            normalized[name] = value
        return normalized


class BaseEntity(GlobalMooModel):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    disabled_at: datetime | None = None


def derive_stop_reason(
    satisfied_at: datetime | None,
    stopped_at: datetime | None,
    exhausted_at: datetime | None,
) -> StopReason:
    """Map milestone timestamps to a single stop reason.

    Precedence is satisfied, then stopped, then exhausted; with none set the
    search is still running.
    """

    if satisfied_at is not None:
        return StopReason.SATISFIED
    if stopped_at is not None:
        return StopReason.STOPPED
    if exhausted_at is not None:
        return StopReason.EXHAUSTED
    return StopReason.RUNNING


class Result(BaseEntity):
    """Evaluation detail for one objective component of an inverse."""

    number: int = 0
    objective: float = 0.0
    objective_type: str | None = None
    minimum_bound: float = 0.0
    maximum_bound: float = 0.0
    output: float = 0.0
    error: float = 0.0
    detail: str | None = None
    satisfied: bool = True


class Inverse(BaseEntity):
    """One proposed input and, once loaded, its observed output."""

    loaded_at: datetime | None = None
    satisfied_at: datetime | None = None
    stopped_at: datetime | None = None
    exhausted_at: datetime | None = None

    iteration: int = 0
    l1_norm: float = Field(default=0.0, alias="l1Norm")
    # Nanoseconds.
    suggest_time: int = 0
    compute_time: int = 0

    input: list[float] | None = None
    output: list[float] | None = None
    errors: list[float] | None = None
    results: list[Result] | None = None

    @property
    def stop_reason(self) -> StopReason:
        return derive_stop_reason(self.satisfied_at, self.stopped_at, self.exhausted_at)

    @property
    def is_loaded(self) -> bool:
        return self.loaded_at is not None

    def should_stop(self) -> bool:
        """Return True when the server has marked this search as finished."""

        return self.stop_reason is not StopReason.RUNNING


class Objective(BaseEntity):
    optimal_inverse: Inverse | None = None
    attempt_count: int = 0
    stop_reason: StopReason = StopReason.RUNNING
    desired_l1_norm: float = Field(default=0.0, alias="desiredL1Norm")

    objectives: list[float] | None = None
    objective_types: list[str] | None = None
    minimum_bounds: list[float] | None = None
    maximum_bounds: list[float] | None = None

    inverses: list[Inverse] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_parallel_arrays(self) -> Objective:
        if self.objectives is not None and self.objective_types is not None:
            if len(self.objectives) != len(self.objective_types):
                raise ValueError(
                    f"objectives has {len(self.objectives)} entries but objectiveTypes "
                    f"has {len(self.objective_types)}"
                )
        return self

    @property
    def iteration_count(self) -> int:
        return len(self.inverses)

    @property
    def last_inverse(self) -> Inverse | None:
        return self.inverses[-1] if self.inverses else None

    def parsed_objective_types(self) -> list[ObjectiveType]:
        """Decode the wire tokens in ``objective_types`` into enum members."""

        return [objective_type_from_wire(token) for token in self.objective_types or []]


class Trial(BaseEntity):
    number: int = 0
    output_count: int = 0
    output_cases: list[list[float]] | None = None
    case_count: int = 0
    objectives: list[Objective] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_case_lengths(self) -> Trial:
        if self.output_cases and self.output_count > 0:
            for index, row in enumerate(self.output_cases):
                if len(row) != self.output_count:
                    raise ValueError(
                        f"outputCases[{index}] has length {len(row)}, "
                        f"expected outputCount {self.output_count}"
                    )
        return self


class Project(BaseEntity):
    developed_at: datetime | None = None
    name: str = ""
    input_count: int = 0
    minimums: list[float] | None = None
    maximums: list[float] | None = None
    input_types: list[str] | None = None
    categories: list[str] | None = None
    input_cases: list[list[float]] | None = None
    case_count: int = 0
    trials: list[Trial] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_input_space(self) -> Project:
        if self.input_count > 0:
            for label, values in (
                ("minimums", self.minimums),
                ("maximums", self.maximums),
                ("inputTypes", self.input_types),
            ):
                if values is not None and len(values) != self.input_count:
                    raise ValueError(
                        f"{label} has {len(values)} entries, expected inputCount "
                        f"{self.input_count}"
                    )
        for input_type in self.input_types or []:
            if input_type.lower() not in VALID_INPUT_TYPES:
                raise ValueError(f"Unknown input type: {input_type!r}")
        if any(not category for category in self.categories or []):
            raise ValueError("categories contains an empty entry")
        return self


class Model(BaseEntity):
    """Top-level namespace that owns projects."""

    name: str = ""
    description: str | None = None
    projects: list[Project] = Field(default_factory=list)


class Account(BaseEntity):
    company: str | None = None
    name: str | None = None
    email: str | None = None
    api_key: str | None = None
    time_zone: str | None = None
    customer_id: str | None = None


class ApiError(GlobalMooModel):
    """Error body returned by the API alongside a failing status code."""

    status: int = 0
    title: str | None = None
    message: str | None = None
    errors: list[dict[str, str]] = Field(default_factory=list)


class Event(BaseEntity):
    """A webhook notification."""

    name: str
    subject: str | None = None
    data: Any = None

    @property
    def event_name(self) -> EventName | None:
        """The known event kind, or None for names this client does not model."""

        try:
            return EventName(self.name)
        except ValueError:
            return None
