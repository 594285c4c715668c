"""Request bodies for write operations, serialized with camelCase keys."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RequestBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CreateModelRequest(RequestBody):
    name: str
    description: str | None = None


class CreateProjectRequest(RequestBody):
    name: str
    input_count: int
    minimums: list[float]
    maximums: list[float]
    input_types: list[str]
    categories: list[str] = Field(default_factory=list)


class LoadOutputCasesRequest(RequestBody):
    output_count: int
    output_cases: list[list[float]]


class LoadObjectivesRequest(RequestBody):
    desired_l1_norm: float = Field(default=0.0, alias="desiredL1Norm")
    objectives: list[float]
    objective_types: list[str]
    initial_input: list[float]
    initial_output: list[float]
    minimum_bounds: list[float] | None = None
    maximum_bounds: list[float] | None = None


class SuggestInverseRequest(RequestBody):
    pass


class LoadInverseOutputRequest(RequestBody):
    output: list[float]


class RegisterAccountRequest(RequestBody):
    company: str
    name: str
    email: str
    password: str
    time_zone: str
