"""globalMOO API client.

One method per logical operation. Each write validates its arguments before a
request is built, then hands the call to the shared :class:`Transport`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from types import TracebackType
from typing import TypeVar

import requests
from pydantic import ValidationError

from globalmoo.config import ClientSettings
from globalmoo.enums import ObjectiveType, objective_type_to_wire
from globalmoo.events import parse_webhook_event
from globalmoo.exceptions import InvalidArgumentError
from globalmoo.models import Account, Event, Inverse, Model, Objective, Project, Trial
from globalmoo.payloads import (
    CreateModelRequest,
    CreateProjectRequest,
    LoadInverseOutputRequest,
    LoadObjectivesRequest,
    LoadOutputCasesRequest,
    RegisterAccountRequest,
    RequestBody,
    SuggestInverseRequest,
)
from globalmoo.transport import RetryPolicy, Transport, WaitFunc
from globalmoo.validation import (
    require_base_uri,
    require_categories,
    require_input_types,
    require_length,
    require_non_empty,
    require_output_cases,
    require_positive_count,
    require_positive_id,
    require_sequence,
    require_text,
    require_tls_for_official_host,
)

logger = logging.getLogger(__name__)

B = TypeVar("B", bound=RequestBody)


def _build_body(body_type: type[B], **fields: object) -> B:
    try:
        return body_type(**fields)
    except ValidationError as e:
        first = e.errors()[0]
        parameter = str(first["loc"][0]) if first["loc"] else body_type.__name__
        # Errors are located by wire alias; report the Python argument name.
        for name, field in body_type.model_fields.items():
            if field.alias == parameter:
                parameter = name
                break
        raise InvalidArgumentError(parameter, first["msg"]) from e


class Client:
    """Client for the globalMOO optimization API.

    Values passed explicitly take priority over :class:`ClientSettings`, which
    reads ``GMOO_API_KEY`` / ``GMOO_API_URI`` from the environment or `.env`.

    A session passed in by the caller stays owned by the caller and is not
    closed by :meth:`close`.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_uri: str | None = None,
        *,
        session: requests.Session | None = None,
        validate_tls: bool | None = None,
        timeout: float | None = None,
        retry_policy: RetryPolicy | None = None,
        settings: ClientSettings | None = None,
        wait: WaitFunc | None = None,
    ) -> None:
        settings = settings or ClientSettings()

        final_key = api_key if api_key is not None else settings.api_key
        final_uri = base_uri if base_uri is not None else settings.base_uri
        verify = settings.validate_tls if validate_tls is None else validate_tls

        if not final_key or not final_key.strip():
            raise InvalidArgumentError(
                "api_key",
                "API key cannot be empty. Provide it as a parameter or set GMOO_API_KEY.",
            )
        if not final_uri or not final_uri.strip():
            raise InvalidArgumentError(
                "base_uri",
                "Base URI cannot be empty. Provide it as a parameter or set GMOO_API_URI.",
            )
        final_uri = require_base_uri(final_uri)
        require_tls_for_official_host(final_uri, verify)
        final_timeout = timeout if timeout is not None else settings.timeout_seconds
        if isinstance(final_timeout, bool) or not final_timeout > 0:
            raise InvalidArgumentError(
                "timeout", f"must be greater than zero, got {final_timeout!r}"
            )

        self._transport = Transport(
            base_uri=final_uri,
            api_key=final_key.strip(),
            session=session,
            verify_tls=verify,
            timeout=final_timeout,
            retry_policy=retry_policy,
            wait=wait,
        )
        logger.info("globalMOO client initialized", extra={"base_uri": final_uri})

    @property
    def transport(self) -> Transport:
        return self._transport

    # Models

    def get_models(self, *, cancel_event: threading.Event | None = None) -> list[Model]:
        """Return all models visible to the authenticated account."""

        return self._transport.request(
            "GET", "models", response_type=list[Model], cancel_event=cancel_event
        )

    def create_model(
        self,
        name: str,
        description: str | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> Model:
        require_text(name, "name")

        body = _build_body(CreateModelRequest, name=name, description=description)
        model: Model = self._transport.request(
            "POST",
            "models",
            response_type=Model,
            payload=body.to_wire(),
            cancel_event=cancel_event,
        )
        logger.info("Model created", extra={"model_id": model.id})
        return model

    # Projects

    def create_project(
        self,
        model_id: int,
        name: str,
        input_count: int,
        minimums: Sequence[float],
        maximums: Sequence[float],
        input_types: Sequence[str],
        categories: Sequence[str] | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> Project:
        """Create a project describing the input space under a model.

        Args:
            model_id: Model to create the project under.
            name: Project name (at least 4 characters).
            input_count: Number of input variables.
            minimums: Lower bound for each input.
            maximums: Upper bound for each input.
            input_types: One of boolean, category, float, integer per input.
            categories: Category labels for categorical inputs.

        Returns:
            The created project, including the server's input cases.
        """
        require_positive_id(model_id, "model_id")
        require_text(name, "name", min_length=4)
        require_positive_count(input_count, "input_count")
        minimums = require_sequence(minimums, "minimums")
        maximums = require_sequence(maximums, "maximums")
        input_types = require_sequence(input_types, "input_types")

        require_length(minimums, "minimums", expected=input_count, expected_name="input count")
        require_length(maximums, "maximums", expected=input_count, expected_name="input count")
        require_length(
            input_types, "input_types", expected=input_count, expected_name="input count"
        )
        normalized_types = require_input_types(input_types)
        categories_list = require_categories(
            require_sequence(categories, "categories") if categories is not None else []
        )

        body = _build_body(
            CreateProjectRequest,
            name=name,
            input_count=input_count,
            minimums=minimums,
            maximums=maximums,
            input_types=normalized_types,
            categories=categories_list,
        )
        project: Project = self._transport.request(
            "POST",
            f"models/{model_id}/projects",
            response_type=Project,
            payload=body.to_wire(),
            cancel_event=cancel_event,
        )
        logger.info("Project created", extra={"model_id": model_id, "project_id": project.id})
        return project

    def load_output_cases(
        self,
        project_id: int,
        output_count: int,
        output_cases: Sequence[Sequence[float]],
        *,
        cancel_event: threading.Event | None = None,
    ) -> Trial:
        """Submit the outputs observed for each of the project's input cases."""

        require_positive_id(project_id, "project_id")
        require_positive_count(output_count, "output_count")
        rows = require_output_cases(require_sequence(output_cases, "output_cases"), output_count)

        body = _build_body(LoadOutputCasesRequest, output_count=output_count, output_cases=rows)
        trial: Trial = self._transport.request(
            "POST",
            f"projects/{project_id}/output-cases",
            response_type=Trial,
            payload=body.to_wire(),
            cancel_event=cancel_event,
        )
        logger.info("Output cases loaded", extra={"project_id": project_id, "trial_id": trial.id})
        return trial

    # Trials

    def get_trial(self, trial_id: int, *, cancel_event: threading.Event | None = None) -> Trial:
        require_positive_id(trial_id, "trial_id")
        return self._transport.request(
            "GET", f"trials/{trial_id}", response_type=Trial, cancel_event=cancel_event
        )

    def load_objectives(
        self,
        trial_id: int,
        objectives: Sequence[float],
        objective_types: Sequence[ObjectiveType],
        initial_input: Sequence[float],
        initial_output: Sequence[float],
        desired_l1_norm: float | None = None,
        minimum_bounds: Sequence[float] | None = None,
        maximum_bounds: Sequence[float] | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> Objective:
        """Declare the targets for an inverse search on a trial.

        When the first objective type is EXACT, unset bounds default to zero
        vectors the length of ``objectives``.
        """
        require_positive_id(trial_id, "trial_id")
        objectives = require_sequence(objectives, "objectives")
        objective_types = require_sequence(objective_types, "objective_types")
        initial_input = require_sequence(initial_input, "initial_input")
        initial_output = require_sequence(initial_output, "initial_output")
        require_length(
            objectives,
            "objectives",
            expected=len(objective_types),
            expected_name="number of objective types",
        )

        wire_types: list[str] = []
        for objective_type in objective_types:
            if not isinstance(objective_type, ObjectiveType):
                raise InvalidArgumentError(
                    "objective_types", f"expected ObjectiveType members, got {objective_type!r}"
                )
            wire_types.append(objective_type_to_wire(objective_type))

        min_bounds = (
            require_sequence(minimum_bounds, "minimum_bounds")
            if minimum_bounds is not None
            else None
        )
        max_bounds = (
            require_sequence(maximum_bounds, "maximum_bounds")
            if maximum_bounds is not None
            else None
        )
        if objective_types and objective_types[0] is ObjectiveType.EXACT:
            if min_bounds is None:
                min_bounds = [0.0] * len(objectives)
            if max_bounds is None:
                max_bounds = [0.0] * len(objectives)

        body = _build_body(
            LoadObjectivesRequest,
            desired_l1_norm=desired_l1_norm if desired_l1_norm is not None else 0.0,
            objectives=objectives,
            objective_types=wire_types,
            initial_input=initial_input,
            initial_output=initial_output,
            minimum_bounds=min_bounds,
            maximum_bounds=max_bounds,
        )
        objective: Objective = self._transport.request(
            "POST",
            f"trials/{trial_id}/objectives",
            response_type=Objective,
            payload=body.to_wire(),
            cancel_event=cancel_event,
        )
        logger.info(
            "Objectives loaded", extra={"trial_id": trial_id, "objective_id": objective.id}
        )
        return objective

    # Inverses

    def suggest_inverse(
        self, objective_id: int, *, cancel_event: threading.Event | None = None
    ) -> Inverse:
        """Ask the service for the next candidate input."""

        require_positive_id(objective_id, "objective_id")
        inverse: Inverse = self._transport.request(
            "POST",
            f"objectives/{objective_id}/suggest-inverse",
            response_type=Inverse,
            payload=SuggestInverseRequest().to_wire(),
            cancel_event=cancel_event,
        )
        logger.debug(
            "Inverse suggested",
            extra={
                "objective_id": objective_id,
                "inverse_id": inverse.id,
                "iteration": inverse.iteration,
            },
        )
        return inverse

    def load_inverse_output(
        self,
        inverse_id: int,
        output: Sequence[float],
        *,
        cancel_event: threading.Event | None = None,
    ) -> Inverse:
        """Submit the output observed for a suggested inverse."""

        require_positive_id(inverse_id, "inverse_id")
        output = require_sequence(output, "output")
        require_non_empty(output, "output")

        body = _build_body(LoadInverseOutputRequest, output=output)
        inverse: Inverse = self._transport.request(
            "POST",
            f"inverses/{inverse_id}/load-output",
            response_type=Inverse,
            payload=body.to_wire(),
            cancel_event=cancel_event,
        )
        logger.debug(
            "Inverse output loaded",
            extra={
                "inverse_id": inverse_id,
                "l1_norm": inverse.l1_norm,
                "stop_reason": inverse.stop_reason.name,
            },
        )
        return inverse

    # Accounts

    def register_account(
        self,
        company: str,
        name: str,
        email: str,
        password: str,
        time_zone: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> Account:
        require_text(company, "company")
        require_text(name, "name")
        require_text(email, "email")
        require_text(password, "password")
        require_text(time_zone, "time_zone")

        body = _build_body(
            RegisterAccountRequest,
            company=company,
            name=name,
            email=email,
            password=password,
            time_zone=time_zone,
        )
        return self._transport.request(
            "POST",
            "accounts/register",
            response_type=Account,
            payload=body.to_wire(),
            cancel_event=cancel_event,
        )

    # Events

    def parse_webhook_event(self, payload: str | bytes) -> Event:
        return parse_webhook_event(payload)

    # Lifecycle

    def close(self) -> None:
        """Release the HTTP session if the client created it."""

        self._transport.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
