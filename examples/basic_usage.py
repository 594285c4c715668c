#!/usr/bin/env python3
"""End-to-end inverse search example.

This demonstrates using the client components directly:

* load settings from `.env` (GMOO_API_KEY, GMOO_API_URI)
* create a model and a project over a small input space
* load the outputs of a linear test function for the project's input cases
* declare exact targets and iterate until the service stops the search
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from globalmoo import Client, ClientSettings, InverseSearch, ObjectiveType
from globalmoo.logging import configure_logging

logger = logging.getLogger(__name__)


def linear_function(inputs: Sequence[float]) -> list[float]:
    """Three outputs that depend linearly on three inputs."""

    x1, x2, x3 = inputs
    return [x1 + x2 + x3, x1 - x2 + 2 * x3, 2 * x1 + x2 - x3]


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a globalMOO inverse search (example).")
    parser.add_argument("--model-name", default="Linear example", help="Name of the model")
    parser.add_argument("--project-name", default="Linear project", help="Name of the project")
    parser.add_argument(
        "--targets",
        default="6,5,1",
        help='Comma-separated target outputs, e.g. "6,5,1"',
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Stop after this many round trips even if the search is still running",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    targets = [float(value) for value in args.targets.split(",") if value.strip()]

    settings = ClientSettings()
    configure_logging(settings.log_level)

    with Client(settings=settings) as client:
        model = client.create_model(args.model_name)
        project = client.create_project(
            model_id=model.id,
            name=args.project_name,
            input_count=3,
            minimums=[0.0, 0.0, 0.0],
            maximums=[10.0, 10.0, 10.0],
            input_types=["float", "float", "float"],
        )

        input_cases = project.input_cases or []
        if not input_cases:
            raise SystemExit(f"Project {project.id} has no input cases to evaluate")
        output_cases = [linear_function(case) for case in input_cases]
        trial = client.load_output_cases(
            project_id=project.id, output_count=3, output_cases=output_cases
        )

        initial_input = input_cases[0]
        objective = client.load_objectives(
            trial_id=trial.id,
            objectives=targets,
            objective_types=[ObjectiveType.EXACT] * len(targets),
            initial_input=initial_input,
            initial_output=linear_function(initial_input),
        )

        search = InverseSearch(client, objective.id)
        final = search.run(linear_function, max_iterations=args.max_iterations)

    print(f"Search finished: {search.state.value} after {final.iteration} iterations")
    print(f"Input:  {final.input}")
    print(f"Output: {final.output}")
    for result in final.results or []:
        marker = "+" if result.satisfied else "x"
        print(f"  ({marker}) objective {result.number}: {result.detail or ''}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
