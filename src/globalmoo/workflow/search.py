"""Client-side driver for one objective's inverse search.

The remote service decides when a search ends. This driver only sequences the
calls (suggest, caller evaluates, load output), refuses malformed steps, and
reads the terminal milestone timestamps on each returned inverse.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from globalmoo.exceptions import InvalidArgumentError, OperationCancelled
from globalmoo.models import Inverse
from globalmoo.validation import require_non_empty, require_positive_id, require_sequence

from .state_machine import (
    IllegalTransitionError,
    SearchSnapshot,
    SearchState,
    state_for_stop_reason,
    transition,
)

if TYPE_CHECKING:
    from globalmoo.client import Client

logger = logging.getLogger(__name__)

Evaluator = Callable[[list[float]], Sequence[float]]


class InverseSearch:
    """Drive suggest / load-output round trips for one objective.

    State only advances from server responses; nothing is cached or predicted
    between calls.
    """

    def __init__(self, client: Client, objective_id: int) -> None:
        require_positive_id(objective_id, "objective_id")
        self._client = client
        self._snapshot = SearchSnapshot(state=SearchState.INITIALIZED, objective_id=objective_id)
        self._last_inverse: Inverse | None = None

    @property
    def snapshot(self) -> SearchSnapshot:
        return self._snapshot

    @property
    def state(self) -> SearchState:
        return self._snapshot.state

    @property
    def last_inverse(self) -> Inverse | None:
        return self._last_inverse

    @property
    def should_stop(self) -> bool:
        return self._snapshot.is_terminal

    def suggest(self, *, cancel_event: threading.Event | None = None) -> Inverse:
        """Request the next candidate input.

        Raises:
            IllegalTransitionError: If the search has finished or the previous
                candidate has not had its output loaded yet.
        """
        if self._snapshot.is_terminal:
            raise IllegalTransitionError(
                f"Search for objective {self._snapshot.objective_id} already finished "
                f"({self._snapshot.state.value})"
            )
        if self._snapshot.awaiting_output:
            raise IllegalTransitionError(
                f"Inverse {self._snapshot.inverse_id} is still awaiting output"
            )

        inverse = self._client.suggest_inverse(
            self._snapshot.objective_id, cancel_event=cancel_event
        )
        self._snapshot = transition(
            current=self._snapshot,
            to=SearchState.RUNNING,
            inverse_id=inverse.id,
            iteration=inverse.iteration,
            awaiting_output=True,
        )
        self._last_inverse = inverse
        return inverse

    def load_output(
        self, output: Sequence[float], *, cancel_event: threading.Event | None = None
    ) -> Inverse:
        """Submit the output for the pending candidate and read the stop state."""

        if not self._snapshot.awaiting_output or self._snapshot.inverse_id is None:
            raise IllegalTransitionError("No suggested inverse is awaiting output")
        values = require_sequence(output, "output")
        require_non_empty(values, "output")

        inverse = self._client.load_inverse_output(
            self._snapshot.inverse_id, values, cancel_event=cancel_event
        )
        self._snapshot = transition(
            current=self._snapshot,
            to=state_for_stop_reason(inverse.stop_reason),
            inverse_id=inverse.id,
            iteration=inverse.iteration,
            awaiting_output=False,
        )
        self._last_inverse = inverse
        logger.info(
            "Search iteration completed",
            extra={
                "objective_id": self._snapshot.objective_id,
                "inverse_id": inverse.id,
                "iteration": inverse.iteration,
                "l1_norm": inverse.l1_norm,
                "state": self._snapshot.state.value,
            },
        )
        return inverse

    def run(
        self,
        evaluate: Evaluator,
        *,
        max_iterations: int | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Inverse:
        """Iterate until the service reports a terminal state.

        Args:
            evaluate: Maps a candidate input vector to the observed output vector.
            max_iterations: Optional cap on completed round trips in this call.
            cancel_event: Checked between steps and passed to every request.

        Returns:
            The last inverse returned by the service.
        """
        if max_iterations is not None and max_iterations <= 0:
            raise InvalidArgumentError("max_iterations", "must be greater than zero")

        completed = 0
        while not self.should_stop:
            if max_iterations is not None and completed >= max_iterations:
                logger.info(
                    "Iteration cap reached before the search finished",
                    extra={"objective_id": self._snapshot.objective_id, "cap": max_iterations},
                )
                break
            self._raise_if_cancelled(cancel_event)

            if self._snapshot.awaiting_output and self._last_inverse is not None:
                candidate = self._last_inverse
            else:
                candidate = self.suggest(cancel_event=cancel_event)

            self._raise_if_cancelled(cancel_event)
            output = evaluate(list(candidate.input or []))
            self.load_output(output, cancel_event=cancel_event)
            completed += 1

        if self._last_inverse is None:
            raise IllegalTransitionError("Search finished without any inverse")
        return self._last_inverse

    def _raise_if_cancelled(self, cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise OperationCancelled(
                f"Search for objective {self._snapshot.objective_id} cancelled"
            )
