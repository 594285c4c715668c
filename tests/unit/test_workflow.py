"""Unit tests for the inverse search state machine and driver.

These tests assert that illegal transitions fail loudly and that the driver
only advances on server responses.
"""

from __future__ import annotations

import threading
from typing import Any
from unittest.mock import Mock

import pytest

from globalmoo.client import Client
from globalmoo.enums import StopReason
from globalmoo.exceptions import InvalidArgumentError, InvalidStateError, OperationCancelled
from globalmoo.models import Inverse
from globalmoo.workflow import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATES,
    IllegalTransitionError,
    InverseSearch,
    SearchSnapshot,
    SearchState,
    state_for_stop_reason,
    transition,
)

STAMP = "2025-01-01T00:00:00Z"


def _inverse(inverse_id: int, iteration: int, **fields: Any) -> Inverse:
    return Inverse.model_validate(
        {"id": inverse_id, "iteration": iteration, "input": [float(iteration)], **fields}
    )


def _mock_client() -> Mock:
    return Mock(spec=Client)


def test_terminal_states_absorb() -> None:
    for state in TERMINAL_STATES:
        assert ALLOWED_TRANSITIONS[state] == set()
        snap = SearchSnapshot(state=state, objective_id=1)
        assert snap.is_terminal
        with pytest.raises(IllegalTransitionError):
            transition(current=snap, to=SearchState.RUNNING)


def test_initialized_cannot_jump_to_terminal() -> None:
    snap = SearchSnapshot(state=SearchState.INITIALIZED, objective_id=1)
    with pytest.raises(IllegalTransitionError):
        transition(current=snap, to=SearchState.SATISFIED)


def test_illegal_transition_is_an_invalid_state() -> None:
    assert issubclass(IllegalTransitionError, InvalidStateError)


def test_stop_reason_maps_to_state() -> None:
    assert state_for_stop_reason(StopReason.RUNNING) is SearchState.RUNNING
    assert state_for_stop_reason(StopReason.SATISFIED) is SearchState.SATISFIED
    assert state_for_stop_reason(StopReason.STOPPED) is SearchState.STOPPED
    assert state_for_stop_reason(StopReason.EXHAUSTED) is SearchState.EXHAUSTED


def test_snapshot_to_json() -> None:
    snap = SearchSnapshot(
        state=SearchState.RUNNING, objective_id=3, inverse_id=7, iteration=2, awaiting_output=True
    )
    assert snap.to_json() == {
        "state": "running",
        "objective_id": 3,
        "inverse_id": 7,
        "iteration": 2,
        "awaiting_output": True,
    }


def test_search_requires_positive_objective_id() -> None:
    with pytest.raises(InvalidArgumentError):
        InverseSearch(_mock_client(), 0)


def test_suggest_then_load_output() -> None:
    client = _mock_client()
    client.suggest_inverse.return_value = _inverse(10, 1)
    client.load_inverse_output.return_value = _inverse(10, 1, loadedAt=STAMP)

    search = InverseSearch(client, 5)
    assert search.state is SearchState.INITIALIZED

    search.suggest()
    assert search.state is SearchState.RUNNING
    assert search.snapshot.awaiting_output

    with pytest.raises(IllegalTransitionError):
        search.suggest()

    search.load_output([1.0])
    assert search.state is SearchState.RUNNING
    assert not search.snapshot.awaiting_output
    client.load_inverse_output.assert_called_once_with(10, [1.0], cancel_event=None)


def test_load_output_without_suggestion_is_refused() -> None:
    client = _mock_client()
    search = InverseSearch(client, 5)

    with pytest.raises(IllegalTransitionError):
        search.load_output([1.0])
    client.load_inverse_output.assert_not_called()


def test_empty_output_is_refused_before_any_call() -> None:
    client = _mock_client()
    client.suggest_inverse.return_value = _inverse(10, 1)
    search = InverseSearch(client, 5)
    search.suggest()

    with pytest.raises(InvalidArgumentError):
        search.load_output([])
    client.load_inverse_output.assert_not_called()


def test_run_until_satisfied() -> None:
    client = _mock_client()
    client.suggest_inverse.side_effect = [_inverse(10, 1), _inverse(11, 2), _inverse(12, 3)]
    client.load_inverse_output.side_effect = [
        _inverse(10, 1, loadedAt=STAMP),
        _inverse(11, 2, loadedAt=STAMP),
        _inverse(12, 3, loadedAt=STAMP, satisfiedAt=STAMP),
    ]
    evaluated: list[list[float]] = []

    def evaluate(inputs: list[float]) -> list[float]:
        evaluated.append(inputs)
        return [x * 2 for x in inputs]

    search = InverseSearch(client, 5)
    final = search.run(evaluate)

    assert final.id == 12
    assert search.state is SearchState.SATISFIED
    assert search.should_stop
    assert evaluated == [[1.0], [2.0], [3.0]]
    assert client.suggest_inverse.call_count == 3

    with pytest.raises(IllegalTransitionError):
        search.suggest()


@pytest.mark.parametrize(
    ("milestone", "state"),
    [("stoppedAt", SearchState.STOPPED), ("exhaustedAt", SearchState.EXHAUSTED)],
)
def test_run_ends_on_other_terminal_milestones(milestone: str, state: SearchState) -> None:
    client = _mock_client()
    client.suggest_inverse.return_value = _inverse(10, 1)
    client.load_inverse_output.return_value = _inverse(10, 1, loadedAt=STAMP, **{milestone: STAMP})

    search = InverseSearch(client, 5)
    search.run(lambda inputs: [1.0])

    assert search.state is state
    assert client.suggest_inverse.call_count == 1


def test_run_respects_iteration_cap() -> None:
    client = _mock_client()
    client.suggest_inverse.side_effect = lambda *_a, **_k: _inverse(10, 1)
    client.load_inverse_output.side_effect = lambda *_a, **_k: _inverse(10, 1, loadedAt=STAMP)

    search = InverseSearch(client, 5)
    search.run(lambda inputs: [1.0], max_iterations=2)

    assert search.state is SearchState.RUNNING
    assert client.load_inverse_output.call_count == 2


def test_run_rejects_non_positive_cap() -> None:
    with pytest.raises(InvalidArgumentError):
        InverseSearch(_mock_client(), 5).run(lambda inputs: [1.0], max_iterations=0)


def test_run_resumes_pending_inverse() -> None:
    client = _mock_client()
    client.suggest_inverse.return_value = _inverse(10, 1)
    client.load_inverse_output.return_value = _inverse(10, 1, loadedAt=STAMP, satisfiedAt=STAMP)

    search = InverseSearch(client, 5)
    search.suggest()
    search.run(lambda inputs: [1.0])

    assert client.suggest_inverse.call_count == 1
    assert search.state is SearchState.SATISFIED


def test_run_observes_cancellation() -> None:
    client = _mock_client()
    client.suggest_inverse.return_value = _inverse(10, 1)
    client.load_inverse_output.return_value = _inverse(10, 1, loadedAt=STAMP)
    cancel = threading.Event()

    def evaluate(inputs: list[float]) -> list[float]:
        cancel.set()
        return [1.0]

    search = InverseSearch(client, 5)
    with pytest.raises(OperationCancelled):
        search.run(evaluate, cancel_event=cancel)

    client.suggest_inverse.assert_called_once_with(5, cancel_event=cancel)
    client.load_inverse_output.assert_called_once()
