from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from globalmoo.enums import StopReason
from globalmoo.exceptions import InvalidStateError


class SearchState(str, Enum):
    INITIALIZED = "initialized"
    RUNNING = "running"
    SATISFIED = "satisfied"
    STOPPED = "stopped"
    EXHAUSTED = "exhausted"


TERMINAL_STATES: frozenset[SearchState] = frozenset(
    {SearchState.SATISFIED, SearchState.STOPPED, SearchState.EXHAUSTED}
)

# Terminal states have no outgoing transitions.
ALLOWED_TRANSITIONS: dict[SearchState, set[SearchState]] = {
    SearchState.INITIALIZED: {SearchState.RUNNING},
    SearchState.RUNNING: {
        SearchState.RUNNING,
        SearchState.SATISFIED,
        SearchState.STOPPED,
        SearchState.EXHAUSTED,
    },
    SearchState.SATISFIED: set(),
    SearchState.STOPPED: set(),
    SearchState.EXHAUSTED: set(),
}

_STATE_BY_STOP_REASON: dict[StopReason, SearchState] = {
    StopReason.RUNNING: SearchState.RUNNING,
    StopReason.SATISFIED: SearchState.SATISFIED,
    StopReason.STOPPED: SearchState.STOPPED,
    StopReason.EXHAUSTED: SearchState.EXHAUSTED,
}


class IllegalTransitionError(InvalidStateError):
    pass


def state_for_stop_reason(reason: StopReason) -> SearchState:
    return _STATE_BY_STOP_REASON[reason]


@dataclass(frozen=True, slots=True)
class SearchSnapshot:
    """Where one objective's search stands after the last round trip."""

    state: SearchState
    objective_id: int
    inverse_id: int | None = None
    iteration: int = 0
    awaiting_output: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "state": self.state.value,
            "objective_id": self.objective_id,
            "iteration": self.iteration,
            "awaiting_output": self.awaiting_output,
        }
        if self.inverse_id is not None:
            out["inverse_id"] = self.inverse_id
        return out


def transition(
    *,
    current: SearchSnapshot,
    to: SearchState,
    inverse_id: int | None = None,
    iteration: int | None = None,
    awaiting_output: bool = False,
) -> SearchSnapshot:
    allowed = ALLOWED_TRANSITIONS.get(current.state, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.state.value} -> {to.value}")
    return SearchSnapshot(
        state=to,
        objective_id=current.objective_id,
        inverse_id=inverse_id if inverse_id is not None else current.inverse_id,
        iteration=iteration if iteration is not None else current.iteration,
        awaiting_output=awaiting_output,
    )
