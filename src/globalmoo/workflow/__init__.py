"""Iteration control for inverse searches.

This package provides:
- an explicit state machine over one objective's search
- a driver that sequences suggest / evaluate / load-output round trips
"""

from globalmoo.workflow.search import Evaluator, InverseSearch
from globalmoo.workflow.state_machine import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATES,
    IllegalTransitionError,
    SearchSnapshot,
    SearchState,
    state_for_stop_reason,
    transition,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATES",
    "Evaluator",
    "IllegalTransitionError",
    "InverseSearch",
    "SearchSnapshot",
    "SearchState",
    "state_for_stop_reason",
    "transition",
]
