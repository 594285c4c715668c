"""globalMOO SDK.

Client for the globalMOO inverse optimization API:
- configuration loaded from arguments, the environment, or `.env`
- validated, retried JSON requests
- a driver for the suggest / load-output iteration loop
"""

__version__ = "0.1.0"

from globalmoo.client import Client
from globalmoo.config import ClientSettings
from globalmoo.enums import EventName, InputType, ObjectiveType, StopReason
from globalmoo.exceptions import (
    GlobalMooError,
    InvalidArgumentError,
    InvalidStateError,
    MalformedResponseError,
    MaxRetriesExceededError,
    OperationCancelled,
    PermanentError,
    TransientError,
    TransportError,
)
from globalmoo.logging import configure_logging
from globalmoo.models import (
    Account,
    Event,
    Inverse,
    Model,
    Objective,
    Project,
    Result,
    Trial,
)
from globalmoo.transport import RetryPolicy
from globalmoo.workflow import InverseSearch, SearchState

__all__ = [
    "__version__",
    "Account",
    "Client",
    "ClientSettings",
    "Event",
    "EventName",
    "GlobalMooError",
    "InputType",
    "InvalidArgumentError",
    "InvalidStateError",
    "Inverse",
    "InverseSearch",
    "MalformedResponseError",
    "MaxRetriesExceededError",
    "Model",
    "Objective",
    "ObjectiveType",
    "OperationCancelled",
    "PermanentError",
    "Project",
    "Result",
    "RetryPolicy",
    "SearchState",
    "StopReason",
    "TransientError",
    "TransportError",
    "Trial",
    "configure_logging",
]
