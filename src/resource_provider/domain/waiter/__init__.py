"""State-transition waiter."""

from .exceptions import (
    NotFoundExhaustedError,
    UnexpectedStateError,
    WaitCancelledError,
    WaiterError,
    WaitTimeoutError,
)
from .specification import PollFunction, PollResult, WaitResult, WaitSpecification
from .state_waiter import StateChangeWaiter, wait_for_status

__all__: list[str] = [
    "NotFoundExhaustedError",
    "PollFunction",
    "PollResult",
    "StateChangeWaiter",
    "UnexpectedStateError",
    "WaitCancelledError",
    "WaitResult",
    "WaitSpecification",
    "WaitTimeoutError",
    "WaiterError",
    "wait_for_status",
]
