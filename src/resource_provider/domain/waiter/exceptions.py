"""Waiter outcome exceptions."""

from typing import Any, Iterable, Optional


def _format_states(states: Iterable[str]) -> str:
    return ", ".join(sorted(states)) or "<absent>"


class WaiterError(Exception):
    """Base class for every terminal failure of a state-transition wait."""

    def __init__(
        self,
        message: str,
        last_status: Optional[str] = None,
        last_state: Any = None,
        polls: int = 0,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.last_status = last_status
        self.last_state = last_state
        self.polls = polls


class NotFoundExhaustedError(WaiterError):
    """The resource stayed absent for more polls than the not-found tolerance."""

    def __init__(self, not_found_count: int, max_not_found_retries: int, polls: int = 0) -> None:
        super().__init__(
            f"couldn't find resource ({not_found_count} retries, "
            f"tolerance {max_not_found_retries})",
            polls=polls,
        )
        self.not_found_count = not_found_count
        self.max_not_found_retries = max_not_found_retries


class UnexpectedStateError(WaiterError):
    """The observed status belongs to neither the pending nor the target set."""

    def __init__(
        self,
        status: str,
        expected: Iterable[str],
        last_state: Any = None,
        status_message: Optional[str] = None,
        polls: int = 0,
    ) -> None:
        self.expected = frozenset(expected)
        self.status_message = status_message
        message = f"unexpected state '{status}', wanted target '{_format_states(self.expected)}'"
        if status_message:
            message = f"{message}. last status message: {status_message}"
        super().__init__(message, last_status=status, last_state=last_state, polls=polls)


class WaitTimeoutError(WaiterError):
    """The timeout elapsed before the status reached a terminal classification."""

    def __init__(
        self,
        timeout: float,
        expected: Iterable[str],
        last_status: Optional[str] = None,
        last_state: Any = None,
        polls: int = 0,
    ) -> None:
        self.timeout = timeout
        self.expected = frozenset(expected)
        super().__init__(
            f"timeout while waiting for state to become '{_format_states(self.expected)}' "
            f"(last state: '{last_status or ''}', timeout: {timeout:g}s)",
            last_status=last_status,
            last_state=last_state,
            polls=polls,
        )


class WaitCancelledError(WaiterError):
    """The caller cancelled the wait before it reached a terminal classification."""

    def __init__(self, last_status: Optional[str] = None, last_state: Any = None, polls: int = 0):
        super().__init__(
            f"wait cancelled (last state: '{last_status or ''}')",
            last_status=last_status,
            last_state=last_state,
            polls=polls,
        )
