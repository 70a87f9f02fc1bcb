"""Generic state-transition waiter.

Polls a remote resource until its status reaches a target set, the resource
stays absent beyond the not-found tolerance, the status leaves the
pending/target sets, the timeout elapses, or the caller cancels.
"""

import threading
import time
from typing import Any, Callable, Iterable, Optional

from resource_provider.domain.base.ports.logging_port import LoggingPort
from resource_provider.domain.waiter.exceptions import (
    NotFoundExhaustedError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitTimeoutError,
)
from resource_provider.domain.waiter.specification import (
    PollFunction,
    WaitResult,
    WaitSpecification,
)

StatusMessageFunction = Callable[[Any], Optional[str]]


class StateChangeWaiter:
    """Blocks until a polled resource settles, as described by a WaitSpecification.

    The waiter keeps no state between ``wait`` calls; all counters live in the
    call, so one instance may serve concurrent waits on independent resources.
    """

    def __init__(
        self,
        logger: Optional[LoggingPort] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], Any]] = None,
    ) -> None:
        """
        Initialize the waiter.

        Args:
            logger: Logging port for poll diagnostics (optional)
            clock: Monotonic clock in seconds
            sleep: Sleep function; defaults to waiting on the cancellation event
        """
        self._logger = logger
        self._clock = clock
        self._sleep = sleep

    def wait(
        self,
        poll: PollFunction,
        spec: WaitSpecification,
        resource_id: str = "",
        cancel_event: Optional[threading.Event] = None,
        status_message: Optional[StatusMessageFunction] = None,
    ) -> WaitResult:
        """
        Poll until the resource reaches a terminal classification.

        Args:
            poll: Zero-argument callable returning ``(state, status)``; a ``None``
                state means the resource was not found. Any exception it raises
                is propagated unchanged.
            spec: Wait specification
            resource_id: Identifier used in log records
            cancel_event: Event that aborts the wait when set
            status_message: Extracts a remote status message from a state object

        Returns:
            WaitResult with the last observed state and status

        Raises:
            NotFoundExhaustedError: Resource absent beyond the not-found tolerance
            UnexpectedStateError: Status outside both pending and target sets
            WaitTimeoutError: Timeout elapsed without terminal classification
            WaitCancelledError: ``cancel_event`` was set
        """
        cancel_event = cancel_event or threading.Event()
        started = self._clock()
        deadline = started + spec.timeout

        polls = 0
        target_hits = 0
        not_found = 0
        last_state: Any = None
        last_status: Optional[str] = None

        self._debug(
            "Waiting for %s to reach %s (pending: %s, timeout: %ss)",
            resource_id or "resource",
            sorted(spec.target) or "<absent>",
            sorted(spec.pending),
            spec.timeout,
        )

        if spec.delay:
            self._pause(spec.delay, cancel_event)

        while True:
            if cancel_event.is_set():
                raise WaitCancelledError(last_status, last_state, polls)
            if self._clock() >= deadline:
                self._warning(
                    "Timed out waiting for %s after %d polls (last status: %s)",
                    resource_id or "resource",
                    polls,
                    last_status,
                )
                raise WaitTimeoutError(spec.timeout, spec.target, last_status, last_state, polls)

            state, status = poll()
            polls += 1

            if cancel_event.is_set():
                raise WaitCancelledError(last_status, last_state, polls)

            if state is None:
                if not spec.target:
                    # Absence is the goal when no target status is given.
                    target_hits += 1
                    last_state, last_status = None, ""
                    if target_hits >= spec.min_consecutive_target_hits:
                        return self._succeed(resource_id, last_state, last_status, polls, started)
                else:
                    target_hits = 0
                    not_found += 1
                    self._debug(
                        "%s not found (%d/%d)",
                        resource_id or "resource",
                        not_found,
                        spec.max_not_found_retries,
                    )
                    if not_found > spec.max_not_found_retries:
                        self._warning(
                            "Giving up on %s after %d not-found polls",
                            resource_id or "resource",
                            not_found,
                        )
                        raise NotFoundExhaustedError(not_found, spec.max_not_found_retries, polls)
            else:
                last_state, last_status = state, status
                not_found = 0

                if status in spec.target:
                    target_hits += 1
                    self._debug(
                        "%s reached %s (%d/%d)",
                        resource_id or "resource",
                        status,
                        target_hits,
                        spec.min_consecutive_target_hits,
                    )
                    if target_hits >= spec.min_consecutive_target_hits:
                        return self._succeed(resource_id, state, status, polls, started)
                elif status in spec.pending:
                    target_hits = 0
                    self._debug("%s is %s", resource_id or "resource", status)
                else:
                    message = status_message(state) if status_message else None
                    self._error(
                        "%s entered unexpected state %s", resource_id or "resource", status
                    )
                    raise UnexpectedStateError(status, spec.target, state, message, polls)

            remaining = deadline - self._clock()
            if remaining > 0:
                self._pause(min(spec.interval_for(polls), remaining), cancel_event)

    def _pause(self, seconds: float, cancel_event: threading.Event) -> None:
        if self._sleep is not None:
            self._sleep(seconds)
        else:
            cancel_event.wait(seconds)

    def _succeed(
        self, resource_id: str, state: Any, status: str, polls: int, started: float
    ) -> WaitResult:
        elapsed = self._clock() - started
        if self._logger:
            self._logger.info(
                "%s settled in state '%s' after %d polls (%.1fs)",
                resource_id or "resource",
                status,
                polls,
                elapsed,
            )
        return WaitResult(state=state, status=status, polls=polls, elapsed=elapsed)

    def _debug(self, message: str, *args: Any) -> None:
        if self._logger:
            self._logger.debug(message, *args)

    def _warning(self, message: str, *args: Any) -> None:
        if self._logger:
            self._logger.warning(message, *args)

    def _error(self, message: str, *args: Any) -> None:
        if self._logger:
            self._logger.error(message, *args)


def wait_for_status(
    poll: PollFunction,
    pending: Iterable[str],
    target: Iterable[str],
    timeout: float,
    min_consecutive_target_hits: int = 1,
    max_not_found_retries: int = 20,
    poll_interval: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    logger: Optional[LoggingPort] = None,
    **kwargs: Any,
) -> WaitResult:
    """Build a WaitSpecification and run a one-off StateChangeWaiter over it.

    Extra keyword arguments (``delay``, ``min_interval``, ``max_interval``)
    are passed to the specification.
    """
    spec = WaitSpecification(
        pending=pending,
        target=target,
        timeout=timeout,
        poll_interval=poll_interval,
        min_consecutive_target_hits=min_consecutive_target_hits,
        max_not_found_retries=max_not_found_retries,
        **kwargs,
    )
    return StateChangeWaiter(logger=logger).wait(poll, spec, cancel_event=cancel_event)
