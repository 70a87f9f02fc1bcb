"""
Base class for AWS resource lifecycle handlers.

A handler owns the create/read/update/delete/import flow of one resource
type: it issues the API calls through the shared AWSClient, blocks on a
StateChangeWaiter until the remote status settles, and reports every
failure as a ResourceOperationError carrying the standard diagnostic text.
"""

import json
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError
from pydantic import BaseModel

from resource_provider.config.manager import ConfigurationManager
from resource_provider.config.schemas.app_schema import TimeoutsConfig, WaiterConfig
from resource_provider.domain.base.ports import LoggingPort
from resource_provider.domain.waiter import (
    PollResult,
    StateChangeWaiter,
    WaiterError,
    WaitResult,
    WaitSpecification,
)
from resource_provider.providers.aws.exceptions.aws_exceptions import (
    AWSEntityNotFoundError,
    AWSValidationError,
    InfrastructureError,
    NetworkError,
    ResourceOperationError,
    convert_client_error,
)
from resource_provider.providers.aws.infrastructure.aws_client import AWSClient

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

ACTION_CREATING = "creating"
ACTION_READING = "reading"
ACTION_UPDATING = "updating"
ACTION_DELETING = "deleting"
ACTION_IMPORTING = "importing"
ACTION_TAGGING = "tagging"
ACTION_WAITING_FOR_CREATION = "waiting for creation of"
ACTION_WAITING_FOR_UPDATE = "waiting for update of"
ACTION_WAITING_FOR_DELETION = "waiting for deletion of"

# Raised by API calls and waits inside a lifecycle operation.
OPERATION_ERRORS = (InfrastructureError, WaiterError)


class AWSResourceHandler(ABC, Generic[M]):
    """
    Lifecycle handler for one AWS resource type.

    Subclasses set ``service_name``, ``resource_type`` and ``client_name`` and
    implement the lifecycle operations on top of ``_call``, ``_wait`` and
    ``_fail``.
    """

    service_name: str = ""
    resource_type: str = ""
    client_name: str = ""

    def __init__(
        self,
        aws_client: AWSClient,
        logger: LoggingPort,
        config: Optional[ConfigurationManager] = None,
        waiter: Optional[StateChangeWaiter] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Initialize the handler.

        Args:
            aws_client: AWS client wrapper used for API calls
            logger: Logging port for operation logging
            config: Configuration supplying waiter defaults and timeouts
            waiter: Waiter to use; a waiter logging through ``logger`` by default
            cancel_event: Event that aborts in-progress waits when set
        """
        self.aws_client = aws_client
        self._logger = logger.bind(resource_type=f"{self.service_name} {self.resource_type}")
        self._config = config if config is not None else ConfigurationManager()
        self._waiter_config: WaiterConfig = self._config.get_typed(WaiterConfig)
        self._default_timeouts: TimeoutsConfig = self._config.get_typed(TimeoutsConfig)
        self._waiter = waiter or StateChangeWaiter(logger=self._logger)
        self._cancel_event = cancel_event

    @property
    def client(self) -> Any:
        """The boto3 client for this handler's service."""
        return self.aws_client.get_client(self.client_name)

    @abstractmethod
    def create(self, plan: M) -> M:
        """
        Create the resource and wait until it is usable.

        Returns:
            The resource as read back after creation

        Raises:
            ResourceOperationError: If creating or waiting fails
        """

    @abstractmethod
    def read(self, state: M) -> Optional[M]:
        """
        Refresh the resource.

        Returns:
            The current resource, or None if it no longer exists
        """

    @abstractmethod
    def update(self, plan: M, state: M) -> M:
        """Apply in-place changes from ``plan`` to the resource described by ``state``."""

    @abstractmethod
    def delete(self, state: M) -> None:
        """Delete the resource and wait until it is gone; a missing resource is not an error."""

    @abstractmethod
    def import_state(self, identifier: str) -> M:
        """Build the state of an existing resource from its identifier."""

    def _call(self, func: Callable[..., T], **kwargs: Any) -> T:
        """
        Invoke an API operation, converting botocore errors to provider exceptions.

        Throttling and transient network errors are retried by botocore before
        they get here; what is left of them is raised as NetworkError.
        """
        operation_name = getattr(func, "__name__", repr(func))

        def _format_debug_data(data: Any) -> str:
            return json.dumps(data, default=str, indent=2, sort_keys=True)

        self._logger.debug(
            "Calling AWS operation %s with payload:\n%s",
            operation_name,
            _format_debug_data(kwargs),
        )
        try:
            result = func(**kwargs)
        except ClientError as e:
            raise convert_client_error(e, operation_name) from e
        except ParamValidationError as e:
            raise AWSValidationError(f"Invalid request for {operation_name}: {e}") from e
        except BotoCoreError as e:
            raise NetworkError(f"AWS Error in {operation_name}: {e}") from e
        self._logger.debug(
            "AWS operation %s response:\n%s", operation_name, _format_debug_data(result)
        )
        return result

    def _status_function(
        self, find: Callable[[], Any], status_of: Callable[[Any], Optional[str]]
    ) -> Callable[[], PollResult]:
        """
        Build a poll closure around a single describe call.

        ``find`` raising AWSEntityNotFoundError is reported as not found; any
        other exception propagates to the waiter's caller.
        """

        def poll() -> PollResult:
            try:
                found = find()
            except AWSEntityNotFoundError:
                return None, ""
            return found, status_of(found) or ""

        return poll

    def _wait(
        self,
        poll: Callable[[], PollResult],
        pending: Iterable[str],
        target: Iterable[str],
        timeout: float,
        resource_id: str,
        min_consecutive_target_hits: Optional[int] = None,
        max_not_found_retries: Optional[int] = None,
        status_message: Optional[Callable[[Any], Optional[str]]] = None,
    ) -> WaitResult:
        """Wait for a status transition using the configured poll cadence."""
        spec = WaitSpecification(
            pending=pending,
            target=target,
            timeout=timeout,
            delay=self._waiter_config.delay,
            poll_interval=self._waiter_config.poll_interval,
            min_interval=self._waiter_config.min_interval,
            max_interval=self._waiter_config.max_interval,
            min_consecutive_target_hits=(
                min_consecutive_target_hits
                if min_consecutive_target_hits is not None
                else self._waiter_config.continuous_target_occurrence
            ),
            max_not_found_retries=(
                max_not_found_retries
                if max_not_found_retries is not None
                else self._waiter_config.not_found_checks
            ),
        )
        return self._waiter.wait(
            poll,
            spec,
            resource_id=resource_id,
            cancel_event=self._cancel_event,
            status_message=status_message,
        )

    def _timeout(self, model: Any, operation: str) -> float:
        """Timeout for ``operation``, preferring the resource's own ``timeouts``."""
        timeouts = getattr(model, "timeouts", None) or self._default_timeouts
        return float(getattr(timeouts, operation))

    def _fail(
        self,
        action: str,
        identifier: Optional[str],
        cause: Optional[BaseException] = None,
        last_status: Optional[str] = None,
    ) -> ResourceOperationError:
        """Log and build the error reported for a failed lifecycle step."""
        if last_status is None and cause is not None:
            last_status = getattr(cause, "last_status", None)
        error = ResourceOperationError(
            action,
            self.service_name,
            self.resource_type,
            identifier,
            cause=cause,
            last_status=last_status,
        )
        self._logger.error("%s", error)
        return error

    @staticmethod
    def _tag_changes(
        old: dict[str, str], new: dict[str, str]
    ) -> tuple[dict[str, str], list[str]]:
        """
        Compute the tags to set and the tag keys to remove.

        Returns:
            Tuple of (tags to add or change, keys to remove)
        """
        to_set = {k: v for k, v in new.items() if old.get(k) != v}
        to_remove = sorted(k for k in old if k not in new)
        return to_set, to_remove
