"""Rekognition Video stream processor handler."""

from typing import Any, Optional

from resource_provider.providers.aws.domain.rekognition.stream_processor import (
    StreamProcessor,
    StreamProcessorStatus,
    expand_create_stream_processor_input,
    expand_update_stream_processor_input,
    flatten_describe_stream_processor,
)
from resource_provider.providers.aws.exceptions.aws_exceptions import (
    AWSEntityNotFoundError,
    InfrastructureError,
    ReplacementRequiredError,
)
from resource_provider.providers.aws.infrastructure.handlers.base_handler import (
    ACTION_CREATING,
    ACTION_DELETING,
    ACTION_IMPORTING,
    ACTION_READING,
    ACTION_TAGGING,
    ACTION_UPDATING,
    ACTION_WAITING_FOR_CREATION,
    ACTION_WAITING_FOR_DELETION,
    ACTION_WAITING_FOR_UPDATE,
    OPERATION_ERRORS,
    AWSResourceHandler,
)

# A processor that failed to start is reported as an unexpected state.
SETTLED_STATUSES = (
    StreamProcessorStatus.STOPPED,
    StreamProcessorStatus.STARTING,
    StreamProcessorStatus.RUNNING,
)
UPDATE_PENDING = (StreamProcessorStatus.UPDATING,)
DELETE_PENDING = tuple(StreamProcessorStatus)

# UpdateStreamProcessor only changes settings, regions of interest and data sharing.
REPLACEMENT_ATTRIBUTES = (
    "name",
    "role_arn",
    "kms_key_id",
    "input",
    "output",
    "notification_channel",
)


def _status_message(output: Any) -> Optional[str]:
    return output.get("StatusMessage") if output else None


class StreamProcessorHandler(AWSResourceHandler[StreamProcessor]):
    """Handler for Rekognition Video stream processors, addressed by name."""

    service_name = "Rekognition"
    resource_type = "Stream Processor"
    client_name = "rekognition"

    def create(self, plan: StreamProcessor) -> StreamProcessor:
        """Create the stream processor and wait until it settles."""
        try:
            output = self._call(
                self.client.create_stream_processor, **expand_create_stream_processor_input(plan)
            )
        except InfrastructureError as e:
            raise self._fail(ACTION_CREATING, plan.name, e) from e

        self._logger.info(
            "Created stream processor %s (%s)", plan.name, output.get("StreamProcessorArn")
        )

        try:
            self._wait(
                self._stream_processor_status(plan.name),
                pending=(),
                target=SETTLED_STATUSES,
                timeout=self._timeout(plan, "create"),
                resource_id=plan.name,
                status_message=_status_message,
            )
        except OPERATION_ERRORS as e:
            raise self._fail(ACTION_WAITING_FOR_CREATION, plan.name, e) from e

        return self._read_back(plan, ACTION_CREATING)

    def read(self, state: StreamProcessor) -> Optional[StreamProcessor]:
        """Describe the stream processor and its tags; returns None once it is gone."""
        try:
            output = self._describe(state.name)
            tags = self._list_tags(output["StreamProcessorArn"])
        except AWSEntityNotFoundError:
            self._logger.warning(
                "Rekognition Stream Processor (%s) not found, removing from state", state.name
            )
            return None
        except InfrastructureError as e:
            raise self._fail(ACTION_READING, state.name, e) from e
        return flatten_describe_stream_processor(output, tags, prior=state)

    def update(self, plan: StreamProcessor, state: StreamProcessor) -> StreamProcessor:
        """
        Apply settings, regions of interest, data sharing and tag changes.

        Raises:
            ReplacementRequiredError: If an attribute that cannot be updated changed
            ResourceOperationError: If updating or waiting fails
        """
        changed = [
            name for name in REPLACEMENT_ATTRIBUTES if getattr(plan, name) != getattr(state, name)
        ]
        if plan.settings.face_search != state.settings.face_search:
            changed.append("settings.face_search")
        if changed:
            raise ReplacementRequiredError(self.resource_type, changed)

        request = expand_update_stream_processor_input(plan, state)
        if request is not None:
            try:
                self._call(self.client.update_stream_processor, **request)
            except InfrastructureError as e:
                raise self._fail(ACTION_UPDATING, plan.name, e) from e

            try:
                self._wait(
                    self._stream_processor_status(plan.name),
                    pending=UPDATE_PENDING,
                    target=SETTLED_STATUSES,
                    timeout=self._timeout(plan, "update"),
                    resource_id=plan.name,
                    status_message=_status_message,
                )
            except OPERATION_ERRORS as e:
                raise self._fail(ACTION_WAITING_FOR_UPDATE, plan.name, e) from e

        if plan.tags != state.tags:
            self._update_tags(state.arn, plan.name, state.tags, plan.tags)

        return self._read_back(plan, ACTION_UPDATING)

    def delete(self, state: StreamProcessor) -> None:
        """Delete the stream processor and wait until it is gone."""
        try:
            self._call(self.client.delete_stream_processor, Name=state.name)
        except AWSEntityNotFoundError:
            self._logger.info("Rekognition Stream Processor (%s) already deleted", state.name)
            return
        except InfrastructureError as e:
            raise self._fail(ACTION_DELETING, state.name, e) from e

        try:
            self._wait(
                self._stream_processor_status(state.name),
                pending=DELETE_PENDING,
                target=(),
                timeout=self._timeout(state, "delete"),
                resource_id=state.name,
                min_consecutive_target_hits=1,
            )
        except OPERATION_ERRORS as e:
            raise self._fail(ACTION_WAITING_FOR_DELETION, state.name, e) from e
        self._logger.info("Deleted Rekognition Stream Processor (%s)", state.name)

    def import_state(self, identifier: str) -> StreamProcessor:
        """Import a stream processor by name."""
        try:
            output = self._describe(identifier)
            tags = self._list_tags(output["StreamProcessorArn"])
        except InfrastructureError as e:
            raise self._fail(ACTION_IMPORTING, identifier, e) from e
        return flatten_describe_stream_processor(output, tags)

    def _read_back(self, plan: StreamProcessor, action: str) -> StreamProcessor:
        current = self.read(plan)
        if current is None:
            raise self._fail(
                action,
                plan.name,
                AWSEntityNotFoundError(f"stream processor {plan.name} disappeared"),
            )
        return current

    def _update_tags(
        self,
        arn: Optional[str],
        name: str,
        old: dict[str, str],
        new: dict[str, str],
    ) -> None:
        to_set, to_remove = self._tag_changes(old, new)
        try:
            if arn is None:
                arn = self._describe(name)["StreamProcessorArn"]
            if to_remove:
                self._call(self.client.untag_resource, ResourceArn=arn, TagKeys=to_remove)
            if to_set:
                self._call(self.client.tag_resource, ResourceArn=arn, Tags=to_set)
        except InfrastructureError as e:
            raise self._fail(ACTION_TAGGING, name, e) from e

    def _describe(self, name: str) -> dict[str, Any]:
        output = self._call(self.client.describe_stream_processor, Name=name)
        output.pop("ResponseMetadata", None)
        return output

    def _list_tags(self, arn: str) -> dict[str, str]:
        output = self._call(self.client.list_tags_for_resource, ResourceArn=arn)
        return dict(output.get("Tags") or {})

    def _stream_processor_status(self, name: str):
        return self._status_function(
            lambda: self._describe(name), lambda output: output.get("Status")
        )
