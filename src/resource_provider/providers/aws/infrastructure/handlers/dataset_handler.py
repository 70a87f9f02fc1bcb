"""Rekognition Custom Labels dataset handler."""

from typing import Any, Optional

from resource_provider.providers.aws.domain.rekognition.dataset import (
    Dataset,
    DatasetStatus,
    dataset_type_from_arn,
    expand_create_dataset_input,
    expand_dataset_changes,
    flatten_dataset_description,
    project_name_from_arn,
)
from resource_provider.providers.aws.exceptions.aws_exceptions import (
    AWSEntityNotFoundError,
    AWSValidationError,
    InfrastructureError,
    ReplacementRequiredError,
)
from resource_provider.providers.aws.infrastructure.handlers.base_handler import (
    ACTION_CREATING,
    ACTION_DELETING,
    ACTION_IMPORTING,
    ACTION_READING,
    ACTION_UPDATING,
    ACTION_WAITING_FOR_CREATION,
    ACTION_WAITING_FOR_DELETION,
    ACTION_WAITING_FOR_UPDATE,
    OPERATION_ERRORS,
    AWSResourceHandler,
)

CREATE_PENDING = (DatasetStatus.CREATE_IN_PROGRESS,)
CREATE_TARGET = (DatasetStatus.CREATE_COMPLETE,)
UPDATE_PENDING = (DatasetStatus.UPDATE_IN_PROGRESS,)
UPDATE_TARGET = (DatasetStatus.UPDATE_COMPLETE,)
DELETE_PENDING = (
    DatasetStatus.DELETE_IN_PROGRESS,
    DatasetStatus.CREATE_COMPLETE,
    DatasetStatus.UPDATE_COMPLETE,
)

# Attributes that cannot be changed once the dataset exists.
REPLACEMENT_ATTRIBUTES = ("project_arn", "dataset_type", "source")


def _status_message(description: Any) -> Optional[str]:
    return description.get("StatusMessage") if description else None


class DatasetHandler(AWSResourceHandler[Dataset]):
    """Handler for Rekognition Custom Labels datasets."""

    service_name = "Rekognition"
    resource_type = "Dataset"
    client_name = "rekognition"

    def create(self, plan: Dataset) -> Dataset:
        """Create the dataset, wait for CREATE_COMPLETE and push any entries."""
        if not plan.project_arn:
            raise self._fail(ACTION_CREATING, None, AWSValidationError("project_arn is required"))

        try:
            output = self._call(self.client.create_dataset, **expand_create_dataset_input(plan))
        except InfrastructureError as e:
            raise self._fail(ACTION_CREATING, None, e) from e

        arn = output["DatasetArn"]
        self._logger.info("Created %s dataset %s", plan.dataset_type.value, arn)

        try:
            result = self._wait(
                self._dataset_status(arn),
                pending=CREATE_PENDING,
                target=CREATE_TARGET,
                timeout=self._timeout(plan, "create"),
                resource_id=arn,
                status_message=_status_message,
            )
        except OPERATION_ERRORS as e:
            raise self._fail(ACTION_WAITING_FOR_CREATION, arn, e) from e

        created = flatten_dataset_description(result.state, plan.model_copy(update={"arn": arn}))
        if plan.entries:
            return self._push_entries(created, plan.entries, self._timeout(plan, "create"))
        return created

    def read(self, state: Dataset) -> Optional[Dataset]:
        """Describe the dataset; returns None once it is gone."""
        try:
            description = self._describe(state.arn)
        except AWSEntityNotFoundError:
            self._logger.warning("Rekognition Dataset (%s) not found, removing from state", state.arn)
            return None
        except InfrastructureError as e:
            raise self._fail(ACTION_READING, state.arn, e) from e
        return flatten_dataset_description(description, state)

    def update(self, plan: Dataset, state: Dataset) -> Dataset:
        """
        Push changed ground truth entries.

        Raises:
            ReplacementRequiredError: If project, type or source changed
            ResourceOperationError: If updating or waiting fails
        """
        changed = [
            name for name in REPLACEMENT_ATTRIBUTES if getattr(plan, name) != getattr(state, name)
        ]
        if changed:
            raise ReplacementRequiredError(self.resource_type, changed)

        current = plan.model_copy(
            update={
                "arn": state.arn,
                "status": state.status,
                "status_message": state.status_message,
                "creation_timestamp": state.creation_timestamp,
                "last_updated_timestamp": state.last_updated_timestamp,
                "dataset_stats": state.dataset_stats,
            }
        )
        if not plan.entries or plan.entries == state.entries:
            self._logger.debug("No updatable changes for Rekognition Dataset (%s)", state.arn)
            return current
        return self._push_entries(current, plan.entries, self._timeout(plan, "update"))

    def delete(self, state: Dataset) -> None:
        """Delete the dataset and wait until DescribeDataset no longer finds it."""
        try:
            self._call(self.client.delete_dataset, DatasetArn=state.arn)
        except AWSEntityNotFoundError:
            self._logger.info("Rekognition Dataset (%s) already deleted", state.arn)
            return
        except InfrastructureError as e:
            raise self._fail(ACTION_DELETING, state.arn, e) from e

        try:
            self._wait(
                self._dataset_status(state.arn),
                pending=DELETE_PENDING,
                target=(),
                timeout=self._timeout(state, "delete"),
                resource_id=state.arn or "",
                min_consecutive_target_hits=1,
            )
        except OPERATION_ERRORS as e:
            raise self._fail(ACTION_WAITING_FOR_DELETION, state.arn, e) from e
        self._logger.info("Deleted Rekognition Dataset (%s)", state.arn)

    def import_state(self, identifier: str) -> Dataset:
        """
        Import a dataset by ARN.

        The dataset type comes from the ARN; the project ARN is looked up by
        the project name embedded in it.
        """
        dataset_type = dataset_type_from_arn(identifier)
        project_name = project_name_from_arn(identifier)
        if dataset_type is None or project_name is None:
            raise self._fail(
                ACTION_IMPORTING,
                identifier,
                AWSValidationError(f"not a Rekognition dataset ARN: {identifier}"),
            )

        try:
            project_arn = self._find_project_arn(project_name)
        except InfrastructureError as e:
            raise self._fail(ACTION_IMPORTING, identifier, e) from e

        imported = self.read(
            Dataset(project_arn=project_arn, dataset_type=dataset_type, arn=identifier)
        )
        if imported is None:
            raise self._fail(
                ACTION_IMPORTING,
                identifier,
                AWSEntityNotFoundError(f"dataset {identifier} does not exist"),
            )
        return imported

    def _push_entries(self, dataset: Dataset, entries: list[str], timeout: float) -> Dataset:
        try:
            self._call(
                self.client.update_dataset_entries,
                DatasetArn=dataset.arn,
                Changes=expand_dataset_changes(entries),
            )
        except InfrastructureError as e:
            raise self._fail(ACTION_UPDATING, dataset.arn, e) from e

        try:
            result = self._wait(
                self._dataset_status(dataset.arn),
                pending=UPDATE_PENDING,
                target=UPDATE_TARGET,
                timeout=timeout,
                resource_id=dataset.arn or "",
                status_message=_status_message,
            )
        except OPERATION_ERRORS as e:
            raise self._fail(ACTION_WAITING_FOR_UPDATE, dataset.arn, e) from e
        return flatten_dataset_description(result.state, dataset)

    def _describe(self, arn: Optional[str]) -> dict[str, Any]:
        output = self._call(self.client.describe_dataset, DatasetArn=arn)
        description = output.get("DatasetDescription")
        if not description:
            raise AWSEntityNotFoundError(f"empty description for dataset {arn}")
        return description

    def _dataset_status(self, arn: Optional[str]):
        return self._status_function(
            lambda: self._describe(arn), lambda description: description.get("Status")
        )

    def _find_project_arn(self, project_name: str) -> str:
        request: dict[str, Any] = {"ProjectNames": [project_name]}
        while True:
            output = self._call(self.client.describe_projects, **request)
            for project in output.get("ProjectDescriptions", []):
                if project.get("ProjectArn"):
                    return project["ProjectArn"]
            next_token = output.get("NextToken")
            if not next_token:
                break
            request["NextToken"] = next_token
        raise AWSEntityNotFoundError(f"project {project_name} does not exist")
