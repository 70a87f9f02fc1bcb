"""Rekognition Custom Labels dataset model."""

import re
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from resource_provider.config.schemas.app_schema import TimeoutsConfig

_DATASET_ARN_TYPE = re.compile(r":project/[^/]+/dataset/(train|test)/", re.IGNORECASE)
_DATASET_ARN_PROJECT = re.compile(r":project/([^/]+)/dataset/")


class DatasetStatus(str, Enum):
    """Dataset lifecycle statuses reported by DescribeDataset."""

    CREATE_IN_PROGRESS = "CREATE_IN_PROGRESS"
    CREATE_COMPLETE = "CREATE_COMPLETE"
    CREATE_FAILED = "CREATE_FAILED"
    UPDATE_IN_PROGRESS = "UPDATE_IN_PROGRESS"
    UPDATE_COMPLETE = "UPDATE_COMPLETE"
    UPDATE_FAILED = "UPDATE_FAILED"
    DELETE_IN_PROGRESS = "DELETE_IN_PROGRESS"


class DatasetType(str, Enum):
    """Dataset role within a project."""

    TRAIN = "TRAIN"
    TEST = "TEST"


class GroundTruthManifest(BaseModel):
    """S3 object holding a SageMaker Ground Truth manifest."""

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(min_length=3, max_length=255)
    name: str = Field(min_length=1, max_length=1024)
    version: Optional[str] = Field(None, min_length=1, max_length=1024)


class DatasetSource(BaseModel):
    """Where the dataset's initial entries come from."""

    model_config = ConfigDict(frozen=True)

    ground_truth_manifest: Optional[GroundTruthManifest] = None
    dataset_arn: Optional[str] = Field(None, max_length=2048)

    @model_validator(mode="after")
    def validate_single_source(self) -> "DatasetSource":
        """A source is either a manifest or an existing dataset, never both."""
        if (self.ground_truth_manifest is None) == (self.dataset_arn is None):
            raise ValueError("source requires exactly one of ground_truth_manifest or dataset_arn")
        return self


class DatasetStats(BaseModel):
    """Entry counters reported by DescribeDataset."""

    labeled_entries: int = 0
    total_entries: int = 0
    total_labels: int = 0
    error_entries: int = 0


class Dataset(BaseModel):
    """Configured and observed attributes of a Rekognition dataset."""

    project_arn: Optional[str] = Field(
        None,
        min_length=1,
        max_length=2048,
        description="ARN of the Custom Labels project the dataset belongs to",
    )
    dataset_type: DatasetType = Field(description="TRAIN or TEST")
    source: Optional[DatasetSource] = None
    entries: Optional[list[str]] = Field(
        None, description="Ground truth JSON lines pushed with UpdateDatasetEntries"
    )
    timeouts: Optional[TimeoutsConfig] = None

    # Computed
    arn: Optional[str] = None
    status: Optional[DatasetStatus] = None
    status_message: Optional[str] = None
    creation_timestamp: Optional[datetime] = None
    last_updated_timestamp: Optional[datetime] = None
    dataset_stats: Optional[DatasetStats] = None

    @field_validator("project_arn")
    @classmethod
    def validate_project_arn(cls, value: Optional[str]) -> Optional[str]:
        """Project ARNs are Rekognition ARNs."""
        if value is not None and not value.startswith("arn:"):
            raise ValueError(f"project_arn must be an ARN, got: {value}")
        return value

    @property
    def id(self) -> Optional[str]:
        """Resource identifier; datasets are addressed by ARN."""
        return self.arn


def dataset_type_from_arn(arn: str) -> Optional[DatasetType]:
    """Derive the dataset type from ``...:project/<name>/dataset/<type>/<ts>``."""
    match = _DATASET_ARN_TYPE.search(arn)
    if not match:
        return None
    return DatasetType(match.group(1).upper())


def project_name_from_arn(arn: str) -> Optional[str]:
    """Name of the project a dataset ARN belongs to."""
    match = _DATASET_ARN_PROJECT.search(arn)
    return match.group(1) if match else None


def expand_create_dataset_input(dataset: Dataset) -> dict[str, Any]:
    """Build the CreateDataset request for a planned dataset."""
    request: dict[str, Any] = {
        "ProjectArn": dataset.project_arn,
        "DatasetType": dataset.dataset_type.value,
    }

    if dataset.source is not None:
        source: dict[str, Any] = {}
        manifest = dataset.source.ground_truth_manifest
        if manifest is not None:
            s3_object: dict[str, Any] = {"Bucket": manifest.bucket, "Name": manifest.name}
            if manifest.version:
                s3_object["Version"] = manifest.version
            source["GroundTruthManifest"] = {"S3Object": s3_object}
        if dataset.source.dataset_arn:
            source["DatasetArn"] = dataset.source.dataset_arn
        request["DatasetSource"] = source

    return request


def expand_dataset_changes(entries: list[str]) -> dict[str, Any]:
    """Build the Changes argument of UpdateDatasetEntries from JSON lines."""
    body = "\n".join(line.strip() for line in entries if line.strip())
    return {"GroundTruth": body.encode("utf-8")}


def flatten_dataset_description(description: dict[str, Any], prior: Dataset) -> Dataset:
    """
    Merge a DescribeDataset ``DatasetDescription`` into the prior model.

    Configured attributes the API does not echo back (project, source,
    entries, timeouts) are carried over from ``prior``.
    """
    stats = description.get("DatasetStats")
    status = description.get("Status")

    return prior.model_copy(
        update={
            "status": DatasetStatus(status) if status else None,
            "status_message": description.get("StatusMessage"),
            "creation_timestamp": description.get("CreationTimestamp"),
            "last_updated_timestamp": description.get("LastUpdatedTimestamp"),
            "dataset_stats": (
                DatasetStats(
                    labeled_entries=stats.get("LabeledEntries", 0),
                    total_entries=stats.get("TotalEntries", 0),
                    total_labels=stats.get("TotalLabels", 0),
                    error_entries=stats.get("ErrorEntries", 0),
                )
                if stats
                else None
            ),
        }
    )
