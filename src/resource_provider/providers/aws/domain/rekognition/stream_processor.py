"""Rekognition Video stream processor model."""

import re
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from resource_provider.config.schemas.app_schema import TimeoutsConfig

NAME_PATTERN = re.compile(r"[a-zA-Z0-9_.\-]+")
KMS_KEY_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9:_/+=,@.-]{0,2048}$")
CONNECTED_HOME_LABELS = frozenset({"PERSON", "PET", "PACKAGE", "ALL"})


class StreamProcessorStatus(str, Enum):
    """Stream processor statuses reported by DescribeStreamProcessor."""

    STOPPED = "STOPPED"
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    FAILED = "FAILED"
    STOPPING = "STOPPING"
    UPDATING = "UPDATING"


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True)


class KinesisVideoStreamInput(_Block):
    arn: str


class StreamProcessorInput(_Block):
    kinesis_video_stream: KinesisVideoStreamInput


class KinesisDataStreamOutput(_Block):
    arn: str


class S3Destination(_Block):
    bucket: Optional[str] = Field(None, max_length=255)
    key_prefix: Optional[str] = Field(None, max_length=1024)


class StreamProcessorOutput(_Block):
    kinesis_data_stream: Optional[KinesisDataStreamOutput] = None
    s3_destination: Optional[S3Destination] = None

    @model_validator(mode="after")
    def validate_destination(self) -> "StreamProcessorOutput":
        """An output needs somewhere to write."""
        if self.kinesis_data_stream is None and self.s3_destination is None:
            raise ValueError("output requires kinesis_data_stream or s3_destination")
        return self


class ConnectedHomeSettings(_Block):
    labels: list[str] = Field(default_factory=list)
    min_confidence: Optional[float] = Field(None, ge=0, le=100)

    @field_validator("labels")
    @classmethod
    def validate_labels(cls, value: list[str]) -> list[str]:
        """Only the labels supported by connected home detection."""
        unknown = set(value) - CONNECTED_HOME_LABELS
        if unknown:
            raise ValueError(f"unsupported connected home labels: {sorted(unknown)}")
        return value


class FaceSearchSettings(_Block):
    collection_id: str = Field(min_length=1, max_length=255)
    face_match_threshold: Optional[float] = Field(None, ge=0, le=100)


class StreamProcessorSettings(_Block):
    connected_home: Optional[ConnectedHomeSettings] = None
    face_search: Optional[FaceSearchSettings] = None

    @model_validator(mode="after")
    def validate_single_mode(self) -> "StreamProcessorSettings":
        """A stream processor runs exactly one analysis mode."""
        if (self.connected_home is None) == (self.face_search is None):
            raise ValueError("settings require exactly one of connected_home or face_search")
        return self


class NotificationChannel(_Block):
    sns_topic_arn: str


class BoundingBox(_Block):
    height: Optional[float] = Field(None, ge=0, le=1)
    left: Optional[float] = Field(None, ge=0, le=1)
    top: Optional[float] = Field(None, ge=0, le=1)
    width: Optional[float] = Field(None, ge=0, le=1)


class Point(_Block):
    x: Optional[float] = Field(None, ge=0, le=1)
    y: Optional[float] = Field(None, ge=0, le=1)


class RegionOfInterest(_Block):
    bounding_box: Optional[BoundingBox] = None
    polygon: Optional[list[Point]] = None


class DataSharingPreference(_Block):
    opt_in: bool = False


class StreamProcessor(BaseModel):
    """Configured and observed attributes of a stream processor."""

    name: str = Field(max_length=128, description="Identifier assigned to the stream processor")
    role_arn: str = Field(description="IAM role that grants access to the streams")
    kms_key_id: Optional[str] = Field(None, max_length=2048)
    input: StreamProcessorInput
    output: StreamProcessorOutput
    settings: StreamProcessorSettings
    notification_channel: Optional[NotificationChannel] = None
    regions_of_interest: Optional[list[RegionOfInterest]] = None
    data_sharing_preference: DataSharingPreference = Field(default_factory=DataSharingPreference)
    tags: dict[str, str] = Field(default_factory=dict)
    timeouts: Optional[TimeoutsConfig] = None

    # Computed
    arn: Optional[str] = None
    status: Optional[StreamProcessorStatus] = None
    status_message: Optional[str] = None
    creation_timestamp: Optional[datetime] = None
    last_update_timestamp: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Must conform to [a-zA-Z0-9_.\\-]+."""
        if not NAME_PATTERN.fullmatch(value):
            raise ValueError(f"name must conform to: {NAME_PATTERN.pattern}")
        return value

    @field_validator("role_arn")
    @classmethod
    def validate_role_arn(cls, value: str) -> str:
        """Role must be given as an ARN."""
        if not value.startswith("arn:"):
            raise ValueError(f"role_arn must be an ARN, got: {value}")
        return value

    @field_validator("kms_key_id")
    @classmethod
    def validate_kms_key_id(cls, value: Optional[str]) -> Optional[str]:
        """Key id, key ARN, alias or alias ARN."""
        if value is not None and not KMS_KEY_ID_PATTERN.match(value):
            raise ValueError(f"kms_key_id must conform to: {KMS_KEY_ID_PATTERN.pattern}")
        return value

    @property
    def id(self) -> Optional[str]:
        """Resource identifier; mirrors the ARN once created."""
        return self.arn


def _expand_regions_of_interest(regions: list[RegionOfInterest]) -> list[dict[str, Any]]:
    result = []
    for region in regions:
        item: dict[str, Any] = {}
        if region.bounding_box is not None:
            box = {
                "Height": region.bounding_box.height,
                "Left": region.bounding_box.left,
                "Top": region.bounding_box.top,
                "Width": region.bounding_box.width,
            }
            item["BoundingBox"] = {k: v for k, v in box.items() if v is not None}
        if region.polygon:
            item["Polygon"] = [
                {k: v for k, v in (("X", p.x), ("Y", p.y)) if v is not None}
                for p in region.polygon
            ]
        result.append(item)
    return result


def _flatten_regions_of_interest(regions: list[dict[str, Any]]) -> list[RegionOfInterest]:
    result = []
    for item in regions:
        box = item.get("BoundingBox")
        polygon = item.get("Polygon")
        result.append(
            RegionOfInterest(
                bounding_box=(
                    BoundingBox(
                        height=box.get("Height"),
                        left=box.get("Left"),
                        top=box.get("Top"),
                        width=box.get("Width"),
                    )
                    if box
                    else None
                ),
                polygon=[Point(x=p.get("X"), y=p.get("Y")) for p in polygon] if polygon else None,
            )
        )
    return result


def _expand_connected_home(settings: ConnectedHomeSettings) -> dict[str, Any]:
    connected_home: dict[str, Any] = {"Labels": list(settings.labels)}
    if settings.min_confidence is not None:
        connected_home["MinConfidence"] = settings.min_confidence
    return connected_home


def expand_create_stream_processor_input(processor: StreamProcessor) -> dict[str, Any]:
    """Build the CreateStreamProcessor request for a planned stream processor."""
    request: dict[str, Any] = {
        "Name": processor.name,
        "RoleArn": processor.role_arn,
        "Input": {"KinesisVideoStream": {"Arn": processor.input.kinesis_video_stream.arn}},
        "DataSharingPreference": {"OptIn": processor.data_sharing_preference.opt_in},
    }

    output: dict[str, Any] = {}
    if processor.output.kinesis_data_stream is not None:
        output["KinesisDataStream"] = {"Arn": processor.output.kinesis_data_stream.arn}
    if processor.output.s3_destination is not None:
        destination = processor.output.s3_destination
        output["S3Destination"] = {
            k: v
            for k, v in (("Bucket", destination.bucket), ("KeyPrefix", destination.key_prefix))
            if v is not None
        }
    request["Output"] = output

    settings: dict[str, Any] = {}
    if processor.settings.connected_home is not None:
        settings["ConnectedHome"] = _expand_connected_home(processor.settings.connected_home)
    if processor.settings.face_search is not None:
        face_search: dict[str, Any] = {"CollectionId": processor.settings.face_search.collection_id}
        if processor.settings.face_search.face_match_threshold is not None:
            face_search["FaceMatchThreshold"] = processor.settings.face_search.face_match_threshold
        settings["FaceSearch"] = face_search
    request["Settings"] = settings

    if processor.notification_channel is not None:
        request["NotificationChannel"] = {
            "SNSTopicArn": processor.notification_channel.sns_topic_arn
        }
    if processor.kms_key_id:
        request["KmsKeyId"] = processor.kms_key_id
    if processor.regions_of_interest:
        request["RegionsOfInterest"] = _expand_regions_of_interest(processor.regions_of_interest)
    if processor.tags:
        request["Tags"] = dict(processor.tags)

    return request


def expand_update_stream_processor_input(
    plan: StreamProcessor, state: StreamProcessor
) -> Optional[dict[str, Any]]:
    """
    Build the UpdateStreamProcessor request for the in-place changes between
    ``state`` and ``plan``.

    Returns:
        The request, or None when nothing updatable changed
    """
    request: dict[str, Any] = {"Name": plan.name}
    parameters_to_delete: list[str] = []

    planned_home = plan.settings.connected_home
    current_home = state.settings.connected_home
    if planned_home is not None and planned_home != current_home:
        request["SettingsForUpdate"] = {
            "ConnectedHomeForUpdate": _expand_connected_home(planned_home)
        }
        if planned_home.min_confidence is None and (
            current_home is not None and current_home.min_confidence is not None
        ):
            parameters_to_delete.append("ConnectedHomeMinConfidence")

    # An empty list and an unset value both mean no regions.
    planned_regions = plan.regions_of_interest or None
    current_regions = state.regions_of_interest or None
    if planned_regions != current_regions:
        if planned_regions:
            request["RegionsOfInterestForUpdate"] = _expand_regions_of_interest(planned_regions)
        else:
            parameters_to_delete.append("RegionsOfInterest")

    if plan.data_sharing_preference != state.data_sharing_preference:
        request["DataSharingPreferenceForUpdate"] = {
            "OptIn": plan.data_sharing_preference.opt_in
        }

    if parameters_to_delete:
        request["ParametersToDelete"] = parameters_to_delete

    if len(request) == 1:
        return None
    return request


def flatten_describe_stream_processor(
    output: dict[str, Any],
    tags: dict[str, str],
    prior: Optional[StreamProcessor] = None,
) -> StreamProcessor:
    """Build a StreamProcessor from DescribeStreamProcessor output and its tags."""
    settings = output.get("Settings") or {}
    connected_home = settings.get("ConnectedHome")
    face_search = settings.get("FaceSearch")
    raw_output = output.get("Output") or {}
    kinesis_data_stream = raw_output.get("KinesisDataStream")
    s3_destination = raw_output.get("S3Destination")
    notification_channel = output.get("NotificationChannel")
    regions = output.get("RegionsOfInterest")
    sharing = output.get("DataSharingPreference") or {}
    status = output.get("Status")

    return StreamProcessor(
        name=output["Name"],
        role_arn=output["RoleArn"],
        kms_key_id=output.get("KmsKeyId"),
        input=StreamProcessorInput(
            kinesis_video_stream=KinesisVideoStreamInput(
                arn=output["Input"]["KinesisVideoStream"]["Arn"]
            )
        ),
        output=StreamProcessorOutput(
            kinesis_data_stream=(
                KinesisDataStreamOutput(arn=kinesis_data_stream["Arn"])
                if kinesis_data_stream
                else None
            ),
            s3_destination=(
                S3Destination(
                    bucket=s3_destination.get("Bucket"),
                    key_prefix=s3_destination.get("KeyPrefix"),
                )
                if s3_destination
                else None
            ),
        ),
        settings=StreamProcessorSettings(
            connected_home=(
                ConnectedHomeSettings(
                    labels=connected_home.get("Labels", []),
                    min_confidence=connected_home.get("MinConfidence"),
                )
                if connected_home
                else None
            ),
            face_search=(
                FaceSearchSettings(
                    collection_id=face_search["CollectionId"],
                    face_match_threshold=face_search.get("FaceMatchThreshold"),
                )
                if face_search
                else None
            ),
        ),
        notification_channel=(
            NotificationChannel(sns_topic_arn=notification_channel["SNSTopicArn"])
            if notification_channel and notification_channel.get("SNSTopicArn")
            else None
        ),
        regions_of_interest=_flatten_regions_of_interest(regions) if regions else None,
        data_sharing_preference=DataSharingPreference(opt_in=sharing.get("OptIn", False)),
        tags=tags,
        timeouts=prior.timeouts if prior is not None else None,
        arn=output.get("StreamProcessorArn"),
        status=StreamProcessorStatus(status) if status else None,
        status_message=output.get("StatusMessage"),
        creation_timestamp=output.get("CreationTimestamp"),
        last_update_timestamp=output.get("LastUpdateTimestamp"),
    )
