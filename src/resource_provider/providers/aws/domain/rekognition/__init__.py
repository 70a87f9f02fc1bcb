"""Rekognition resource models."""

from .dataset import Dataset, DatasetSource, DatasetStatus, DatasetType, GroundTruthManifest
from .stream_processor import StreamProcessor, StreamProcessorStatus

__all__: list[str] = [
    "Dataset",
    "DatasetSource",
    "DatasetStatus",
    "DatasetType",
    "GroundTruthManifest",
    "StreamProcessor",
    "StreamProcessorStatus",
]
