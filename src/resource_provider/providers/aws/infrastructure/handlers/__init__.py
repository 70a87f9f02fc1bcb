"""Lifecycle handlers for AWS resources."""

from .base_handler import AWSResourceHandler
from .dataset_handler import DatasetHandler
from .stream_processor_handler import StreamProcessorHandler

__all__: list[str] = ["AWSResourceHandler", "DatasetHandler", "StreamProcessorHandler"]
