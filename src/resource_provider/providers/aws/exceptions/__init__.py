"""AWS provider exceptions."""

from .aws_exceptions import (
    AuthorizationError,
    AWSConfigurationError,
    AWSEntityNotFoundError,
    AWSValidationError,
    InfrastructureError,
    NetworkError,
    QuotaExceededError,
    RateLimitError,
    ReplacementRequiredError,
    ResourceInUseError,
    ResourceOperationError,
    convert_client_error,
    problem_message,
)

__all__: list[str] = [
    "AWSConfigurationError",
    "AWSEntityNotFoundError",
    "AWSValidationError",
    "AuthorizationError",
    "InfrastructureError",
    "NetworkError",
    "QuotaExceededError",
    "RateLimitError",
    "ReplacementRequiredError",
    "ResourceInUseError",
    "ResourceOperationError",
    "convert_client_error",
    "problem_message",
]
