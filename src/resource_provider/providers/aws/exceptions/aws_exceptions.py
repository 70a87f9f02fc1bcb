"""AWS provider exceptions and ClientError translation."""

from typing import Any, Optional

from botocore.exceptions import ClientError


class InfrastructureError(Exception):
    """Base class for failures talking to AWS."""

    def __init__(self, message: str, error_code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class AWSEntityNotFoundError(InfrastructureError):
    """The requested AWS resource does not exist."""


class AWSValidationError(InfrastructureError):
    """AWS rejected the request parameters, or local validation failed."""

    def __init__(
        self,
        message: str,
        errors: Optional[dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        super().__init__(message, error_code)
        self.errors = errors or {}


class QuotaExceededError(InfrastructureError):
    """An AWS service quota would be exceeded."""


class ResourceInUseError(InfrastructureError):
    """The resource is busy with another operation."""


class AuthorizationError(InfrastructureError):
    """The caller is not allowed to perform the operation."""


class RateLimitError(InfrastructureError):
    """The request was throttled after exhausting client retries."""


class NetworkError(InfrastructureError):
    """The service was unreachable or timed out."""


class AWSConfigurationError(InfrastructureError):
    """The AWS client could not be configured."""


class ReplacementRequiredError(AWSValidationError):
    """A changed attribute cannot be updated in place."""

    def __init__(self, resource_type: str, attributes: list[str]) -> None:
        super().__init__(
            f"{resource_type} must be replaced to change: {', '.join(sorted(attributes))}",
            errors={name: "requires replacement" for name in attributes},
        )
        self.resource_type = resource_type
        self.attributes = sorted(attributes)


class ResourceOperationError(Exception):
    """A lifecycle operation failed; carries everything needed to report it."""

    def __init__(
        self,
        action: str,
        service: str,
        resource_type: str,
        identifier: Optional[str],
        cause: Optional[BaseException] = None,
        last_status: Optional[str] = None,
    ) -> None:
        self.action = action
        self.service = service
        self.resource_type = resource_type
        self.identifier = identifier
        self.cause = cause
        self.last_status = last_status
        super().__init__(problem_message(service, action, resource_type, identifier, cause))


_ERROR_CODE_MAP: dict[str, type[InfrastructureError]] = {
    "ValidationError": AWSValidationError,
    "ValidationException": AWSValidationError,
    "InvalidParameterValue": AWSValidationError,
    "InvalidParameterException": AWSValidationError,
    "InvalidRequestException": AWSValidationError,
    "LimitExceeded": QuotaExceededError,
    "LimitExceededException": QuotaExceededError,
    "ServiceQuotaExceededException": QuotaExceededError,
    "ResourceInUse": ResourceInUseError,
    "ResourceInUseException": ResourceInUseError,
    "InvalidOperationException": ResourceInUseError,
    "UnauthorizedOperation": AuthorizationError,
    "AccessDenied": AuthorizationError,
    "AccessDeniedException": AuthorizationError,
    "RequestLimitExceeded": RateLimitError,
    "ThrottlingException": RateLimitError,
    "ProvisionedThroughputExceededException": RateLimitError,
    "ResourceNotFound": AWSEntityNotFoundError,
    "ResourceNotFoundException": AWSEntityNotFoundError,
    "RequestTimeout": NetworkError,
    "ServiceUnavailable": NetworkError,
    "InternalServerError": NetworkError,
}


def convert_client_error(error: ClientError, operation_name: str = "unknown") -> InfrastructureError:
    """Convert an AWS ClientError to a provider exception."""
    error_code = error.response.get("Error", {}).get("Code", "Unknown")
    error_message = error.response.get("Error", {}).get("Message", str(error))

    exception_type = _ERROR_CODE_MAP.get(error_code)
    if exception_type is None:
        return InfrastructureError(
            f"AWS Error in {operation_name}: {error_code} - {error_message}", error_code
        )
    if exception_type is AWSValidationError:
        return AWSValidationError(error_message, error_code=error_code)
    return exception_type(error_message, error_code)


def problem_message(
    service: str,
    action: str,
    resource_type: str,
    identifier: Optional[str],
    cause: Optional[BaseException] = None,
) -> str:
    """
    Standard diagnostic text, e.g. ``creating Rekognition Dataset (arn): cause``.

    Args:
        service: Service display name, e.g. "Rekognition"
        action: Action verb phrase, e.g. "creating" or "waiting for creation of"
        resource_type: Resource display name, e.g. "Dataset"
        identifier: Resource identifier, omitted when unknown
        cause: Underlying exception
    """
    message = f"{action} {service} {resource_type}"
    if identifier:
        message = f"{message} ({identifier})"
    if cause is not None:
        message = f"{message}: {cause}"
    return message
