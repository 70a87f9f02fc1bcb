"""Encryption settings for firewalls, policies and rule groups."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EncryptionType(str, Enum):
    AWS_OWNED_KMS_KEY = "AWS_OWNED_KMS_KEY"
    CUSTOMER_KMS = "CUSTOMER_KMS"


class EncryptionConfiguration(BaseModel):
    """KMS key used to encrypt Network Firewall data at rest."""

    model_config = ConfigDict(frozen=True)

    type: EncryptionType
    key_id: Optional[str] = Field(None, max_length=2048)

    @model_validator(mode="after")
    def validate_key(self) -> "EncryptionConfiguration":
        """Customer managed encryption needs a key."""
        if self.type is EncryptionType.CUSTOMER_KMS and not self.key_id:
            raise ValueError("key_id is required when type is CUSTOMER_KMS")
        return self


def expand_encryption_configuration(
    configuration: Optional[EncryptionConfiguration],
) -> dict[str, Any]:
    """Build the API structure; unset configuration means the AWS owned key."""
    result: dict[str, Any] = {"Type": EncryptionType.AWS_OWNED_KMS_KEY.value}
    if configuration is not None:
        result["Type"] = configuration.type.value
        if configuration.key_id:
            result["KeyId"] = configuration.key_id
    return result


def flatten_encryption_configuration(
    api_object: Optional[dict[str, Any]],
) -> Optional[EncryptionConfiguration]:
    """Read back an encryption configuration; the AWS owned default flattens to None."""
    if not api_object or not api_object.get("Type"):
        return None
    if api_object["Type"] == EncryptionType.AWS_OWNED_KMS_KEY.value:
        return None
    return EncryptionConfiguration(type=api_object["Type"], key_id=api_object.get("KeyId"))
