"""Network Firewall request/response mapping helpers."""

from .custom_actions import (
    ActionDefinition,
    CustomAction,
    Dimension,
    PublishMetricAction,
    expand_custom_actions,
    flatten_custom_actions,
)
from .encryption import (
    EncryptionConfiguration,
    EncryptionType,
    expand_encryption_configuration,
    flatten_encryption_configuration,
)
from .rule_order import DEFAULT_ACTION_ORDER, RuleOrder, rule_order_requires_replacement

__all__: list[str] = [
    "DEFAULT_ACTION_ORDER",
    "ActionDefinition",
    "CustomAction",
    "Dimension",
    "EncryptionConfiguration",
    "EncryptionType",
    "PublishMetricAction",
    "RuleOrder",
    "expand_custom_actions",
    "expand_encryption_configuration",
    "flatten_custom_actions",
    "flatten_encryption_configuration",
    "rule_order_requires_replacement",
]
