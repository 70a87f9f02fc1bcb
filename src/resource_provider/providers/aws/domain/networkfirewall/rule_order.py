"""Stateful rule order handling."""

from enum import Enum
from typing import Optional, Union


class RuleOrder(str, Enum):
    DEFAULT_ACTION_ORDER = "DEFAULT_ACTION_ORDER"
    STRICT_ORDER = "STRICT_ORDER"


DEFAULT_ACTION_ORDER = RuleOrder.DEFAULT_ACTION_ORDER.value


def _is_default(rule_order: Optional[Union[str, RuleOrder]]) -> bool:
    if isinstance(rule_order, RuleOrder):
        rule_order = rule_order.value
    return not rule_order or rule_order == DEFAULT_ACTION_ORDER


def rule_order_requires_replacement(
    old: Optional[Union[str, RuleOrder]], new: Optional[Union[str, RuleOrder]]
) -> bool:
    """
    Whether changing the rule order from ``old`` to ``new`` forces a new resource.

    Moving into or out of the default action order cannot be done in place;
    an unset or empty order counts as the default.
    """
    return _is_default(old) != _is_default(new)
