"""Custom actions shared by firewall policies and stateless rule groups."""

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ACTION_NAME_PATTERN = re.compile(r"^[0-9A-Za-z]+$")


class Dimension(BaseModel):
    """CloudWatch dimension value published by a custom action."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(min_length=1, max_length=128)


class PublishMetricAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    dimensions: list[Dimension] = Field(default_factory=list)


class ActionDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    publish_metric_action: Optional[PublishMetricAction] = None


class CustomAction(BaseModel):
    """A named custom action; renaming it requires replacing the parent resource."""

    model_config = ConfigDict(frozen=True)

    action_name: str = Field(max_length=128)
    action_definition: ActionDefinition

    @field_validator("action_name")
    @classmethod
    def validate_action_name(cls, value: str) -> str:
        """Action names contain only alphanumeric characters."""
        if not ACTION_NAME_PATTERN.match(value):
            raise ValueError("action_name must contain only alphanumeric characters")
        return value


def expand_custom_actions(actions: Optional[list[CustomAction]]) -> Optional[list[dict[str, Any]]]:
    """
    Convert custom actions to the Network Firewall API shape.

    Returns:
        List of ``CustomAction`` request structures, or None when there are none
    """
    if not actions:
        return None

    result = []
    for action in actions:
        definition: dict[str, Any] = {}
        publish = action.action_definition.publish_metric_action
        if publish is not None:
            metric_action: dict[str, Any] = {}
            if publish.dimensions:
                metric_action["Dimensions"] = [{"Value": d.value} for d in publish.dimensions]
            definition["PublishMetricAction"] = metric_action
        result.append({"ActionName": action.action_name, "ActionDefinition": definition})
    return result


def flatten_custom_actions(api_actions: Optional[list[dict[str, Any]]]) -> list[CustomAction]:
    """Convert ``CustomActions`` from an API response into models."""
    if not api_actions:
        return []

    result = []
    for item in api_actions:
        definition = item.get("ActionDefinition") or {}
        publish = definition.get("PublishMetricAction")
        result.append(
            CustomAction(
                action_name=item.get("ActionName", ""),
                action_definition=ActionDefinition(
                    publish_metric_action=(
                        PublishMetricAction(
                            dimensions=[
                                Dimension(value=d.get("Value", ""))
                                for d in publish.get("Dimensions") or []
                            ]
                        )
                        if publish is not None
                        else None
                    )
                ),
            )
        )
    return result
