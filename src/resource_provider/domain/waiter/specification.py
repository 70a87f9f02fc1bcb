"""Wait specification and wait result models."""

from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# A poll returns (state_object, status). A None state object means "not found".
PollResult = tuple[Any, str]
PollFunction = Callable[[], PollResult]


class WaitSpecification(BaseModel):
    """Parameters of a single state-transition wait.

    Built per call by a resource handler and discarded afterwards. An empty
    ``target`` set means the resource is expected to disappear.
    """

    model_config = ConfigDict(frozen=True)

    pending: frozenset[str] = Field(default_factory=frozenset, description="Statuses to keep waiting on")
    target: frozenset[str] = Field(default_factory=frozenset, description="Statuses that end the wait")
    timeout: float = Field(gt=0, description="Maximum seconds to wait")
    delay: float = Field(0.0, ge=0, description="Seconds to sleep before the first poll")
    poll_interval: Optional[float] = Field(
        None, gt=0, description="Fixed seconds between polls; disables backoff when set"
    )
    min_interval: float = Field(0.1, gt=0, description="First backoff interval in seconds")
    max_interval: float = Field(10.0, gt=0, description="Backoff interval ceiling in seconds")
    min_consecutive_target_hits: int = Field(
        1, ge=1, description="Consecutive target observations required for success"
    )
    max_not_found_retries: int = Field(
        20, ge=0, description="Not-found results tolerated before failing"
    )

    @field_validator("pending", "target", mode="before")
    @classmethod
    def _to_frozenset(cls, value: Union[None, str, Any]) -> frozenset[str]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            return frozenset({value})
        return frozenset(str(getattr(v, "value", v)) for v in value)

    @model_validator(mode="after")
    def _check_sets(self) -> "WaitSpecification":
        overlap = self.pending & self.target
        if overlap:
            raise ValueError(
                f"pending and target statuses must be disjoint, both contain: {sorted(overlap)}"
            )
        if self.min_interval > self.max_interval:
            raise ValueError("min_interval must not exceed max_interval")
        return self

    def interval_for(self, attempt: int) -> float:
        """Seconds to sleep after poll number ``attempt`` (1-based)."""
        if self.poll_interval is not None:
            return self.poll_interval
        exponent = min(max(attempt - 1, 0), 32)
        return min(self.min_interval * (2**exponent), self.max_interval)


class WaitResult(BaseModel):
    """Outcome of a successful wait."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: Any = None
    status: str = ""
    polls: int = 0
    elapsed: float = 0.0
