"""Unit tests for WaitSpecification."""

from enum import Enum

import pytest
from pydantic import ValidationError

from resource_provider.domain.waiter import WaitSpecification


class _Status(str, Enum):
    UPDATING = "UPDATING"
    RUNNING = "RUNNING"


@pytest.mark.unit
class TestWaitSpecification:
    def test_status_sets_accept_enums_and_strings(self):
        spec = WaitSpecification(pending=[_Status.UPDATING], target="RUNNING", timeout=10)

        assert spec.pending == frozenset({"UPDATING"})
        assert spec.target == frozenset({"RUNNING"})

    def test_missing_sets_default_to_empty(self):
        spec = WaitSpecification(pending=None, timeout=10)

        assert spec.pending == frozenset()
        assert spec.target == frozenset()

    def test_overlapping_sets_are_rejected(self):
        with pytest.raises(ValidationError, match="disjoint"):
            WaitSpecification(pending={"A", "B"}, target={"B"}, timeout=10)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            WaitSpecification(target={"A"}, timeout=0)

    def test_interval_bounds_must_be_ordered(self):
        with pytest.raises(ValidationError):
            WaitSpecification(target={"A"}, timeout=10, min_interval=5, max_interval=1)

    def test_consecutive_hits_must_be_at_least_one(self):
        with pytest.raises(ValidationError):
            WaitSpecification(target={"A"}, timeout=10, min_consecutive_target_hits=0)

    def test_fixed_interval_overrides_backoff(self):
        spec = WaitSpecification(target={"A"}, timeout=10, poll_interval=3)

        assert [spec.interval_for(n) for n in (1, 2, 10)] == [3, 3, 3]

    def test_backoff_doubles_up_to_ceiling(self):
        spec = WaitSpecification(target={"A"}, timeout=10, min_interval=0.5, max_interval=3)

        assert [spec.interval_for(n) for n in (1, 2, 3, 4, 500)] == [0.5, 1, 2, 3, 3]

    def test_specification_is_immutable(self):
        spec = WaitSpecification(target={"A"}, timeout=10)

        with pytest.raises(ValidationError):
            spec.timeout = 20
