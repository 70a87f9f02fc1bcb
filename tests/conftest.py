"""Global test configuration and fixtures."""

import json
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import boto3
import pytest
from botocore.stub import Stubber

from resource_provider.config.manager import ConfigurationManager
from resource_provider.domain.base.ports import LoggingPort
from resource_provider.domain.waiter import StateChangeWaiter
from resource_provider.providers.aws.infrastructure.aws_client import AWSClient


class FakeClock:
    """Simulated monotonic clock; ``sleep`` advances time instantly."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def test_config_dict() -> dict[str, Any]:
    """Configuration used across tests."""
    return {
        "aws": {"region": "us-east-1", "profile": None, "max_retries": 2},
        "waiter": {
            "min_interval": 1,
            "max_interval": 8,
            "not_found_checks": 20,
            "continuous_target_occurrence": 2,
        },
        "timeouts": {"create": 600, "update": 600, "delete": 600},
        "logging": {"level": "DEBUG", "destination": "stdout"},
    }


@pytest.fixture
def test_config_file(temp_dir: Path, test_config_dict: dict[str, Any]) -> Path:
    """Write the test configuration to a JSON file."""
    config_file = temp_dir / "config.json"
    with open(config_file, "w") as f:
        json.dump(test_config_dict, f)
    return config_file


@pytest.fixture
def config_manager(test_config_dict: dict[str, Any]) -> ConfigurationManager:
    """Configuration manager loaded with the test configuration."""
    manager = ConfigurationManager()
    manager.load_from_dict(test_config_dict)
    return manager


@pytest.fixture
def mock_logger() -> Mock:
    """Mock logging port."""
    return Mock(spec=LoggingPort)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def waiter(mock_logger: Mock, fake_clock: FakeClock) -> StateChangeWaiter:
    """Waiter driven by simulated time."""
    return StateChangeWaiter(logger=mock_logger, clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Mocked AWS credentials for boto3."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def aws_client(
    aws_credentials: None, config_manager: ConfigurationManager, mock_logger: Mock
) -> AWSClient:
    return AWSClient(config_manager, mock_logger)


@pytest.fixture
def rekognition_stub(aws_client: AWSClient) -> Generator[Stubber, None, None]:
    """Stubbed Rekognition client installed into the AWS client wrapper."""
    client = boto3.client("rekognition", region_name="us-east-1")
    aws_client.set_client("rekognition", client)
    with Stubber(client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()
