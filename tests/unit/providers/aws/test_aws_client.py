"""Unit tests for the AWS client wrapper."""

from unittest.mock import Mock

import pytest
from moto import mock_aws

from resource_provider.config.manager import ConfigurationManager
from resource_provider.providers.aws.infrastructure.aws_client import AWSClient


@pytest.mark.unit
@pytest.mark.aws
class TestAWSClient:
    @mock_aws
    def test_client_settings_come_from_configuration(
        self, aws_credentials, config_manager: ConfigurationManager, mock_logger: Mock
    ):
        client = AWSClient(config_manager, mock_logger)

        assert client.region_name == "us-east-1"
        assert client.boto_config.retries == {"max_attempts": 2, "mode": "adaptive"}
        assert client.boto_config.connect_timeout == 5
        assert client.boto_config.read_timeout == 10
        mock_logger.info.assert_called_once()

    @mock_aws
    def test_clients_are_created_lazily_and_cached(
        self, aws_credentials, config_manager: ConfigurationManager, mock_logger: Mock
    ):
        client = AWSClient(config_manager, mock_logger)
        assert client.get_client_info()["clients"] == []

        rekognition = client.rekognition_client

        assert client.get_client("rekognition") is rekognition
        assert rekognition.meta.region_name == "us-east-1"
        assert client.get_client_info()["clients"] == ["rekognition"]

    @mock_aws
    def test_endpoint_url_override(self, aws_credentials, mock_logger: Mock):
        config = ConfigurationManager()
        config.load_from_dict(
            {"aws": {"region": "eu-west-1", "endpoint_url": "http://localhost:4566"}}
        )

        client = AWSClient(config, mock_logger)

        assert client.rekognition_client.meta.endpoint_url == "http://localhost:4566"
        assert client.get_client_info()["endpoint_url"] == "http://localhost:4566"

    def test_set_client_installs_prebuilt_client(self, aws_client: AWSClient):
        stub = Mock()

        aws_client.set_client("rekognition", stub)

        assert aws_client.rekognition_client is stub
