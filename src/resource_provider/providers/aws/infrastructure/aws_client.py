"""AWS client wrapper with lazy service clients."""

import threading
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from resource_provider.config.manager import ConfigurationManager
from resource_provider.config.schemas.app_schema import AWSProviderConfig
from resource_provider.domain.base.ports import LoggingPort
from resource_provider.providers.aws.exceptions.aws_exceptions import (
    AuthorizationError,
    AWSConfigurationError,
    NetworkError,
)


class AWSClient:
    """Wrapper for AWS service clients sharing one session and retry policy."""

    def __init__(self, config: ConfigurationManager, logger: LoggingPort) -> None:
        """
        Initialize AWS client wrapper.

        Args:
            config: Configuration manager holding the ``aws`` section
            logger: Logger for logging messages
        """
        self._config_manager = config
        self._logger = logger
        self.aws_config: AWSProviderConfig = config.get_typed(AWSProviderConfig)
        self.region_name = self.aws_config.region
        self.profile_name = self.aws_config.profile

        # Transient network errors are retried here, never by the waiters.
        self.boto_config = Config(
            region_name=self.region_name,
            retries={
                "max_attempts": self.aws_config.max_retries,
                "mode": "adaptive",
            },
            connect_timeout=self.aws_config.connect_timeout,
            read_timeout=self.aws_config.read_timeout,
        )

        self._clients: dict[str, Any] = {}
        self._client_lock = threading.RLock()

        try:
            self.session = boto3.Session(
                region_name=self.region_name, profile_name=self.profile_name
            )
        except BotoCoreError as e:
            raise AWSConfigurationError(f"AWS session initialization failed: {e}")

        self._logger.info(
            "AWS client initialized with region: %s, profile: %s, retries: %d, timeouts: connect=%ds, read=%ds",
            self.region_name,
            self.profile_name or "default",
            self.aws_config.max_retries,
            self.aws_config.connect_timeout,
            self.aws_config.read_timeout,
        )

    def get_client(self, service_name: str) -> Any:
        """Get (creating on first use) the boto3 client for a service."""
        with self._client_lock:
            client = self._clients.get(service_name)
            if client is None:
                self._logger.debug("Initializing %s client on first use", service_name)
                kwargs: dict[str, Any] = {"config": self.boto_config}
                if self.aws_config.endpoint_url:
                    kwargs["endpoint_url"] = self.aws_config.endpoint_url
                try:
                    client = self.session.client(service_name, **kwargs)
                except ClientError as e:
                    error_code = e.response["Error"]["Code"]
                    error_message = e.response["Error"]["Message"]
                    if error_code in ["UnauthorizedOperation", "InvalidClientTokenId"]:
                        raise AuthorizationError(f"AWS authentication failed: {error_message}")
                    elif error_code == "RequestTimeout":
                        raise NetworkError(f"AWS connection failed: {error_message}")
                    raise AWSConfigurationError(
                        f"AWS client initialization failed: {error_message}"
                    )
                except BotoCoreError as e:
                    raise AWSConfigurationError(f"AWS client initialization failed: {e}")
                self._clients[service_name] = client
            return client

    @property
    def rekognition_client(self) -> Any:
        """Lazy initialization of Rekognition client."""
        return self.get_client("rekognition")

    def set_client(self, service_name: str, client: Any) -> None:
        """Install a pre-built client, e.g. one wrapped in a botocore Stubber."""
        with self._client_lock:
            self._clients[service_name] = client

    def get_client_info(self) -> dict[str, Any]:
        """Describe the wrapper's configuration and created clients."""
        with self._client_lock:
            clients = sorted(self._clients)
        return {
            "region": self.region_name,
            "profile": self.profile_name or "default",
            "endpoint_url": self.aws_config.endpoint_url,
            "clients": clients,
        }
