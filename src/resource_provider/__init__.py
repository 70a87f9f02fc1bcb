"""AWS Resource Provider - declarative lifecycle management for AWS resources.

The provider maps typed resource models onto AWS API calls and drives
create/read/update/delete operations to completion, blocking on a generic
state-transition waiter until the remote resource settles.

Key Components:
    - domain: Waiter state machine and logging port
    - config: Configuration schemas and the configuration manager
    - infrastructure: Logging setup and adapters
    - providers: AWS client wrapper, resource models and lifecycle handlers

Usage:
    >>> from resource_provider.infrastructure.logging import setup_logging_from_config
    >>> setup_logging_from_config(config_manager)
    >>> from resource_provider.providers.aws.infrastructure.aws_client import AWSClient
    >>> from resource_provider.providers.aws.infrastructure.handlers.dataset_handler import (
    ...     DatasetHandler,
    ... )
    >>> handler = DatasetHandler(AWSClient(config_manager, logger), logger)
    >>> dataset = handler.create(plan)
"""

__version__ = "0.1.0"
