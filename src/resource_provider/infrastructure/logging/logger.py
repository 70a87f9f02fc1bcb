"""Structured logging setup.

Loggers are plain stdlib loggers so call sites keep printf-style arguments,
``extra=`` and ``stacklevel=``; structlog renders the records.
"""

import logging
import os
from typing import TYPE_CHECKING, Optional

import structlog

if TYPE_CHECKING:
    from resource_provider.config.manager import ConfigurationManager

ROOT_LOGGER_NAME = "resource_provider"

_SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.ExtraAdder(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _build_formatter(json_output: bool) -> structlog.stdlib.ProcessorFormatter:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def setup_logging(
    log_level: str = "INFO",
    log_destination: str = "stdout",
    log_dir: Optional[str] = None,
    log_filename: Optional[str] = None,
) -> logging.Logger:
    """
    Set up structured logging for the provider.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_destination: Where to send logs ("file", "stdout", or "both")
        log_dir: Directory where the log file is written
        log_filename: Name of the log file

    Returns:
        The configured root logger of the provider
    """
    if log_destination not in ("file", "stdout", "both"):
        raise ValueError(f"Unsupported log destination: {log_destination}")

    handlers: list[logging.Handler] = []
    if log_destination in ("file", "both"):
        log_dir = log_dir or "./logs"
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, log_filename or "resource_provider.log"), encoding="utf-8"
        )
        file_handler.setFormatter(_build_formatter(json_output=True))
        handlers.append(file_handler)

    if log_destination in ("stdout", "both"):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(_build_formatter(json_output=False))
        handlers.append(stream_handler)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root.propagate = False

    return root


def setup_logging_from_config(config: "ConfigurationManager") -> logging.Logger:
    """Set up logging from the ``logging`` section of the provider configuration."""
    from resource_provider.config.schemas.app_schema import LoggingConfig

    logging_config = config.get_typed(LoggingConfig)
    return setup_logging(
        logging_config.level,
        logging_config.destination,
        log_dir=logging_config.log_dir,
        log_filename=logging_config.log_filename,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the provider's logger hierarchy."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
