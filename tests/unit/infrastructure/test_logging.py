"""Unit tests for logging setup and the logging adapter."""

import json
import logging
from collections.abc import Generator
from pathlib import Path
from unittest.mock import Mock

import pytest

from resource_provider.config.manager import ConfigurationManager
from resource_provider.domain.base.ports import LoggingPort
from resource_provider.infrastructure.adapters.logging_adapter import LoggingAdapter
from resource_provider.infrastructure.logging import (
    get_logger,
    setup_logging,
    setup_logging_from_config,
)
from resource_provider.infrastructure.logging.logger import ROOT_LOGGER_NAME


@pytest.fixture
def restore_root_logger() -> Generator[None, None, None]:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    root.propagate = propagate


@pytest.mark.unit
class TestLogger:
    def test_get_logger_prefixes_names(self):
        assert get_logger("waiter").name == "resource_provider.waiter"
        assert get_logger("resource_provider.config").name == "resource_provider.config"
        assert get_logger(ROOT_LOGGER_NAME).name == ROOT_LOGGER_NAME

    def test_setup_logging_writes_json_file(self, temp_dir: Path, restore_root_logger):
        root = setup_logging("debug", "file", log_dir=str(temp_dir), log_filename="test.log")

        get_logger("handlers").info("created %s", "dataset-1")
        for handler in root.handlers:
            handler.flush()

        lines = (temp_dir / "test.log").read_text().strip().splitlines()
        record = json.loads(lines[-1])
        assert record["event"] == "created dataset-1"
        assert record["level"] == "info"
        assert record["logger"] == "resource_provider.handlers"
        assert "timestamp" in record
        assert root.level == logging.DEBUG
        assert root.propagate is False

    def test_setup_logging_both_destinations(self, temp_dir: Path, restore_root_logger):
        root = setup_logging("INFO", "both", log_dir=str(temp_dir))

        assert len(root.handlers) == 2
        assert (temp_dir / "resource_provider.log").exists()

    def test_setup_logging_replaces_handlers(self, restore_root_logger):
        setup_logging("INFO", "stdout")
        root = setup_logging("INFO", "stdout")

        assert len(root.handlers) == 1

    def test_setup_logging_rejects_unknown_destination(self):
        with pytest.raises(ValueError, match="Unsupported log destination"):
            setup_logging("INFO", "syslog")

    def test_setup_logging_from_loaded_config(self, temp_dir: Path, restore_root_logger):
        config = ConfigurationManager()
        config.load_from_dict(
            {
                "logging": {
                    "level": "warning",
                    "destination": "file",
                    "log_dir": str(temp_dir),
                    "log_filename": "provider.log",
                }
            }
        )

        root = setup_logging_from_config(config)
        get_logger("handlers").info("dropped")
        get_logger("handlers").warning("kept")
        for handler in root.handlers:
            handler.flush()

        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        events = [
            json.loads(line)["event"]
            for line in (temp_dir / "provider.log").read_text().strip().splitlines()
        ]
        assert events == ["kept"]

    def test_setup_logging_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, restore_root_logger
    ):
        monkeypatch.setenv("RESOURCE_PROVIDER_LOGGING__LEVEL", "ERROR")
        config = ConfigurationManager()
        config.load_from_dict({"logging": {"level": "DEBUG", "destination": "stdout"}})

        root = setup_logging_from_config(config)

        assert root.level == logging.ERROR
        assert isinstance(root.handlers[0], logging.StreamHandler)


@pytest.mark.unit
class TestLoggingAdapter:
    def test_implements_logging_port(self):
        assert isinstance(LoggingAdapter(), LoggingPort)

    @pytest.mark.parametrize(
        "method, level",
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            ("critical", logging.CRITICAL),
        ],
    )
    def test_delegates_with_stacklevel(self, method: str, level: int):
        logger = Mock()
        adapter = LoggingAdapter(logger=logger)

        getattr(adapter, method)("message %s", "arg")

        logger.log.assert_called_once_with(level, "message %s", "arg", stacklevel=3)

    def test_exception_includes_traceback(self):
        logger = Mock()

        LoggingAdapter(logger=logger).exception("failed")

        logger.log.assert_called_once_with(logging.ERROR, "failed", exc_info=True, stacklevel=3)

    def test_explicit_stacklevel_is_kept(self):
        logger = Mock()

        LoggingAdapter(logger=logger).info("message", stacklevel=4)

        logger.log.assert_called_once_with(logging.INFO, "message", stacklevel=4)

    def test_bound_context_is_passed_as_extra(self):
        logger = Mock()
        adapter = LoggingAdapter(logger=logger).bind(resource_type="Dataset")

        adapter.bind(resource_id="arn:1").info("created", extra={"polls": 2})

        logger.log.assert_called_once_with(
            logging.INFO,
            "created",
            extra={"resource_type": "Dataset", "resource_id": "arn:1", "polls": 2},
            stacklevel=3,
        )

    def test_bind_does_not_change_parent(self):
        logger = Mock()
        adapter = LoggingAdapter(logger=logger)

        adapter.bind(resource_type="Dataset")
        adapter.info("plain")

        logger.log.assert_called_once_with(logging.INFO, "plain", stacklevel=3)

    def test_bound_context_reaches_rendered_record(self, temp_dir, restore_root_logger):
        root = setup_logging("INFO", "file", log_dir=str(temp_dir), log_filename="bound.log")

        LoggingAdapter("handlers").bind(resource_type="Stream Processor").info("deleted")
        for handler in root.handlers:
            handler.flush()

        record = json.loads((temp_dir / "bound.log").read_text().strip().splitlines()[-1])
        assert record["event"] == "deleted"
        assert record["resource_type"] == "Stream Processor"
