"""Logging adapter implementing LoggingPort."""

import logging
from typing import Any, Optional

from resource_provider.domain.base.ports.logging_port import LoggingPort
from resource_provider.infrastructure.logging.logger import ROOT_LOGGER_NAME, get_logger


class LoggingAdapter(LoggingPort):
    """LoggingPort over a stdlib logger rendered by structlog.

    Bound context is passed as ``extra`` so structlog's ExtraAdder renders it
    as top-level keys of the record.
    """

    def __init__(
        self,
        name: str = ROOT_LOGGER_NAME,
        context: Optional[dict[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            name: Logger name under the provider's hierarchy
            context: Fields added to every record
            logger: Existing logger to share, used by ``bind``
        """
        self._logger = logger or get_logger(name)
        self._context = dict(context or {})

    def bind(self, **context: Any) -> "LoggingAdapter":
        """Return an adapter sharing this logger with ``context`` merged in."""
        return LoggingAdapter(context={**self._context, **context}, logger=self._logger)

    def _log(self, level: int, message: str, args: tuple, kwargs: dict[str, Any]) -> None:
        if self._context:
            kwargs["extra"] = {**self._context, **(kwargs.get("extra") or {})}
        # One frame for _log, one for the public method.
        kwargs.setdefault("stacklevel", 3)
        self._logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, args, kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, message, args, kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, args, kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, args, kwargs)

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, args, kwargs)

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log an error with the active exception's traceback."""
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, message, args, kwargs)
