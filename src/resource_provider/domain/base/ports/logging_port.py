"""Domain port for logging."""

from abc import ABC, abstractmethod
from typing import Any


class LoggingPort(ABC):
    """Port through which domain and provider components emit log records."""

    @abstractmethod
    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message."""

    @abstractmethod
    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log info message."""

    @abstractmethod
    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message."""

    @abstractmethod
    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log error message."""

    @abstractmethod
    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log critical message."""

    @abstractmethod
    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log exception with traceback."""

    @abstractmethod
    def bind(self, **context: Any) -> "LoggingPort":
        """
        Return a port that adds ``context`` to every record it emits.

        Used to tag records with the resource type and identifier a handler
        is working on.
        """
