"""
Centralized logging configuration for the project.

This module provides a standardized way to configure and use Python's
logging module across the package. Components receive a LoggerBase
object, so that the destination of the logs can be chosen by the
caller (the console, or a list that can be inspected afterwards).

Usage:
    ```python
    from lcs.utils.logging import get_logger, LoglistLogger

    logger = get_logger(__name__)
    logger.info("Model initialized")

    # collect the logs instead of printing them
    list_logger = LoglistLogger()
    manager = ModelManager(settings, list_logger)
    list_logger.print_logs()
    ```
"""

import logging
import sys
from abc import ABC, abstractmethod


class LoggerBase(ABC):
    """
    Abstract interface for logging functionality.
    """

    @abstractmethod
    def set_level(self, level: int) -> None:
        """Set the logging level for the logger."""
        pass

    @abstractmethod
    def get_level(self) -> int:
        """Get the current logging level"""
        pass

    @abstractmethod
    def debug(self, msg: str) -> None:
        """Log a debug message."""
        pass

    @abstractmethod
    def info(self, msg: str) -> None:
        """Log an informational message."""
        pass

    @abstractmethod
    def error(self, msg: str) -> None:
        """Log an error message."""
        pass

    @abstractmethod
    def warning(self, msg: str) -> None:
        """Log a warning message."""
        pass

    @abstractmethod
    def critical(self, msg: str) -> None:
        """Log a critical message."""
        pass


class ConsoleLogger(LoggerBase):
    """
    A console logger implementation that uses logging.Logger as a
    delegate. Logs messages to the console using Python's built-in
    logging module.
    """

    def __init__(self, name: str | None = None) -> None:
        """
        Initialize the ConsoleLogger with a specific logger name,
        typically __name__ to use the module name
        """
        if name:
            self.logger = logging.getLogger(name)
        else:
            self.logger = logging.getLogger()
        if self.logger.level == logging.NOTSET:
            self.logger.setLevel(logging.INFO)

        # Ensure we have a console handler if none exists
        if not self.logger.hasHandlers():
            handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(LOG_FORMAT)
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def get_level(self) -> int:
        return self.logger.level

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def info(self, msg: str) -> None:
        self.logger.info(msg)

    def error(self, msg: str) -> None:
        self.logger.error(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def critical(self, msg: str) -> None:
        self.logger.critical(msg, stack_info=True)


class LoglistLogger(LoggerBase):
    """
    Maintains a list of logged messages that can be inspected by the
    object creator.
    """

    def __init__(self) -> None:
        self.logs: list[dict[str, str]] = []
        self.level: int = logging.DEBUG

    def set_level(self, level: int) -> None:
        self.level = level

    def get_level(self) -> int:
        return self.level

    def debug(self, msg: str) -> None:
        if self.level <= logging.DEBUG:
            self.logs.append({'debug': msg})

    def info(self, msg: str) -> None:
        if self.level <= logging.INFO:
            self.logs.append({'info': msg})

    def error(self, msg: str) -> None:
        self.logs.append({'error': msg})

    def warning(self, msg: str) -> None:
        if self.level <= logging.WARNING:
            self.logs.append({'warning': msg})

    def critical(self, msg: str) -> None:
        self.logs.append({'critical': msg})

    def get_logs(self, level: int = 0) -> list[str]:
        """
        Returns a list of strings with the log messages.

        Args:
           level: a filter on the logs. Possible values:
                0 or less: returns all messages
                1: omit debug
                2: omit debug and info
                3 or more: only errors and critical
        """
        logs: list[str] = []
        for entry in self.logs:
            match entry:
                case {'debug': msg}:
                    if level < 1:
                        logs.append("DEBUG - " + msg)
                case {'info': msg}:
                    if level < 2:
                        logs.append("INFO - " + msg)
                case {'warning': msg}:
                    if level < 3:
                        logs.append("WARNING - " + msg)
                case {'error': msg}:
                    logs.append("ERROR - " + msg)
                case {'critical': msg}:
                    logs.append("CRITICAL - " + msg)
                case _:
                    logs.append(str(entry))
        return logs

    def count_logs(self, level: int = 0) -> int:
        """The number of recorded logs. Zero means there
        were no recorded logs."""
        return len(self.get_logs(level))

    def clear_logs(self) -> None:
        """Clear the logs from the cache"""
        self.logs.clear()

    def print_logs(self, level: int = 0) -> None:
        for log in self.get_logs(level):
            print(log)


def get_logger(name: str) -> LoggerBase:
    """
    Get a logger with the specified name.

    Args:
        name: The name of the logger, typically __name__ to use the
            module name

    Returns:
        A configured logger instance
    """
    return ConsoleLogger(name)


LOG_FORMAT = '%(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Configure root logger
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    stream=sys.stdout,
)


def set_log_level(level: int | str) -> None:
    """
    Set the log level of the root logger.

    Args:
        level: The logging level (e.g., logging.DEBUG, or 'DEBUG')
    """
    logging.getLogger().setLevel(level)
