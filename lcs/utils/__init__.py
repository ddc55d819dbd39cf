# pyright: reportUnusedImport=false
# flake8: noqa

from .logging import (
    LoggerBase,
    ConsoleLogger,
    LoglistLogger,
    get_logger,
    set_log_level,
)

# default logger initialized from here
logger: LoggerBase = ConsoleLogger()
