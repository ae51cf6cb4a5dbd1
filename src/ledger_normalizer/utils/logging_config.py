"""Logging setup for the ledger normalizer.

All module loggers live under the ``ledger_normalizer`` namespace so the CLI
can configure the package without touching the host application's loggers.
"""

import logging
import sys
import time
from pathlib import Path

DEFAULT_LOG_FILE = "ledger_normalizer.log"
ROOT_LOGGER_NAME = "ledger_normalizer"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_output: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Calling this again replaces the handlers from the previous call.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Log file path. None means DEFAULT_LOG_FILE; an empty string
            disables file output.
        console_output: Whether to also log to stderr.

    Returns:
        The package root logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(numeric_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_file is None:
        log_file = DEFAULT_LOG_FILE
    if log_file:
        file_handler = logging.FileHandler(Path(log_file), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace.

    Module names inside the package are already namespaced and are used as-is.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class LogContext:
    """Context manager that logs an operation's start, duration and failure.

    Example:
        with LogContext(logger, "normalize", entries=120):
            ...
    """

    def __init__(self, logger: logging.Logger, operation: str, **context: object):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.elapsed_ms: float | None = None
        self._started = 0.0

    def __enter__(self) -> "LogContext":
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        self.logger.debug(f"Starting {self.operation}" + (f" ({details})" if details else ""))
        self._started = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> bool:
        self.elapsed_ms = (time.perf_counter() - self._started) * 1000
        if exc_type is not None:
            self.logger.error(
                f"{self.operation} failed after {self.elapsed_ms:.1f} ms: "
                f"{exc_type.__name__}: {exc_val}"
            )
        else:
            self.logger.debug(f"Finished {self.operation} in {self.elapsed_ms:.1f} ms")
        return False
