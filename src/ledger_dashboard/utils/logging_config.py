"""Logging configuration for the ledger dashboard.

Every module logs through a child of the ``ledger_dashboard`` logger. Nothing
is emitted until ``setup_logging`` is called, so embedding the package in a
service does not print anything on its own.
"""

import logging
import sys
import time
from pathlib import Path

PACKAGE_LOGGER = "ledger_dashboard"
DEFAULT_LOG_FILE = "ledger_dashboard.log"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Request context keys whose values never reach a log line.
# User ids and years are kept so a report can be traced.
SENSITIVE_FIELDS = frozenset({
    "password",
    "token",
    "api_key",
    "secret",
    "authorization",
    "email",
    "phone",
})

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def _mask(context: dict[str, object]) -> dict[str, object]:
    return {k: "***" if k.lower() in SENSITIVE_FIELDS else v for k, v in context.items()}


def _format_context(context: dict[str, object]) -> str:
    return ", ".join(f"{k}={v}" for k, v in _mask(context).items())


def setup_logging(
    level: str = "INFO",
    log_file: str | None = DEFAULT_LOG_FILE,
    console_output: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Safe to call more than once; each call replaces the handlers installed
    by the previous one. The CLI calls it first with defaults and again once
    the settings file has been read.

    Args:
        level: Log level name. Unknown names fall back to INFO.
        log_file: Log file path, or None to skip file logging.
        console_output: Whether to also log to stderr (stdout is reserved
            for the JSON report).

    Returns:
        The ``ledger_dashboard`` logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []
    if log_file:
        handlers.append(logging.FileHandler(Path(log_file), encoding="utf-8"))
    if console_output:
        handlers.append(logging.StreamHandler(sys.stderr))
    if not handlers:
        handlers.append(logging.NullHandler())

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace.

    Args:
        name: Module name (typically __name__).

    Returns:
        Logger instance.
    """
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


class LogContext:
    """Logs one report request: its context, duration and outcome.

    Exceptions listed in ``expected`` are caller errors (unknown user,
    malformed ledger). They are logged as a warning without a traceback.
    Anything else is logged as an error with one. Exceptions always
    propagate.
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        expected: tuple[type[BaseException], ...] = (),
        **context: object,
    ):
        """Initialize log context.

        Args:
            logger: Logger instance to use.
            operation: Name of the operation being performed.
            expected: Exception types that signal a bad request rather than a bug.
            **context: Request fields included in every message.
        """
        self.logger = logger
        self.operation = operation
        self.expected = expected
        self.context = context
        self._started = 0.0

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._started) * 1000

    def __enter__(self) -> "LogContext":
        self._started = time.perf_counter()
        self.logger.debug(f"{self.operation} started ({_format_context(self.context)})")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> bool:
        context_str = _format_context(self.context)
        if exc_type is None:
            self.logger.debug(f"{self.operation} finished in {self.elapsed_ms:.1f} ms ({context_str})")
        elif issubclass(exc_type, self.expected):
            self.logger.warning(
                f"{self.operation} rejected ({context_str}): {exc_type.__name__}: {exc_val}"
            )
        else:
            self.logger.error(
                f"{self.operation} failed after {self.elapsed_ms:.1f} ms ({context_str}): "
                f"{exc_type.__name__}: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),  # type: ignore[arg-type]
            )
        return False
