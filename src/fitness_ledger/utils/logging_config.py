"""
Logging setup for the fitness ledger.

Library modules log through `logging.getLogger(__name__)`, which places them
under the `fitness_ledger` logger configured here. Handlers are attached only
by the command line entry point, so importing the package never prints.
"""

import logging
import sys
from pathlib import Path

from fitness_ledger.utils.exceptions import ConfigurationError
from fitness_ledger.utils.parameters import LoggingConfig

PACKAGE_LOGGER = "fitness_ledger"


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {name!r}")
    return level


def setup_logging(config: LoggingConfig, logger_name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Attach handlers for the ledger's loggers.

    Console output goes to stderr. Repeated calls replace the previous
    handlers, so each CLI invocation starts from a clean logger.

    Args:
        config: Logging configuration.
        logger_name: Logger to configure. Defaults to the package logger.

    Returns:
        The configured logger.

    Raises:
        ConfigurationError: If the level name is unknown or the log file
            cannot be opened.
    """
    level = _resolve_level(config.level)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)
    handlers: list[logging.Handler] = []

    if config.console:
        # stdout is reserved for command output
        handlers.append(logging.StreamHandler(sys.stderr))

    if config.file:
        log_file = Path(config.file)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as e:
            raise ConfigurationError(f"Cannot open log file {log_file}: {e}") from e

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package logger, e.g. `get_logger("cli")`."""
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
