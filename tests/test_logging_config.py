"""Unit tests for logging setup."""

import logging

import pytest

from fitness_ledger.utils.exceptions import ConfigurationError
from fitness_ledger.utils.logging_config import PACKAGE_LOGGER, get_logger, setup_logging
from fitness_ledger.utils.parameters import LoggingConfig


def test_setup_logging_writes_package_records_to_file(tmp_path) -> None:
    """Test that child loggers reach the configured log file."""
    log_file = tmp_path / "logs" / "ledger.log"
    config = LoggingConfig(level="debug", file=str(log_file), console=False)

    logger = setup_logging(config)
    logging.getLogger(f"{PACKAGE_LOGGER}.services.store").info("stored weight")
    for handler in logger.handlers:
        handler.flush()

    if logger.name != PACKAGE_LOGGER:
        raise AssertionError(f"Expected package logger, got {logger.name}")
    if "stored weight" not in log_file.read_text(encoding="utf-8"):
        raise AssertionError("Expected record in log file")


def test_setup_logging_replaces_handlers(tmp_path) -> None:
    """Test that repeated setup does not stack handlers."""
    config = LoggingConfig(level="INFO", console=True)

    setup_logging(config)
    logger = setup_logging(config)

    if len(logger.handlers) != 1:
        raise AssertionError(f"Expected one handler, got {logger.handlers}")


def test_setup_logging_rejects_unknown_level() -> None:
    """Test that an unknown level name raises ConfigurationError."""
    with pytest.raises(ConfigurationError):
        setup_logging(LoggingConfig(level="LOUD", console=False))


@pytest.mark.parametrize(
    "name, expected",
    [
        ("cli", "fitness_ledger.cli"),
        ("fitness_ledger.cli.main", "fitness_ledger.cli.main"),
        ("fitness_ledger", "fitness_ledger"),
    ],
)
def test_get_logger_nests_under_package(name: str, expected: str) -> None:
    """Test that loggers are placed under the package logger."""
    if get_logger(name).name != expected:
        raise AssertionError(f"Expected {expected}, got {get_logger(name).name}")
