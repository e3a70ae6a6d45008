"""
Configuration and parameter loading using Pydantic.

This module provides centralized configuration management for the entire application.
All parameters are loaded from YAML and validated using Pydantic models.
"""

from pathlib import Path
from typing import Any

import pytz
import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fitness_ledger.utils.exceptions import ConfigurationError


class StorageConfig(BaseModel):
    """Local document storage configuration."""

    data_dir: str = "data"
    storage_key: str = Field(default="deependu_fitness_v1", pattern=r"^[A-Za-z0-9_.-]+$")


class AnalyticsConfig(BaseModel):
    """Derived analytics configuration."""

    timezone: str = "UTC"
    contribution_days: int = Field(default=90, ge=1)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject names missing from the tz database."""
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown timezone: {v!r}") from e
        return v


class ExportConfig(BaseModel):
    """JSON export configuration."""

    filename: str = "deependu_fitness_backup.json"
    indent: int = Field(default=2, ge=0)


class ReportFilesConfig(BaseModel):
    """Report file names configuration."""

    weight_trend: str = "weight_trend.csv"
    contributions: str = "contributions.csv"
    weekly_summary: str = "weekly_summary.csv"


class ReportConfig(BaseModel):
    """CSV report configuration."""

    dir: str = "output"
    files: ReportFilesConfig = Field(default_factory=ReportFilesConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    console: bool = True


class AppConfig(BaseSettings):
    """Main application configuration."""

    storage: StorageConfig
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(env_prefix="FITNESS_LEDGER_", case_sensitive=False)


class ParameterLoader:
    """
    Centralized parameter loader for the application.

    Loads and validates configuration from YAML files using Pydantic models.
    Provides type-safe access to all configuration parameters.
    """

    def __init__(self, config_path: str = "config/config.yaml") -> None:
        """
        Initialize parameter loader.

        Args:
            config_path: Path to the YAML configuration file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        self.config_path = Path(config_path)
        self.config: AppConfig
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}

            if not isinstance(config_dict, dict):
                raise ConfigurationError("Configuration root must be a mapping")

            self.config = AppConfig(**config_dict)

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_storage_config(self) -> StorageConfig:
        """Get document storage configuration."""
        return self.config.storage

    def get_analytics_config(self) -> AnalyticsConfig:
        """Get analytics configuration."""
        return self.config.analytics

    def get_export_config(self) -> ExportConfig:
        """Get JSON export configuration."""
        return self.config.export

    def get_report_config(self) -> ReportConfig:
        """Get CSV report configuration."""
        return self.config.report

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging

    def get_raw_config(self) -> dict[str, Any]:
        """
        Get raw configuration dictionary.

        Returns:
            Dictionary representation of the configuration.
        """
        return self.config.model_dump()
