"""
Configuration Manager for PyGridFS using Pydantic Settings.

Settings are read from a YAML file and may be overridden by environment
variables of the form PYGRIDFS_SECTION__KEY (e.g. PYGRIDFS_MONGO__BUCKET=photos).

Config file search order:
1. PYGRIDFS_CONFIG_PATH environment variable
2. ./config.yaml
3. pygridfs/config/config.yaml (packaged defaults)
"""

from __future__ import annotations

import logging
import os
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource


# Use basic logging during config initialization (before custom logger is
# set up)
_basic_logger = logging.getLogger(__name__)


class MongoSettings(BaseModel):
    """MongoDB connection and GridFS bucket settings."""
    uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string")
    database: str = Field(
        default="pygridfs",
        description="Database holding the GridFS buckets")
    bucket: str | None = Field(
        default=None,
        description="GridFS bucket name (None = default 'fs' bucket)")
    chunk_size_bytes: int | None = Field(
        default=None,
        ge=1,
        le=16 * 1024 * 1024,
        description="Upload chunk size (None = driver default of 255 KiB)")
    connect_timeout_ms: int = Field(
        default=20000,
        ge=1,
        description="Driver connect timeout in milliseconds")

    @field_validator("database")
    @classmethod
    def _database_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("database name must not be blank")
        return value.strip()

    @field_validator("bucket")
    @classmethod
    def _blank_bucket_is_default(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


class LoggingSettings(BaseModel):
    """Logging configuration (raw dict for logging.config.dictConfig)."""
    version: int = Field(default=1)
    disable_existing_loggers: bool = Field(default=False)
    formatters: dict[str, Any] = Field(default_factory=dict)
    handlers: dict[str, Any] = Field(default_factory=dict)
    root: dict[str, Any] = Field(default_factory=dict)
    loggers: dict[str, Any] = Field(default_factory=dict)

    model_config = {'extra': 'allow'}


class AppSettings(BaseSettings):
    """
    Main application settings.

    Priority (highest to lowest): environment variables, YAML file data,
    default values.
    """

    mongo: MongoSettings = Field(default_factory=MongoSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="PYGRIDFS_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML data arrives as init kwargs; nested env values are deep-merged
        # over it
        return env_settings, init_settings

    @classmethod
    def from_yaml(cls, config_path: str | None = None) -> AppSettings:
        """
        Build settings from a YAML file, searching for one if no path is given.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not a valid YAML mapping or the values
                fail validation
        """
        path = config_path or cls.find_config_file()
        _basic_logger.info(f"Loading configuration from: {path}")

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}")
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping at the top level")

        try:
            return cls(**data)
        except ValidationError as e:
            _basic_logger.error(f"Configuration validation failed: {e}")
            raise ValueError(f"Configuration validation failed:\n{e}")

    @staticmethod
    def find_config_file() -> str:
        """Return the first existing file from the config search order."""
        candidates = [
            os.getenv("PYGRIDFS_CONFIG_PATH"),
            os.path.join(os.getcwd(), "config.yaml"),
            os.path.join(os.path.dirname(__file__), "config.yaml"),
        ]
        for candidate in candidates:
            if candidate and os.path.isfile(candidate):
                return candidate
        raise FileNotFoundError(
            "No config.yaml found; set PYGRIDFS_CONFIG_PATH")


class ConfigManager:
    """Process-wide holder of the loaded AppSettings."""

    _instance: ConfigManager | None = None
    _settings: AppSettings | None = None
    _config_path: str | None = None

    @classmethod
    def get_instance(cls) -> ConfigManager:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the instance and any loaded settings."""
        cls._instance = None
        cls._settings = None
        cls._config_path = None

    @property
    def settings(self) -> AppSettings:
        if ConfigManager._settings is None:
            self.load()
        return ConfigManager._settings

    def load(self, config_path: str | None = None) -> dict[str, Any]:
        """Load settings (again when a path is given) and return them as a dict."""
        if ConfigManager._settings is None or config_path is not None:
            ConfigManager._settings = AppSettings.from_yaml(config_path)
            ConfigManager._config_path = config_path
        return ConfigManager._settings.model_dump()

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``mongo.bucket``."""
        node: Any = self.settings.model_dump()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_config_path(self) -> str | None:
        return ConfigManager._config_path

    @property
    def mongo_settings(self) -> MongoSettings:
        return self.settings.mongo

    @property
    def logging_config(self) -> dict[str, Any]:
        return self.settings.logging.model_dump()


def get_config_manager() -> ConfigManager:
    return ConfigManager.get_instance()


__all__ = [
    'AppSettings',
    'ConfigManager',
    'LoggingSettings',
    'MongoSettings',
    'get_config_manager',
]
