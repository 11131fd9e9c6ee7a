"""
Log manager for PyGridFS.

This module provides a singleton LogManager class that applies the logging
section of the configuration once and hands out logger instances. Log
directories referenced by file handlers are created on demand.
"""

from __future__ import annotations

import logging
import logging.config
import os
from typing import Any


class LogManager:
    """
    Singleton holding the applied logging configuration.

    Attributes:
        _instance (LogManager | None): Singleton instance of LogManager
        logger_settings (dict): Logging configuration passed to dictConfig
    """

    _instance: LogManager | None = None

    def __init__(self, logger_settings: dict[str, Any] | None):
        """
        Initialize the LogManager with logging settings.

        Args:
            logger_settings (dict): Dictionary containing logging configuration
        """
        self.logger_settings = dict(logger_settings or {})
        if not self.logger_settings:
            return

        self.logger_settings.setdefault('version', 1)

        for handler in self.logger_settings.get('handlers', {}).values():
            log_path = handler.get('filename') if isinstance(
                handler, dict) else None
            if log_path and os.path.dirname(log_path):
                os.makedirs(os.path.dirname(log_path), exist_ok=True)

        try:
            logging.config.dictConfig(self.logger_settings)
        except (ValueError, TypeError, AttributeError, ImportError) as e:
            logging.basicConfig(level=logging.INFO)
            logging.warning(
                f"Failed to configure logging with provided settings: {e}")

    @classmethod
    def get_instance(
            cls, logger_settings: dict[str, Any] | None = None) -> LogManager:
        """
        Get the singleton instance of LogManager.

        Args:
            logger_settings (dict, optional): Logging configuration, used only
                on first call

        Returns:
            LogManager: Singleton instance of LogManager
        """
        if cls._instance is None:
            cls._instance = cls(logger_settings)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the singleton (for testing)."""
        cls._instance = None

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger instance by name."""
        return logging.getLogger(name)
