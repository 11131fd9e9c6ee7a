"""Configuration for PyGridFS."""

from .settings import AppSettings, ConfigManager, LoggingSettings, MongoSettings, get_config_manager

__all__ = ['AppSettings', 'ConfigManager', 'LoggingSettings', 'MongoSettings', 'get_config_manager']
