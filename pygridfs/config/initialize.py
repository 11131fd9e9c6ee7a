"""Build a ready-to-use GridFsTemplate from configuration."""

from __future__ import annotations

from pygridfs.config.settings import ConfigManager, get_config_manager
from pygridfs.core.gridfs import GridFsTemplate, MetadataConverter, MongoDbFactory
from pygridfs.logging.setup import get_logger, setup_logging


def initialize_template(
    config_path: str | None = None,
    bucket: str | None = None,
    config_manager: ConfigManager | None = None,
    db_factory: MongoDbFactory | None = None,
) -> GridFsTemplate:
    """
    Load configuration, set up logging and create a template.

    Args:
        config_path: Explicit config file (None = search default locations)
        bucket: Bucket name overriding ``mongo.bucket``
        config_manager: Config manager to use (None = singleton)
        db_factory: Factory to use (None = build one from ``mongo`` settings)

    Returns:
        GridFsTemplate bound to the configured bucket
    """
    config_manager = config_manager or get_config_manager()
    config_manager.load(config_path)
    setup_logging(config_manager.logging_config)

    mongo = config_manager.mongo_settings
    if db_factory is None:
        db_factory = MongoDbFactory.from_settings(mongo)

    template = GridFsTemplate(
        db_factory,
        MetadataConverter(),
        bucket=bucket or mongo.bucket,
        chunk_size_bytes=mongo.chunk_size_bytes,
    )
    get_logger(__name__).debug(
        f"GridFS template ready for database '{db_factory.database_name}', "
        f"bucket '{template.bucket or 'fs'}'")
    return template
