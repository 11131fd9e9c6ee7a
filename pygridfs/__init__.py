"""PyGridFS: store, find, delete and resolve files in MongoDB GridFS."""

from pygridfs.core.gridfs import (
    AntPath,
    GridFsResource,
    GridFsTemplate,
    MetadataConverter,
    MongoDbFactory,
    Query,
    where_content_type,
    where_filename,
    where_metadata,
)

__version__ = "0.1.0"

__all__ = [
    "AntPath",
    "GridFsResource",
    "GridFsTemplate",
    "MetadataConverter",
    "MongoDbFactory",
    "Query",
    "where_content_type",
    "where_filename",
    "where_metadata",
]
