"""GridFS file storage: store, find, delete and resource resolution."""

from __future__ import annotations

from .ant_path import AntPath, glob_to_regex, is_pattern
from .converter import MetadataConverter
from .db_factory import DEFAULT_BUCKET, MongoDbFactory
from .errors import GridFsError, StreamConsumedError
from .operations import GridFsOperations, ResourcePatternResolver
from .query import Criteria, Query, query, where, where_content_type, where_filename, where_metadata
from .query_mapper import QueryMapper
from .resource import GridFsResource
from .template import GridFsTemplate

__all__ = [
    "AntPath",
    "glob_to_regex",
    "is_pattern",
    "MetadataConverter",
    "DEFAULT_BUCKET",
    "MongoDbFactory",
    "GridFsError",
    "StreamConsumedError",
    "GridFsOperations",
    "ResourcePatternResolver",
    "Criteria",
    "Query",
    "query",
    "where",
    "where_content_type",
    "where_filename",
    "where_metadata",
    "QueryMapper",
    "GridFsResource",
    "GridFsTemplate",
]
