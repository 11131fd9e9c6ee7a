"""
GridFS template.

GridFsTemplate forwards store, find and delete calls to a pymongo
GridFSBucket and resolves stored files as resources, either by exact
filename or by Ant-style location pattern.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, BinaryIO

from bson import ObjectId
from gridfs import GridFSBucket

from .ant_path import AntPath
from .converter import MetadataConverter
from .db_factory import MongoDbFactory
from .operations import GridFsOperations, ResourcePatternResolver
from .query import Query, where_filename
from .query_mapper import QueryMapper
from .resource import CONTENT_TYPE_FIELD, GridFsResource
from pygridfs.logging.setup import get_logger

logger = get_logger(__name__)


class GridFsTemplate(GridFsOperations, ResourcePatternResolver):
    """
    GridFS operations bound to one bucket.

    The template is stateless apart from its configuration and may be
    shared. Every call asks the db factory for a fresh bucket handle.

    Args:
        db_factory: Supplies the database and bucket handles
        converter: Converts typed metadata objects to documents
        bucket: Bucket name (None = default ``fs`` bucket)
        chunk_size_bytes: Upload chunk size (None = driver default)
        query_mapper: Maps Query objects to native filters
    """

    def __init__(
        self,
        db_factory: MongoDbFactory,
        converter: MetadataConverter,
        bucket: str | None = None,
        chunk_size_bytes: int | None = None,
        query_mapper: QueryMapper | None = None,
    ):
        if db_factory is None:
            raise ValueError("db_factory must not be None")
        if converter is None:
            raise ValueError("converter must not be None")

        self.db_factory = db_factory
        self.converter = converter
        self.bucket = bucket
        self.chunk_size_bytes = chunk_size_bytes
        self.query_mapper = query_mapper or QueryMapper()

    def store(
        self,
        content: BinaryIO | bytes,
        filename: str | None = None,
        content_type: str | None = None,
        metadata: Any = None,
    ) -> ObjectId:
        if content is None:
            raise ValueError("content must not be None")

        document: dict[str, Any] = {}
        if content_type and content_type.strip():
            document[CONTENT_TYPE_FIELD] = content_type

        if metadata is not None:
            if isinstance(metadata, Mapping):
                document.update(metadata)
            else:
                document.update(self.converter.write(metadata))

        options: dict[str, Any] = {"metadata": document}
        if self.chunk_size_bytes:
            options["chunk_size_bytes"] = self.chunk_size_bytes

        # The driver requires a str filename
        if filename is None:
            filename = ""

        file_id = self._get_gridfs().upload_from_stream(
            filename, content, **options)
        logger.debug(f"Stored '{filename}' as {file_id}")
        return file_id

    def find(self, query: Query | None = None):
        if query is None:
            return self._get_gridfs().find({})

        criteria = self.query_mapper.get_mapped_object(query.get_query_object())
        sort = self.query_mapper.get_mapped_sort(query.get_sort_object())
        logger.debug(f"Finding files with filter {criteria} sort {sort}")

        cursor = self._get_gridfs().find(criteria)
        if sort:
            cursor = cursor.sort(sort)
        if query.skip:
            cursor = cursor.skip(query.skip)
        if query.limit:
            cursor = cursor.limit(query.limit)
        return cursor

    def find_one(self, query: Query | None = None):
        cursor = self.find(query)
        try:
            return next(cursor, None)
        finally:
            cursor.close()

    def delete(self, query: Query | None) -> int:
        gridfs = self._get_gridfs()
        deleted = 0
        for file in self.find(query):
            gridfs.delete(file._id)
            deleted += 1
        logger.info(f"Deleted {deleted} GridFS file(s)")
        return deleted

    def get_resource(self, location: str) -> GridFsResource | None:
        file = self.find_one(Query(where_filename().is_(location)))
        if file is None:
            logger.debug(f"No GridFS file named '{location}'")
            return None
        return GridFsResource(
            file, self._get_gridfs().open_download_stream_by_name(location))

    def get_resources(self, location_pattern: str) -> list[GridFsResource]:
        if not location_pattern or not location_pattern.strip():
            return []

        path = AntPath(location_pattern)
        if not path.is_pattern():
            resource = self.get_resource(location_pattern)
            return [resource] if resource is not None else []

        regex = path.to_regex()
        logger.debug(f"Resolving '{location_pattern}' as {regex}")

        gridfs = self._get_gridfs()
        resources: list[GridFsResource] = []
        try:
            for file in self.find(Query(where_filename().regex(regex))):
                resources.append(GridFsResource(
                    file, gridfs.open_download_stream_by_name(file.filename)))
        except Exception:
            for resource in resources:
                resource.close()
            raise
        return resources

    def _get_gridfs(self) -> GridFSBucket:
        return self.db_factory.get_bucket(self.bucket)
