"""Abstract interfaces implemented by GridFsTemplate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Iterator

from bson import ObjectId

from .query import Query
from .resource import GridFsResource


class GridFsOperations(ABC):
    """Store, find and delete operations on a GridFS bucket."""

    @abstractmethod
    def store(
        self,
        content: BinaryIO | bytes,
        filename: str | None = None,
        content_type: str | None = None,
        metadata: Any = None,
    ) -> ObjectId:
        """
        Store content in the bucket.

        Args:
            content: Readable binary stream (or bytes)
            filename: Name recorded for the file (None is stored as "")
            content_type: Recorded as ``metadata.type`` when not blank
            metadata: Mapping or typed object merged into the metadata
                document after ``type``

        Returns:
            Identifier of the new file

        Raises:
            ValueError: If content is None
        """

    @abstractmethod
    def find(self, query: Query | None = None) -> Iterator[Any]:
        """
        Return a single-pass cursor over matching file records.

        Args:
            query: Filter and sort; None lists every file
        """

    @abstractmethod
    def find_one(self, query: Query | None = None) -> Any | None:
        """Return the first matching file record, or None."""

    @abstractmethod
    def delete(self, query: Query | None) -> int:
        """
        Delete every file matching the query, one by one.

        Returns:
            Number of deleted files
        """


class ResourcePatternResolver(ABC):
    """Resolve stored files as resources by name or location pattern."""

    @abstractmethod
    def get_resource(self, location: str) -> GridFsResource | None:
        """Resource for the file named exactly ``location``, or None."""

    @abstractmethod
    def get_resources(self, location_pattern: str) -> list[GridFsResource]:
        """Resources for every file whose name matches the glob pattern."""
