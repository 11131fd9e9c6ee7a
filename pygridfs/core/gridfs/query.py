"""
Query descriptors for locating GridFS files.

A Query bundles a criteria document, a sort order and optional paging. It is
expressed in field names and plain Python values; QueryMapper turns it into
the native MongoDB filter before execution.

Example:
    Query(where_filename().regex(r"^docs/")).sort_by("uploadDate", DESCENDING)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from pymongo import ASCENDING, DESCENDING


class Criteria:
    """A condition on a single document field."""

    def __init__(self, key: str):
        if not key:
            raise ValueError("Criteria key must not be empty")
        self.key = key
        self._value: Any = None
        self._operators: dict[str, Any] = {}
        self._has_value = False

    def __repr__(self) -> str:
        return f"Criteria({self.to_document()!r})"

    def is_(self, value: Any) -> Criteria:
        """Field equals ``value``."""
        if self._operators:
            raise ValueError(
                f"Cannot combine equality with operators on '{self.key}'")
        self._value = value
        self._has_value = True
        return self

    def regex(self, pattern: str | re.Pattern, options: str = "") -> Criteria:
        """
        Field matches the regular expression ``pattern``.

        A compiled pattern carries its own flags, so ``options`` must be
        empty for it.
        """
        if isinstance(pattern, re.Pattern):
            if options:
                raise ValueError(
                    "options cannot be combined with a compiled pattern")
            return self._operator("$regex", pattern)
        self._operator("$regex", pattern)
        if options:
            self._operators["$options"] = options
        return self

    def in_(self, values: Iterable[Any]) -> Criteria:
        return self._operator("$in", list(values))

    def ne(self, value: Any) -> Criteria:
        return self._operator("$ne", value)

    def exists(self, flag: bool = True) -> Criteria:
        return self._operator("$exists", flag)

    def _operator(self, name: str, value: Any) -> Criteria:
        if self._has_value:
            raise ValueError(
                f"Cannot combine operators with equality on '{self.key}'")
        self._operators[name] = value
        return self

    def to_document(self) -> dict[str, Any]:
        if self._has_value:
            return {self.key: self._value}
        return {self.key: dict(self._operators)}


def where(key: str) -> Criteria:
    return Criteria(key)


def where_filename() -> Criteria:
    """Criteria on the stored filename."""
    return Criteria("filename")


def where_content_type() -> Criteria:
    """Criteria on the content type recorded in the metadata document."""
    return Criteria("metadata.type")


def where_metadata(key: str | None = None) -> Criteria:
    """Criteria on the metadata document, or on one of its keys."""
    return Criteria(f"metadata.{key}" if key else "metadata")


class Query:
    """
    Filter, sort and paging for a GridFS lookup.

    Args:
        *criteria: Criteria objects or raw filter mappings, combined with AND
            semantics. Repeating a key raises ValueError.
    """

    def __init__(self, *criteria: Criteria | Mapping[str, Any]):
        self._criteria: dict[str, Any] = {}
        self._sort: list[tuple[str, int]] = []
        self.skip: int = 0
        self.limit: int = 0
        for item in criteria:
            self.add_criteria(item)

    def __repr__(self) -> str:
        return (f"Query(criteria={self._criteria!r}, sort={self._sort!r}, "
                f"skip={self.skip}, limit={self.limit})")

    @classmethod
    def from_document(
            cls,
            criteria: Mapping[str, Any] | None = None,
            sort: Mapping[str, int] | Iterable[tuple[str, int]] | None = None) -> Query:
        """Build a query from a raw filter and sort specification."""
        query = cls(criteria) if criteria else cls()
        if sort:
            items = sort.items() if isinstance(sort, Mapping) else sort
            for key, direction in items:
                query.sort_by(key, direction)
        return query

    def add_criteria(self, criteria: Criteria | Mapping[str, Any]) -> Query:
        document = criteria.to_document() if isinstance(
            criteria, Criteria) else dict(criteria)
        for key, value in document.items():
            if key in self._criteria:
                raise ValueError(
                    f"Query already contains criteria for '{key}'")
            self._criteria[key] = value
        return self

    def sort_by(self, key: str, direction: int = ASCENDING) -> Query:
        if direction not in (ASCENDING, DESCENDING):
            raise ValueError(
                f"Sort direction must be {ASCENDING} or {DESCENDING}, got {direction!r}")
        self._sort.append((key, direction))
        return self

    def with_skip(self, skip: int) -> Query:
        if skip < 0:
            raise ValueError("skip must not be negative")
        self.skip = skip
        return self

    def with_limit(self, limit: int) -> Query:
        if limit < 0:
            raise ValueError("limit must not be negative")
        self.limit = limit
        return self

    def get_query_object(self) -> dict[str, Any]:
        return dict(self._criteria)

    def get_sort_object(self) -> dict[str, int]:
        return dict(self._sort)


def query(*criteria: Criteria | Mapping[str, Any]) -> Query:
    return Query(*criteria)
