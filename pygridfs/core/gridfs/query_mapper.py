"""
Mapping of generic query documents to native MongoDB syntax.

QueryMapper is the translation step between a Query and the filter the
driver executes:

- ``id`` keys become ``_id``
- 24-character hex strings under ``_id`` become ObjectId
- compiled ``re.Pattern`` values become ``bson.regex.Regex``
- operator documents and lists are mapped recursively
- sort documents become ``[(field, direction)]`` pairs
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from bson import ObjectId
from bson.regex import Regex


_ID_FIELD = "_id"
_ID_ALIASES = frozenset({"id", "_id"})
_LOGICAL_OPERATORS = frozenset({"$and", "$or", "$nor"})


class QueryMapper:
    """Translate query and sort documents into driver syntax."""

    def get_mapped_object(
            self, document: Mapping[str, Any] | None) -> dict[str, Any]:
        """
        Map a criteria document.

        Args:
            document: Field/value criteria, or None

        Returns:
            Native filter document (empty for None)
        """
        if not document:
            return {}
        mapped: dict[str, Any] = {}
        for key, value in document.items():
            if key in _LOGICAL_OPERATORS:
                mapped[key] = [self.get_mapped_object(item) for item in value]
                continue
            field = self._map_field_name(key)
            mapped[field] = self._map_value(field, value)
        return mapped

    def get_mapped_sort(
            self, sort: Mapping[str, int] | None) -> list[tuple[str, int]]:
        """Map a sort document into pymongo's list of (field, direction)."""
        if not sort:
            return []
        return [(self._map_field_name(key), int(direction))
                for key, direction in sort.items()]

    @staticmethod
    def _map_field_name(key: str) -> str:
        return _ID_FIELD if key in _ID_ALIASES else key

    def _map_value(self, field: str, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {k: self._map_operand(field, k, v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._map_value(field, item) for item in value]
        return self._convert(field, value)

    def _map_operand(self, field: str, operator: str, value: Any) -> Any:
        if operator.startswith("$") and isinstance(value, (list, tuple)):
            return [self._convert(field, item) for item in value]
        if isinstance(value, Mapping):
            return self._map_value(field, value)
        return self._convert(field, value)

    @staticmethod
    def _convert(field: str, value: Any) -> Any:
        if isinstance(value, re.Pattern):
            return Regex.from_native(value)
        if field == _ID_FIELD and isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        return value
