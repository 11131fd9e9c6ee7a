"""
Conversion of typed metadata objects into GridFS metadata documents.

Callers may pass either a ready-made mapping or a typed object (pydantic
model, dataclass, object exposing ``to_dict()``, or a plain object with
public attributes). MetadataConverter turns the latter into a plain dict
with BSON-friendly values.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import re
import uuid
from collections.abc import Mapping
from pathlib import PurePath
from typing import Any

from bson import Binary, Decimal128, ObjectId
from bson.regex import Regex
from pydantic import BaseModel


_PASSTHROUGH_TYPES = (
    str, int, float, bool, bytes, type(None),
    datetime.datetime, ObjectId, Binary, Decimal128, Regex, re.Pattern,
)


class MetadataConverter:
    """
    Write typed objects as metadata documents.

    Args:
        by_alias: Use pydantic field aliases as document keys
        exclude_none: Drop keys whose value is None, at every nesting level
    """

    def __init__(self, by_alias: bool = True, exclude_none: bool = True):
        self.by_alias = by_alias
        self.exclude_none = exclude_none

    def write(self, source: Any) -> dict[str, Any]:
        """
        Convert ``source`` into a metadata document.

        Args:
            source: Mapping or typed object

        Returns:
            Plain dict with string keys

        Raises:
            TypeError: If the object (or one of its values) cannot be
                represented as a document
        """
        return self._to_document(source)

    def _to_document(self, source: Any) -> dict[str, Any]:
        if isinstance(source, Mapping):
            raw = source
        elif isinstance(source, BaseModel):
            raw = source.model_dump(by_alias=self.by_alias)
        elif dataclasses.is_dataclass(source) and not isinstance(source, type):
            raw = {f.name: getattr(source, f.name)
                   for f in dataclasses.fields(source)}
        elif callable(getattr(source, "to_dict", None)):
            raw = source.to_dict()
        elif hasattr(source, "__dict__") and not isinstance(source, type):
            raw = {k: v for k, v in vars(source).items()
                   if not k.startswith("_")}
        else:
            raise TypeError(
                f"Cannot convert {type(source).__name__} to a metadata document")

        return {str(k): self._convert_value(v) for k, v in raw.items()
                if not (self.exclude_none and v is None)}

    def _convert_value(self, value: Any) -> Any:
        if isinstance(value, enum.Enum):
            return self._convert_value(value.value)
        if isinstance(value, _PASSTHROUGH_TYPES):
            return value
        if isinstance(value, datetime.date):
            return datetime.datetime.combine(value, datetime.time())
        if isinstance(value, decimal.Decimal):
            return Decimal128(value)
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, PurePath):
            return str(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self._convert_value(item) for item in value]
        return self._to_document(value)
