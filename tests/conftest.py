"""
PyGridFS test configuration.

Provides an in-memory stand-in for a GridFS bucket and the db factory that
hands it out, so template, resource and CLI tests run without MongoDB.
Also resets the configuration and logging singletons around each test.
"""

from __future__ import annotations

import io
import os
import re
from datetime import datetime, timezone
from typing import Any

import pytest
from bson import ObjectId
from bson.regex import Regex
from gridfs.errors import NoFile

from pygridfs.config.settings import ConfigManager
from pygridfs.core.gridfs import GridFsTemplate, MetadataConverter
from pygridfs.logging.setup import reset_logging


class FakeGridOut:
    """File record as returned by a bucket lookup."""

    def __init__(self, record: dict[str, Any]):
        self._id = record["_id"]
        self.filename = record["filename"]
        self.length = record["length"]
        self.upload_date = record["uploadDate"]
        self.metadata = record["metadata"]
        self.chunk_size = record["chunkSize"]


class FakeDownloadStream(io.BytesIO):
    """Download stream carrying the file record attributes like GridOut."""

    def __init__(self, record: dict[str, Any]):
        super().__init__(record["data"])
        self._id = record["_id"]
        self.filename = record["filename"]
        self.length = record["length"]


class FakeCursor:
    """Single-pass cursor supporting sort, skip and limit."""

    def __init__(self, records: list[dict[str, Any]]):
        self._records = list(records)
        self._iterator = None
        self.closed = False
        self.sort_spec = None

    def sort(self, spec):
        self.sort_spec = spec
        for key, direction in reversed(spec):
            self._records.sort(
                key=lambda r: _get_path(r, key), reverse=direction < 0)
        return self

    def skip(self, count):
        self._records = self._records[count:]
        return self

    def limit(self, count):
        if count:
            self._records = self._records[:count]
        return self

    def __iter__(self):
        return self

    def __next__(self):
        if self._iterator is None:
            self._iterator = iter(self._records)
        return FakeGridOut(next(self._iterator))

    def close(self):
        self.closed = True


def _get_path(document: dict[str, Any], path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def _regex_matches(pattern, value, options: str = "") -> bool:
    if not isinstance(value, str):
        return False
    if isinstance(pattern, Regex):
        pattern = pattern.try_compile()
    if isinstance(pattern, re.Pattern):
        return pattern.search(value) is not None
    flags = re.IGNORECASE if "i" in options else 0
    return re.search(pattern, value, flags) is not None


def _condition_matches(value: Any, condition: Any) -> bool:
    if isinstance(condition, (re.Pattern, Regex)):
        return _regex_matches(condition, value)
    if isinstance(condition, dict) and condition and all(
            k.startswith("$") for k in condition):
        for op, operand in condition.items():
            if op == "$regex":
                if not _regex_matches(operand, value, condition.get("$options", "")):
                    return False
            elif op == "$options":
                continue
            elif op == "$in":
                if value not in operand:
                    return False
            elif op == "$ne":
                if value == operand:
                    return False
            elif op == "$exists":
                if (value is not None) != operand:
                    return False
            else:
                raise NotImplementedError(op)
        return True
    return value == condition


def _matches(record: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(record, sub) for sub in condition):
                return False
            continue
        if key == "$and":
            if not all(_matches(record, sub) for sub in condition):
                return False
            continue
        if not _condition_matches(_get_path(record, key), condition):
            return False
    return True


class FakeBucket:
    """In-memory GridFSBucket covering the calls GridFsTemplate makes."""

    def __init__(self, name: str = "fs"):
        self.name = name
        self.records: list[dict[str, Any]] = []
        self.uploads: list[dict[str, Any]] = []
        self.find_filters: list[dict[str, Any]] = []
        self.cursors: list[FakeCursor] = []
        self.opened: list[FakeDownloadStream] = []
        self.deleted: list[ObjectId] = []
        self.fail_on_delete: int | None = None

    def upload_from_stream(self, filename, source, chunk_size_bytes=None, metadata=None):
        # Same check as pymongo's validate_string
        if not isinstance(filename, str):
            raise TypeError(
                "Wrong type for filename, value must be an instance of str, "
                f"not {type(filename)}")
        data =source if isinstance(source, bytes) else source.read()
        file_id = ObjectId()
        self.uploads.append({
            "filename": filename,
            "chunk_size_bytes": chunk_size_bytes,
            "metadata": metadata,
        })
        self.records.append({
            "_id": file_id,
            "filename": filename,
            "length": len(data),
            "chunkSize": chunk_size_bytes or 255 * 1024,
            "uploadDate": datetime.now(timezone.utc),
            "metadata": metadata,
            "data": data,
        })
        return file_id

    def find(self, filter=None):
        filter = filter or {}
        self.find_filters.append(filter)
        cursor = FakeCursor([r for r in self.records if _matches(r, filter)])
        self.cursors.append(cursor)
        return cursor

    def open_download_stream_by_name(self, filename, revision=-1):
        matches = [r for r in self.records if r["filename"] == filename]
        if not matches:
            raise NoFile(f"no version {revision} for filename {filename!r}")
        stream = FakeDownloadStream(matches[revision])
        self.opened.append(stream)
        return stream

    def delete(self, file_id):
        if self.fail_on_delete is not None and len(self.deleted) >= self.fail_on_delete:
            raise NoFile(f"simulated failure deleting {file_id}")
        for index, record in enumerate(self.records):
            if record["_id"] == file_id:
                del self.records[index]
                self.deleted.append(file_id)
                return
        raise NoFile(f"no file could be deleted because none matched {file_id}")

    def put(self, filename: str, data: bytes = b"", metadata=None) -> ObjectId:
        return self.upload_from_stream(filename, io.BytesIO(data), metadata=metadata)

    def filenames(self) -> list[str]:
        return [r["filename"] for r in self.records]


class FakeDbFactory:
    """Db factory handing out in-memory buckets by name."""

    def __init__(self, database_name: str = "testdb"):
        self.database_name = database_name
        self.buckets: dict[str, FakeBucket] = {}
        self.requested: list[str | None] = []

    def get_bucket(self, bucket_name=None):
        self.requested.append(bucket_name)
        name = bucket_name or "fs"
        if name not in self.buckets:
            self.buckets[name] = FakeBucket(name)
        return self.buckets[name]


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Isolate config and logging state, and clear PYGRIDFS_* variables."""
    for var in list(os.environ):
        if var.startswith("PYGRIDFS_"):
            monkeypatch.delenv(var)
    ConfigManager.reset_instance()
    reset_logging()
    yield
    ConfigManager.reset_instance()
    reset_logging()


@pytest.fixture
def db_factory():
    return FakeDbFactory()


@pytest.fixture
def bucket(db_factory):
    """The default bucket handed out by ``db_factory``."""
    return db_factory.get_bucket(None)


@pytest.fixture
def template(db_factory):
    return GridFsTemplate(db_factory, MetadataConverter())


@pytest.fixture
def populated_bucket(bucket):
    """Bucket holding a small docs tree."""
    bucket.put("docs/a.txt", b"alpha")
    bucket.put("docs/b.txt", b"bravo")
    bucket.put("docs/readme.md", b"# readme")
    bucket.put("docs/sub/c.txt", b"charlie")
    bucket.put("readme.txt", b"top level", metadata={"type": "text/plain"})
    return bucket
