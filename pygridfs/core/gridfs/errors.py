"""Errors raised by the GridFS adapter itself.

Driver errors (pymongo.errors.PyMongoError, gridfs.errors.NoFile) are not
wrapped and reach the caller unchanged.
"""

from __future__ import annotations


class GridFsError(Exception):
    """Base exception for adapter-level failures."""


class StreamConsumedError(GridFsError):
    """Raised when a resource's single-use input stream is requested twice."""
