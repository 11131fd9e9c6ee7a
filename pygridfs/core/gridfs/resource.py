"""GridFS resource handle: a file record paired with an open download stream."""

from __future__ import annotations

from datetime import datetime
from typing import Any, BinaryIO

from .errors import StreamConsumedError


CONTENT_TYPE_FIELD = "type"


class GridFsResource:
    """
    Read-only handle for one stored GridFS file.

    The handle owns ``stream`` and must be closed after use, either
    explicitly or by using it as a context manager:

        with template.get_resource("docs/readme.txt") as resource:
            data = resource.read()

    Args:
        file: File record (``gridfs.GridOut``) returned by a bucket lookup
        stream: Open download stream (``gridfs.GridOut``) for the same file
    """

    def __init__(self, file: Any, stream: BinaryIO):
        if file is None:
            raise ValueError("GridFS file record must not be None")
        if stream is None:
            raise ValueError("Download stream must not be None")
        self.file = file
        self._stream = stream
        self._stream_taken = False

    def __repr__(self) -> str:
        return f"GridFsResource({self.description})"

    def __enter__(self) -> GridFsResource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def id(self) -> Any:
        return self.file._id

    @property
    def filename(self) -> str | None:
        return self.file.filename

    @property
    def content_length(self) -> int:
        return self.file.length

    @property
    def last_modified(self) -> datetime | None:
        return self.file.upload_date

    @property
    def metadata(self) -> dict[str, Any]:
        return dict(self.file.metadata or {})

    @property
    def content_type(self) -> str | None:
        """Content type stored under ``metadata.type`` at upload."""
        return (self.file.metadata or {}).get(CONTENT_TYPE_FIELD)

    @property
    def description(self) -> str:
        return f"GridFs resource [{self.filename}]"

    def exists(self) -> bool:
        return True

    def get_input_stream(self) -> BinaryIO:
        """
        Hand out the download stream. It can be taken only once.

        Raises:
            StreamConsumedError: If the stream was already taken or read
        """
        if self._stream_taken:
            raise StreamConsumedError(
                f"{self.description}: input stream already consumed")
        self._stream_taken = True
        return self._stream

    def read(self, size: int = -1) -> bytes:
        """Read from the download stream. The stream can no longer be taken."""
        self._stream_taken = True
        return self._stream.read(size)

    def close(self) -> None:
        self._stream.close()
