"""Byte-chunk sources for the digest pipeline."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterable, Iterator
from os import PathLike
from pathlib import Path
from typing import BinaryIO

from ..exceptions import PipelineError
from .base import PipelineContext, StreamSource

log = logging.getLogger(__name__)


class ReaderSource(StreamSource):
    """Streaming source that reads from an open binary file object."""

    def __init__(self, reader: BinaryIO, name: str | None = None, close_reader: bool = False):
        """
        :param reader: Binary file-like object with a ``read(size)`` method
        :param name: Stage name for logging
        :param close_reader: Close ``reader`` when the source is closed
        """
        super().__init__(name or "ReaderSource")
        self._reader: BinaryIO | None = reader
        self._close_reader = close_reader
        self._bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        """
        Read the next chunk.

        :param size: Number of bytes to read (-1 for all)
        :returns: Bytes read, empty when exhausted
        """
        if self._reader is None:
            return b""

        data = self._reader.read() if size < 0 else self._reader.read(size)
        if data:
            self._bytes_read += len(data)
        return data

    def close(self) -> None:
        if self._reader is not None and self._close_reader:
            with contextlib.suppress(Exception):
                self._reader.close()
        self._reader = None
        super().close()

    @property
    def bytes_read(self) -> int:
        """Return total bytes read."""
        return self._bytes_read


class FileSource(ReaderSource):
    """Streaming source that reads a local file."""

    def __init__(self, path: str | PathLike, name: str | None = None):
        self._path = Path(path)
        super().__init__(None, name=name or "FileSource", close_reader=True)  # type: ignore[arg-type]
        self._content_length: int | None = None

    def initialize(self, context: PipelineContext) -> None:
        """Open the file for streaming."""
        super().initialize(context)
        try:
            self._content_length = self._path.stat().st_size
            self._reader = open(self._path, "rb")  # noqa: SIM115
        except OSError as e:
            raise PipelineError(f"Failed to open {self._path}: {e}", self.name, e) from e

        self._log.debug(f"Opened {self._path} ({self._content_length} bytes)")

    def read(self, size: int = -1) -> bytes:
        if self._reader is None and not self._initialized:
            raise RuntimeError(f"Source {self.name} read before initialize()")
        return super().read(size)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def content_length(self) -> int | None:
        return self._content_length


class IterableSource(StreamSource):
    """
    Streaming source that re-chunks an iterable of byte buffers.

    Exceptions raised by the iterable propagate from ``read``, which makes it
    useful for wrapping generators that fail part-way through.
    """

    def __init__(self, chunks: Iterable[bytes], name: str | None = None):
        super().__init__(name or "IterableSource")
        self._chunks: Iterator[bytes] | None = iter(chunks)
        self._pending = bytearray()
        self._bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        if self._chunks is None:
            return b""

        read_all = size < 0
        while read_all or len(self._pending) < size:
            chunk = next(self._chunks, None)
            if chunk is None:
                break
            self._pending.extend(chunk)

        limit = len(self._pending) if read_all else min(len(self._pending), size)
        data = bytes(self._pending[:limit])
        del self._pending[:limit]
        self._bytes_read += len(data)
        return data

    def close(self) -> None:
        self._chunks = None
        self._pending.clear()
        super().close()

    @property
    def bytes_read(self) -> int:
        return self._bytes_read
