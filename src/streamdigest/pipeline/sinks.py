"""Pass-through sinks receiving the bytes of a stream while it is hashed."""

from __future__ import annotations

import contextlib
import io
from os import PathLike
from pathlib import Path
from typing import BinaryIO

from ..exceptions import PipelineError
from .base import PipelineContext, StreamSink


class BufferSink(StreamSink):
    """Collects all written bytes in memory."""

    def __init__(self, name: str | None = None):
        super().__init__(name or "BufferSink")
        self._buffer = io.BytesIO()
        self._aborted = False

    def write(self, data: bytes) -> int:
        return self._buffer.write(data)

    def abort(self) -> None:
        self._aborted = True

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return self._buffer.getvalue()

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def bytes_written(self) -> int:
        return self._buffer.tell()


class FileSink(StreamSink):
    """
    Writes the stream to a local file.

    The file is written to a temporary ``.part`` path and moved into place on
    finalize; on abort the partial file is removed.
    """

    def __init__(self, path: str | PathLike, name: str | None = None):
        super().__init__(name or "FileSink")
        self._path = Path(path)
        self._part_path = self._path.with_name(self._path.name + ".part")
        self._fd: BinaryIO | None = None
        self._bytes_written = 0

    def initialize(self, context: PipelineContext) -> None:
        """Open the temporary output file."""
        super().initialize(context)
        try:
            self._fd = open(self._part_path, "wb")  # noqa: SIM115
        except OSError as e:
            raise PipelineError(f"Failed to open {self._part_path} for writing: {e}", self.name, e) from e

    def write(self, data: bytes) -> int:
        if self._fd is None:
            raise PipelineError("Sink is not open", self.name)
        written = self._fd.write(data)
        self._bytes_written += written
        return written

    def finalize(self) -> None:
        """Flush, close and move the file into place."""
        if self._fd is None:
            return
        self._fd.close()
        self._fd = None
        self._part_path.replace(self._path)
        self._log.debug(f"Wrote {self._bytes_written} bytes to {self._path}")

    def abort(self) -> None:
        """Close and remove the partial file."""
        if self._fd is not None:
            with contextlib.suppress(Exception):
                self._fd.close()
            self._fd = None
        self._part_path.unlink(missing_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def bytes_written(self) -> int:
        return self._bytes_written
