"""File-like wrappers that observe bytes as they are read."""

import contextlib
import io
from abc import ABCMeta, abstractmethod

from ..exceptions import StreamCancelledError
from .stream import DigestStream


class StreamWrapper(io.BufferedIOBase):
    def __init__(self, source: io.BufferedIOBase):
        self.source = source

    def readable(self) -> bool:
        return True

    def close(self):
        if not self.closed:
            with contextlib.suppress(Exception):
                self.source.close()
            super().close()


class ObserverStream(StreamWrapper, metaclass=ABCMeta):
    @abstractmethod
    def observe(self, chunk: bytes) -> None:
        raise NotImplementedError

    def read(self, size: int | None = -1) -> bytes:
        chunk = self.source.read(size)
        if chunk:
            self.observe(chunk)
        return chunk


class DigestingReader(ObserverStream):
    """
    Hashes everything read through it into a :class:`DigestStream`.

    Reaching EOF ends the digest stream, so ``shutil.copyfileobj(reader, dest)``
    copies and hashes in one pass. A read error fails the stream and is
    re-raised; closing the reader before EOF cancels it.
    """

    def __init__(self, source: io.BufferedIOBase, stream: DigestStream):
        super().__init__(source)
        self.stream = stream

    def observe(self, chunk: bytes) -> None:
        self.stream.write(chunk)

    def read(self, size: int | None = -1) -> bytes:
        try:
            chunk = super().read(size)
        except Exception as e:
            self.stream.fail(e)
            raise

        if not chunk and size != 0 and not self.stream.done:
            self.stream.end()
        return chunk

    def close(self):
        if not self.closed and not self.stream.done:
            self.stream.fail(StreamCancelledError("Reader closed before end-of-stream", self.stream.name))
        super().close()
