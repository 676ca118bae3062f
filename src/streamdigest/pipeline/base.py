"""Base classes and interfaces for pipeline stages."""

from __future__ import annotations

import logging
from abc import abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from ..constants import DEFAULT_CHUNK_SIZE
from ..exceptions import PipelineError

log = logging.getLogger(__name__)

__all__ = [
    "PipelineContext",
    "PipelineError",
    "StreamObserver",
    "StreamSink",
    "StreamSource",
    "StreamStage",
]


@dataclass
class PipelineContext:
    """
    Shared context passed through the pipeline.

    Allows stages to share state and collect results.
    """

    # Accumulated errors from all stages
    errors: list[str] = field(default_factory=list)

    # Metrics and counters
    bytes_read: int = 0
    bytes_written: int = 0

    # Digests keyed by algorithm (populated by checksummer stages)
    checksums: dict[str, bytes] = field(default_factory=dict)

    # Arbitrary stage-specific data
    metadata: dict[str, Any] = field(default_factory=dict)

    def add_error(self, error: str) -> None:
        """Add an error to the context."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return len(self.errors) > 0


class StreamStage:
    """
    Base class for all pipeline stages.

    Each stage has:
    - A name for identification and logging
    - Access to the shared pipeline context
    - Lifecycle methods (initialize, finalize, abort)

    Supports context manager protocol for automatic cleanup.
    """

    def __init__(self, name: str | None = None):
        self._name = name or self.__class__.__name__
        self._context: PipelineContext | None = None
        self._log = log.getChild(self._name)
        self._initialized = False

    @property
    def name(self) -> str:
        """Return the stage name."""
        return self._name

    @property
    def initialized(self) -> bool:
        """Return whether the stage was initialized with a context."""
        return self._initialized

    @property
    def context(self) -> PipelineContext:
        """Return the pipeline context."""
        if self._context is None:
            raise RuntimeError(f"Stage {self._name} not initialized with context")
        return self._context

    def initialize(self, context: PipelineContext) -> None:
        """
        Initialize the stage with a pipeline context.

        Override to perform setup operations.
        """
        self._context = context
        self._initialized = True

    def finalize(self) -> None:
        """
        Finalize the stage.

        Called after all data has been processed.
        """
        pass

    def abort(self) -> None:
        """
        Abort the stage due to an error.

        Override to perform cleanup on failure.
        """
        pass

    def __enter__(self) -> StreamStage:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context manager, aborting on error or finalizing on success."""
        if exc_type is not None:
            self.abort()
        elif self._initialized:
            self.finalize()


class StreamSource(StreamStage):
    """
    A source that produces ordered chunks for the pipeline.

    Chunks are delivered in order with no gaps. ``read`` returns empty bytes
    once the source is exhausted; any I/O failure is raised from ``read``.
    """

    def __init__(self, name: str | None = None):
        super().__init__(name)
        self._closed = False

    @abstractmethod
    def read(self, size: int = -1) -> bytes:
        """
        Read data from the source.

        :param size: Number of bytes to read (-1 for all available)
        :returns: Bytes read, empty bytes when exhausted
        """
        pass

    def __iter__(self) -> Iterator[bytes]:
        return self.iter_chunks()

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Iterate over chunks of at most ``chunk_size`` bytes."""
        while chunk := self.read(chunk_size):
            yield chunk

    def close(self) -> None:
        """Release the underlying resource. Reading after close is a cancellation."""
        self._closed = True

    @property
    def closed(self) -> bool:
        """Return whether the source was closed."""
        return self._closed

    def finalize(self) -> None:
        self.close()

    def abort(self) -> None:
        self.close()

    @property
    def content_length(self) -> int | None:
        """Return content length if known, None otherwise."""
        return None


class StreamObserver(StreamStage):
    """
    A stage that observes data without modification.

    Examples: Checksummer, progress reporter

    Observers receive data and update their internal state,
    but never change the data passing through.
    """

    @abstractmethod
    def observe(self, data: bytes) -> None:
        """
        Observe a chunk of data.

        :param data: Bytes to observe (will not be modified)
        """
        pass

    def get_result(self) -> Any:
        """
        Get the observation result.

        Override to return accumulated results (e.g., checksum, count).
        """
        return None


class StreamSink(StreamStage):
    """
    A sink that consumes data from the pipeline.

    Examples: file writer, in-memory buffer
    """

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Write data to the sink.

        :param data: Bytes to write
        :returns: Number of bytes written
        """
        pass

    @property
    def bytes_written(self) -> int:
        """Return total bytes written."""
        return 0
