"""Stream adapter that hashes an ordered chunk source and reports the digest to observers."""

from __future__ import annotations

import contextlib
import queue
import threading
from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING

from ..constants import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE, DEFAULT_QUEUE_SIZE, SINK_JOIN_TIMEOUT
from ..encoding import DigestEncoding, encode_digest
from ..exceptions import PipelineError, StreamCancelledError, UpstreamError
from .base import PipelineContext, StreamSink, StreamSource, StreamStage
from .checksummers import Checksummer
from .utils import abort_stage, create_worker_thread, drain_queue, join_worker

if TYPE_CHECKING:
    from ..models.config import DigestOptions

DigestCallback = Callable[[bytes | str], None]
ErrorCallback = Callable[[PipelineError], None]
ProgressCallback = Callable[[int], None]


class StreamState(StrEnum):
    IDLE = "idle"
    CONSUMING = "consuming"
    COMPLETED = "completed"
    FAILED = "failed"


class DigestStream(StreamStage):
    """
    Hashes a byte stream chunk by chunk and emits the encoded digest once.

    Data can be pushed (:meth:`write`, :meth:`end`, :meth:`fail`) or pulled
    from a :class:`StreamSource` (:meth:`consume`, :meth:`start`). With a
    ``sink`` every chunk is also passed through unchanged (duplex mode).

    State machine::

        idle -> consuming -> completed
                          -> failed

    ``completed`` and ``failed`` are terminal: later notifications are
    ignored and never produce a second digest. Each observer registered with
    :meth:`on_digest` or :meth:`on_error` is called exactly once; observers
    registered after completion are called immediately with the buffered
    outcome.
    """

    def __init__(  # noqa: PLR0913
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        encoding: str | DigestEncoding | None = None,
        sink: StreamSink | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        context: PipelineContext | None = None,
        name: str | None = None,
    ):
        """
        :param algorithm: Digest algorithm name, case-insensitive
        :param encoding: Output encoding (``raw``, ``hex`` or ``base64``), None for raw
        :param sink: Optional pass-through sink receiving every chunk
        :param chunk_size: Read size used when pulling from a source
        :param queue_size: Chunks buffered for the sink before the producer blocks
        :param context: Pipeline context to share with other stages
        :param name: Stage name for logging
        :raises UnsupportedAlgorithmError: If the algorithm is not registered
        :raises EncodingError: If the encoding is not recognized
        """
        self._encoding = DigestEncoding.parse(encoding)
        self._checksummer = Checksummer(algorithm)
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if queue_size <= 0:
            raise ValueError("queue_size must be positive")

        super().__init__(name or "DigestStream")
        self._sink = sink
        self._chunk_size = chunk_size
        self._queue_size = queue_size

        self._state = StreamState.IDLE
        self._lock = threading.Lock()
        self._terminating = False
        self._done = threading.Event()
        self._cancelled = threading.Event()
        self._consuming_source = False

        self._digest: bytes | str | None = None
        self._error: PipelineError | None = None
        self._digest_observers: list[DigestCallback] = []
        self._error_observers: list[ErrorCallback] = []

        self.initialize(context or PipelineContext())

    @classmethod
    def from_options(
        cls,
        options: DigestOptions,
        sink: StreamSink | None = None,
        context: PipelineContext | None = None,
        name: str | None = None,
    ) -> DigestStream:
        """Create a stream from validated options."""
        return cls(
            algorithm=options.algorithm,
            encoding=options.encoding,
            sink=sink,
            chunk_size=options.chunk_size,
            queue_size=options.queue_size,
            context=context,
            name=name,
        )

    def initialize(self, context: PipelineContext) -> None:
        """Wire the stream and its stages to ``context`` and start consuming."""
        super().initialize(context)
        self._checksummer.initialize(context)
        if self._sink is not None and not self._sink.initialized:
            self._sink.initialize(context)
        self._state = StreamState.CONSUMING
        self._log.debug(f"Consuming {self.algorithm} stream (encoding: {self._encoding})")

    # observers

    def on_digest(self, callback: DigestCallback) -> DigestCallback:
        """Register an observer for the encoded digest."""
        with self._lock:
            if self._state is StreamState.FAILED:
                return callback
            if self._state is not StreamState.COMPLETED:
                self._digest_observers.append(callback)
                return callback
        self._notify(callback, self._digest)
        return callback

    def on_error(self, callback: ErrorCallback) -> ErrorCallback:
        """Register an observer for a stream failure."""
        with self._lock:
            if self._state is StreamState.COMPLETED:
                return callback
            if self._state is not StreamState.FAILED:
                self._error_observers.append(callback)
                return callback
        self._notify(callback, self._error)
        return callback

    # push interface

    def write(self, chunk: bytes) -> int:
        """
        Hash a chunk and pass it through to the sink.

        :returns: Number of bytes accepted, 0 once the stream is terminal
        :raises PipelineError: If the sink fails; the stream is failed first
        """
        if self._state is not StreamState.CONSUMING or self._terminating:
            self._log.warning(f"Ignoring {len(chunk)} byte chunk, stream is {self._state}")
            return 0

        chunk = bytes(chunk)
        self._observe(chunk)
        if self._sink is not None:
            try:
                self.context.bytes_written += self._sink.write(chunk)
            except Exception as e:
                error = PipelineError(f"Sink write failed: {e}", self._sink.name, e)
                self.fail(error)
                raise error from e
        return len(chunk)

    def end(self) -> None:
        """Signal end-of-stream: finalize, encode and notify digest observers."""
        if not self._begin_termination("end-of-stream"):
            return

        raw = self._finalize_checksummer()
        if self._sink is not None:
            try:
                self._sink.finalize()
            except Exception as e:
                self._settle_failure(PipelineError(f"Sink finalize failed: {e}", self._sink.name, e))
                return

        self._log.debug(f"Stream completed after {self.bytes_processed} bytes")
        self._settle(StreamState.COMPLETED, digest=encode_digest(raw, self._encoding))

    def fail(self, error: BaseException) -> None:
        """
        Signal an upstream failure. The digest is never finalized.

        Errors that are not already a :class:`PipelineError` are wrapped in an
        :class:`UpstreamError`.
        """
        if not self._begin_termination("error"):
            return

        if not isinstance(error, PipelineError):
            error = UpstreamError(str(error) or type(error).__name__, cause=error)  # type: ignore[arg-type]
        self._settle_failure(error)

    def cancel(self, reason: str = "Stream cancelled") -> None:
        """
        Cancel the stream.

        A running :meth:`consume` stops before the next chunk; otherwise the
        stream fails immediately with :class:`StreamCancelledError`.
        """
        self._cancelled.set()
        if not self._consuming_source:
            self.fail(StreamCancelledError(reason, self.name))

    def finalize(self) -> None:
        """End the stream when used as a context manager."""
        self.end()

    def abort(self) -> None:
        """Cancel the stream when the managed block raised."""
        self.cancel("Stream aborted")

    # pull interface

    def consume(self, source: StreamSource, progress_callback: ProgressCallback | None = None) -> DigestStream:
        """
        Pull every chunk from ``source`` in order, then end the stream.

        Failures are not raised here; they are delivered to error observers
        and re-raised by :meth:`result`.

        :param source: Ordered chunk source
        :param progress_callback: Optional callback called with the size of each chunk
        :returns: This stream
        """
        if self._state is not StreamState.CONSUMING or self._terminating:
            self._log.warning(f"Ignoring source {source.name}, stream is {self._state}")
            return self

        self._consuming_source = True
        try:
            if not source.initialized:
                source.initialize(self.context)
            if self._sink is None:
                self._pull(source, lambda chunk: self._observe(chunk, progress_callback))
            else:
                self._pull_through_sink(source, progress_callback)
        except PipelineError as e:
            abort_stage(source, self._log)
            self.fail(self._as_upstream_error(e, source))
            return self
        except Exception as e:
            abort_stage(source, self._log)
            self.fail(PipelineError(f"Unexpected error: {e}", self.name, e))
            return self
        finally:
            self._consuming_source = False

        source.finalize()
        self.end()
        return self

    def start(self, source: StreamSource, progress_callback: ProgressCallback | None = None) -> threading.Thread:
        """Run :meth:`consume` in a dedicated worker thread and return the thread."""
        return create_worker_thread(
            lambda: self.consume(source, progress_callback),
            name=f"{self.name}-{source.name}",
        )

    # results

    def result(self, timeout: float | None = None) -> bytes | str:
        """
        Wait for the stream to finish and return the encoded digest.

        :raises TimeoutError: If the stream did not finish within ``timeout`` seconds
        :raises PipelineError: If the stream failed
        """
        if not self._done.wait(timeout):
            raise TimeoutError(f"Stream {self.name} did not finish within {timeout}s")
        if self._error is not None:
            raise self._error
        return self._digest  # type: ignore[return-value]

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def digest(self) -> bytes | str | None:
        """Return the encoded digest, None unless completed."""
        return self._digest

    @property
    def error(self) -> PipelineError | None:
        return self._error

    @property
    def algorithm(self) -> str:
        return self._checksummer.algorithm

    @property
    def encoding(self) -> DigestEncoding:
        return self._encoding

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def sink(self) -> StreamSink | None:
        return self._sink

    @property
    def bytes_processed(self) -> int:
        """Return the number of bytes hashed so far."""
        return self._checksummer.bytes_processed

    # internals

    def _observe(self, chunk: bytes, progress_callback: ProgressCallback | None = None) -> None:
        self._checksummer.observe(chunk)
        self.context.bytes_read += len(chunk)
        if progress_callback is not None:
            progress_callback(len(chunk))

    def _pull(self, source: StreamSource, emit: Callable[[bytes], None]) -> None:
        while True:
            if self._cancelled.is_set() or self._terminating:
                raise StreamCancelledError("Stream cancelled before end-of-stream", source.name)

            try:
                chunk = source.read(self._chunk_size)
            except Exception as e:
                if source.closed:
                    raise StreamCancelledError("Source closed before end-of-stream", source.name, e) from e
                raise UpstreamError(f"Read failed: {e}", source.name, e) from e

            if source.closed:
                raise StreamCancelledError("Source closed before end-of-stream", source.name)
            if not chunk:
                return
            emit(chunk)

    def _pull_through_sink(self, source: StreamSource, progress_callback: ProgressCallback | None) -> None:
        """
        Pull from ``source`` while a worker thread writes to the sink.

        The bounded queue blocks the producer when the sink falls behind, so
        no more than ``queue_size`` chunks are held in memory.
        """
        sink = self._sink
        assert sink is not None

        # sentinel to signal end of stream
        sentinel = object()
        sink_queue: queue.Queue[bytes | object] = queue.Queue(maxsize=self._queue_size)
        sink_error: list[Exception] = []
        abort_event = threading.Event()

        def sink_worker() -> None:
            try:
                while True:
                    item = sink_queue.get()
                    if item is sentinel or abort_event.is_set():
                        break
                    self.context.bytes_written += sink.write(item)  # type: ignore[arg-type]
            except Exception as e:
                sink_error.append(e)
                abort_event.set()
                self._log.error(f"Sink worker error: {e}")

        def put(item: bytes | object) -> None:
            while True:
                if abort_event.is_set():
                    raise PipelineError(f"Sink write failed: {sink_error[0]}", sink.name, sink_error[0])
                if self._cancelled.is_set():
                    raise StreamCancelledError("Stream cancelled before end-of-stream", source.name)
                try:
                    sink_queue.put(item, timeout=0.1)
                    return
                except queue.Full:
                    continue

        def emit(chunk: bytes) -> None:
            self._observe(chunk, progress_callback)
            put(chunk)

        sink_thread = create_worker_thread(sink_worker, name=f"{self.name}-{sink.name}")
        try:
            self._pull(source, emit)
            put(sentinel)
            # wait for the sink to drain, however slow, unless cancelled
            while sink_thread.is_alive():
                if self._cancelled.is_set():
                    raise StreamCancelledError("Stream cancelled while the sink was draining", sink.name)
                sink_thread.join(timeout=0.1)
        except Exception:
            # stop the sink worker before failing the stream
            abort_event.set()
            drain_queue(sink_queue)
            with contextlib.suppress(queue.Full):
                sink_queue.put_nowait(sentinel)
            join_worker(sink_thread, timeout=SINK_JOIN_TIMEOUT, logger=self._log)
            raise

        if sink_error:
            raise PipelineError(f"Sink write failed: {sink_error[0]}", sink.name, sink_error[0])

    def _as_upstream_error(self, error: PipelineError, source: StreamSource) -> PipelineError:
        """Classify stage errors raised by the source as upstream errors."""
        if isinstance(error, UpstreamError) or error.stage != source.name:
            return error
        return UpstreamError(str(error), cause=error.cause or error)

    def _finalize_checksummer(self) -> bytes:
        self._checksummer.finalize()
        return self._checksummer.digest()

    def _begin_termination(self, event: str) -> bool:
        with self._lock:
            if self._state is not StreamState.CONSUMING or self._terminating:
                self._log.warning(f"Ignoring {event}, stream is {self._state}")
                return False
            self._terminating = True
            return True

    def _settle_failure(self, error: PipelineError) -> None:
        abort_stage(self._sink, self._log)
        self.context.add_error(str(error))
        self._log.error(f"Stream failed: {error}")
        self._settle(StreamState.FAILED, error=error)

    def _settle(
        self,
        state: StreamState,
        digest: bytes | str | None = None,
        error: PipelineError | None = None,
    ) -> None:
        with self._lock:
            self._state = state
            self._digest = digest
            self._error = error
            digest_observers, self._digest_observers = self._digest_observers, []
            error_observers, self._error_observers = self._error_observers, []
            self._done.set()

        if state is StreamState.COMPLETED:
            for callback in digest_observers:
                self._notify(callback, digest)
        else:
            for callback in error_observers:
                self._notify(callback, error)

    def _notify(self, callback: Callable, value: object) -> None:
        try:
            callback(value)
        except Exception:
            self._log.exception(f"Observer {callback!r} raised")
