"""Streaming digest pipeline components."""

from .base import (
    PipelineContext,
    PipelineError,
    StreamObserver,
    StreamSink,
    StreamSource,
    StreamStage,
)
from .checksummers import Checksummer
from .sinks import BufferSink, FileSink
from .sources import FileSource, IterableSource, ReaderSource
from .stream import DigestStream, StreamState
from .streams import DigestingReader, ObserverStream, StreamWrapper

__all__ = [
    "BufferSink",
    "Checksummer",
    "DigestStream",
    "DigestingReader",
    "FileSink",
    "FileSource",
    "IterableSource",
    "ObserverStream",
    "PipelineContext",
    "PipelineError",
    "ReaderSource",
    "StreamObserver",
    "StreamSink",
    "StreamSource",
    "StreamStage",
    "StreamState",
    "StreamWrapper",
]
