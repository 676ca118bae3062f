"""Streaming cryptographic digests over chunked byte sources."""

from .encoding import DigestEncoding, encode_digest
from .engine import DigestEngine, create_engine, register_algorithm, supported_algorithms
from .exceptions import (
    DigestError,
    EncodingError,
    EngineFinalizedError,
    PipelineError,
    StreamCancelledError,
    UnsupportedAlgorithmError,
    UpstreamError,
)
from .pipeline import DigestStream, StreamState

__all__ = [
    "DigestEncoding",
    "DigestEngine",
    "DigestError",
    "DigestStream",
    "EncodingError",
    "EngineFinalizedError",
    "PipelineError",
    "StreamCancelledError",
    "StreamState",
    "UnsupportedAlgorithmError",
    "UpstreamError",
    "create_engine",
    "encode_digest",
    "register_algorithm",
    "supported_algorithms",
]
