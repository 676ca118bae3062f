class DigestError(Exception):
    """Base exception for all digest pipeline errors."""


class UnsupportedAlgorithmError(DigestError, ValueError):
    """Raised when a digest algorithm name is not in the registry."""

    def __init__(self, algorithm: str):
        self.algorithm = algorithm
        super().__init__(f"Unsupported digest algorithm: {algorithm!r}")


class EncodingError(DigestError, ValueError):
    """Raised when a digest output encoding is not recognized."""

    def __init__(self, encoding: object):
        self.encoding = encoding
        super().__init__(f"Unsupported digest encoding: {encoding!r}")


class EngineFinalizedError(DigestError, RuntimeError):
    """Raised when a digest engine is updated or finalized after finalize()."""


class PipelineError(DigestError):
    """Base exception for pipeline stage errors."""

    def __init__(self, message: str, stage: str | None = None, cause: Exception | None = None):
        self.stage = stage
        self.cause = cause
        super().__init__(f"[{stage}] {message}" if stage else message)


class UpstreamError(PipelineError):
    """Raised when the upstream byte source fails before end-of-stream."""


class StreamCancelledError(UpstreamError):
    """Raised when the upstream source is closed or the stream is cancelled before end-of-stream."""
