"""Checksum computation pipeline stages."""

from __future__ import annotations

from ..engine import DigestEngine
from .base import StreamObserver


class Checksummer(StreamObserver):
    """
    Computes a digest of data passing through.

    Usage:
        checksummer = Checksummer("sha1")
        checksummer.initialize(context)
        checksummer.observe(data1)
        checksummer.observe(data2)
        checksummer.finalize()
        raw = checksummer.digest()
    """

    def __init__(self, algorithm: str, name: str | None = None):
        self._engine = DigestEngine(algorithm)
        super().__init__(name or f"{self._engine.algorithm.capitalize()}Checksummer")
        self._digest: bytes | None = None

    def observe(self, data: bytes) -> None:
        """Update the digest with observed data."""
        self._engine.update(data)

    def finalize(self) -> None:
        """Finish the digest and store it in the context."""
        self._digest = self._engine.finalize()
        self.context.checksums[self._engine.algorithm] = self._digest
        self._log.debug(f"{self._engine.algorithm} over {self._engine.bytes_processed} bytes: {self._digest.hex()}")

    def digest(self) -> bytes:
        """Return the raw digest. Only available after finalize()."""
        if self._digest is None:
            raise RuntimeError(f"Stage {self.name} has not been finalized")
        return self._digest

    @property
    def algorithm(self) -> str:
        return self._engine.algorithm

    @property
    def finalized(self) -> bool:
        return self._engine.finalized

    @property
    def bytes_processed(self) -> int:
        """Return the number of bytes processed."""
        return self._engine.bytes_processed

    def get_result(self) -> bytes | None:
        """Return the raw digest if finalized."""
        return self._digest
