"""Incremental digest engine and the algorithm registry backing it."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable
from typing import Any

from .exceptions import EngineFinalizedError, UnsupportedAlgorithmError

log = logging.getLogger(__name__)

HashFactory = Callable[[], Any]

_ALGORITHMS: dict[str, HashFactory] = {
    "md5": hashlib.md5,
    "sha1": hashlib.sha1,
    "sha224": hashlib.sha224,
    "sha256": hashlib.sha256,
    "sha384": hashlib.sha384,
    "sha512": hashlib.sha512,
}


def normalize_algorithm(algorithm: str) -> str:
    """
    Normalize an algorithm name and check that it is registered.

    :param algorithm: Case-insensitive algorithm name, e.g. ``SHA256``
    :returns: The registry key for the algorithm
    :raises UnsupportedAlgorithmError: If the name is not registered
    """
    if not isinstance(algorithm, str):
        raise UnsupportedAlgorithmError(str(algorithm))
    name = algorithm.strip().lower()
    if name not in _ALGORITHMS:
        raise UnsupportedAlgorithmError(algorithm)
    return name


def register_algorithm(name: str, factory: HashFactory) -> None:
    """
    Register an additional digest algorithm.

    The factory must return a fresh object exposing ``update``, ``digest``,
    ``digest_size`` and ``block_size`` like the objects from :mod:`hashlib`.

    :param name: Case-insensitive algorithm name
    :param factory: Zero-argument constructor of a hash object
    """
    key = name.strip().lower()
    if not key:
        raise ValueError("Algorithm name must not be empty")
    if key in _ALGORITHMS:
        log.warning(f"Overriding registered digest algorithm: {key}")
    _ALGORITHMS[key] = factory


def supported_algorithms() -> list[str]:
    """Return the names of all registered algorithms, sorted."""
    return sorted(_ALGORITHMS)


def digest_size(algorithm: str) -> int:
    """Return the fixed output width in bytes of an algorithm."""
    return _ALGORITHMS[normalize_algorithm(algorithm)]().digest_size


class DigestEngine:
    """
    Accumulates bytes for one digest computation.

    Usage:
        engine = DigestEngine("sha256")
        engine.update(chunk1)
        engine.update(chunk2)
        raw = engine.finalize()

    The result depends only on the algorithm and the concatenation of all
    updates, not on how the input was split. After :meth:`finalize` the engine
    is terminal and any further call raises :class:`EngineFinalizedError`.
    """

    def __init__(self, algorithm: str):
        self._algorithm = normalize_algorithm(algorithm)
        self._hasher = _ALGORITHMS[self._algorithm]()
        self._bytes_processed = 0
        self._finalized = False

    def update(self, data: bytes) -> None:
        """Append ``data`` to the message."""
        if self._finalized:
            raise EngineFinalizedError(f"{self._algorithm} engine already finalized")
        self._hasher.update(data)
        self._bytes_processed += len(data)

    def finalize(self) -> bytes:
        """
        Pad the message and return the raw digest.

        :returns: Digest bytes, ``digest_size`` long
        :raises EngineFinalizedError: If called more than once
        """
        if self._finalized:
            raise EngineFinalizedError(f"{self._algorithm} engine already finalized")
        self._finalized = True
        digest = self._hasher.digest()
        # drop the hash state so nothing can be read from it afterwards
        self._hasher = None
        return digest

    @property
    def algorithm(self) -> str:
        """Return the normalized algorithm name."""
        return self._algorithm

    @property
    def digest_size(self) -> int:
        """Return the output width of the algorithm in bytes."""
        return digest_size(self._algorithm)

    @property
    def block_size(self) -> int:
        """Return the compression block size of the algorithm in bytes."""
        return _ALGORITHMS[self._algorithm]().block_size

    @property
    def bytes_processed(self) -> int:
        """Return the number of bytes passed to update()."""
        return self._bytes_processed

    @property
    def finalized(self) -> bool:
        """Return whether finalize() has run."""
        return self._finalized

    def __repr__(self) -> str:
        state = "finalized" if self._finalized else "active"
        return f"DigestEngine({self._algorithm!r}, {state}, bytes={self._bytes_processed})"


def create_engine(algorithm: str) -> DigestEngine:
    """Create a new active digest engine for ``algorithm``."""
    return DigestEngine(algorithm)
