import hashlib
import random
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def reference_buffer() -> bytes:
    """Deterministic payload spanning many 1024-byte chunks with a partial last chunk."""
    return random.Random(1024).randbytes(50 * 1024 + 321)


@pytest.fixture
def reference_file(tmp_path: Path, reference_buffer: bytes) -> Path:
    path = tmp_path / "person.jpg"
    path.write_bytes(reference_buffer)
    return path


@pytest.fixture
def one_shot():
    """Reference one-shot raw digest."""

    def _one_shot(algorithm: str, data: bytes) -> bytes:
        return hashlib.new(algorithm, data).digest()

    return _one_shot
