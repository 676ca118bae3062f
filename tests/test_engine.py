"""Tests for the incremental digest engine and algorithm registry."""

import hashlib

import pytest
from streamdigest import engine as engine_module
from streamdigest.engine import (
    DigestEngine,
    create_engine,
    digest_size,
    normalize_algorithm,
    register_algorithm,
    supported_algorithms,
)
from streamdigest.exceptions import EngineFinalizedError, UnsupportedAlgorithmError

ALGORITHMS = ["md5", "sha1", "sha256"]


class TestDigestEngine:
    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_chunked_equals_one_shot(self, algorithm, reference_buffer, one_shot):
        """Splitting the input into 1024-byte chunks must not change the digest."""
        engine = create_engine(algorithm)
        for i in range(0, len(reference_buffer), 1024):
            engine.update(reference_buffer[i : i + 1024])

        assert engine.finalize() == one_shot(algorithm, reference_buffer)
        assert engine.bytes_processed == len(reference_buffer)

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_irregular_partitions(self, algorithm, reference_buffer, one_shot):
        """Chunk boundaries inside and across compression blocks are irrelevant."""
        expected = one_shot(algorithm, reference_buffer)
        for sizes in ([1, 63, 64, 65, 127, 1000], [7], [4096, 1, 0, 55]):
            engine = DigestEngine(algorithm)
            offset, i = 0, 0
            while offset < len(reference_buffer):
                size = sizes[i % len(sizes)]
                engine.update(reference_buffer[offset : offset + size])
                offset += size
                i += 1
            assert engine.finalize() == expected, f"partition {sizes}"

    @pytest.mark.parametrize(
        "algorithm,expected",
        [
            ("md5", "900150983cd24fb0d6963f7d28e17f72"),
            ("sha1", "a9993e364706816aba3e25717850c26c9cd0d89d"),
            ("sha256", "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"),
        ],
    )
    def test_known_vectors(self, algorithm, expected):
        engine = DigestEngine(algorithm)
        engine.update(b"a")
        engine.update(b"")
        engine.update(b"bc")
        assert engine.finalize().hex() == expected

    @pytest.mark.parametrize("algorithm,size", [("md5", 16), ("sha1", 20), ("sha256", 32)])
    @pytest.mark.parametrize("length", [0, 1, 55, 56, 64, 1000])
    def test_digest_length(self, algorithm, size, length):
        engine = DigestEngine(algorithm)
        engine.update(b"x" * length)
        assert len(engine.finalize()) == size
        assert engine.digest_size == size

    def test_empty_message(self):
        engine = DigestEngine("sha256")
        assert engine.finalize().hex() == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_finalize_twice_raises(self):
        engine = DigestEngine("sha1")
        engine.update(b"data")
        engine.finalize()

        with pytest.raises(EngineFinalizedError):
            engine.finalize()
        assert engine.finalized

    def test_update_after_finalize_raises(self):
        engine = DigestEngine("md5")
        engine.finalize()

        with pytest.raises(EngineFinalizedError):
            engine.update(b"more")
        assert engine.bytes_processed == 0

    @pytest.mark.parametrize("name", ["SHA256", "Sha1", " md5 "])
    def test_algorithm_names_are_case_insensitive(self, name):
        assert DigestEngine(name).algorithm == name.strip().lower()

    @pytest.mark.parametrize("name", ["sha3", "crc32", "", "sha-256"])
    def test_unsupported_algorithm(self, name):
        with pytest.raises(UnsupportedAlgorithmError) as excinfo:
            DigestEngine(name)
        assert excinfo.value.algorithm == name

    def test_unsupported_algorithm_is_value_error(self):
        with pytest.raises(ValueError):
            create_engine("whirlpool-but-not-really")

    def test_block_size(self):
        assert DigestEngine("sha256").block_size == 64
        assert DigestEngine("sha512").block_size == 128


class TestRegistry:
    def test_supported_algorithms(self):
        assert {"md5", "sha1", "sha256"} <= set(supported_algorithms())
        assert supported_algorithms() == sorted(supported_algorithms())

    def test_normalize_algorithm(self):
        assert normalize_algorithm("SHA512") == "sha512"
        with pytest.raises(UnsupportedAlgorithmError):
            normalize_algorithm(None)  # type: ignore[arg-type]

    def test_digest_size(self):
        assert digest_size("sha384") == 48

    @pytest.fixture
    def isolated_registry(self, monkeypatch):
        monkeypatch.setattr(engine_module, "_ALGORITHMS", dict(engine_module._ALGORITHMS))

    def test_register_algorithm(self, isolated_registry):
        register_algorithm("BLAKE2s-Test", hashlib.blake2s)

        engine = DigestEngine("blake2s-test")
        engine.update(b"abc")
        assert engine.finalize() == hashlib.blake2s(b"abc").digest()
        assert "blake2s-test" in supported_algorithms()

    def test_register_empty_name(self):
        with pytest.raises(ValueError):
            register_algorithm("  ", hashlib.sha256)

    def test_registry_is_restored(self):
        assert "blake2s-test" not in supported_algorithms()
        assert supported_algorithms() == ["md5", "sha1", "sha224", "sha256", "sha384", "sha512"]
