from os import PathLike
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from ..constants import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE, DEFAULT_QUEUE_SIZE
from ..encoding import DigestEncoding
from ..engine import normalize_algorithm
from ..utils.config import read_and_merge_config_files


class StrictBaseModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        use_enum_values=True,
    )


class DigestOptions(StrictBaseModel):
    algorithm: str = DEFAULT_ALGORITHM
    """
    Digest algorithm name, case-insensitive (e.g. md5, sha1, sha256).
    """

    encoding: DigestEncoding = DigestEncoding.RAW
    """
    Output encoding of the digest: raw, hex or base64.
    """

    chunk_size: PositiveInt = DEFAULT_CHUNK_SIZE
    """
    Read buffer hint in bytes. Does not affect the digest.
    """

    queue_size: PositiveInt = DEFAULT_QUEUE_SIZE
    """
    Number of chunks buffered for a pass-through sink before reading pauses.
    """

    @field_validator("algorithm", mode="before")
    @classmethod
    def validate_algorithm(cls, value: str) -> str:
        return normalize_algorithm(value)

    @field_validator("encoding", mode="before")
    @classmethod
    def validate_encoding(cls, value: str | DigestEncoding | None) -> DigestEncoding:
        return DigestEncoding.parse(value)


class DigestConfig(StrictBaseModel):
    digest: DigestOptions = Field(default_factory=DigestOptions)
    """
    Options applied to every digest stream.
    """

    threads: PositiveInt = 1
    """
    Number of files hashed in parallel.
    """

    @classmethod
    def from_files(cls, config_files: list[str | PathLike]) -> Self:
        """Read, merge and validate YAML configuration files."""
        return cls.model_validate(read_and_merge_config_files(config_files))
