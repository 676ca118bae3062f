"""Output encodings applied to finished digests."""

from __future__ import annotations

import base64
from enum import StrEnum

from .exceptions import EncodingError


class DigestEncoding(StrEnum):
    """Output transform applied once to the raw digest bytes."""

    RAW = "raw"
    HEX = "hex"
    BASE64 = "base64"

    @classmethod
    def parse(cls, value: str | DigestEncoding | None) -> DigestEncoding:
        """
        Resolve a user-supplied encoding name.

        ``None`` selects raw bytes. Names are case-insensitive.

        :raises EncodingError: If the name is not a known encoding
        """
        if value is None:
            return cls.RAW
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise EncodingError(value)


def encode_digest(raw: bytes, encoding: str | DigestEncoding | None = DigestEncoding.RAW) -> bytes | str:
    """
    Encode a raw digest.

    :param raw: Digest bytes as returned by the engine
    :param encoding: ``raw``, ``hex`` or ``base64``
    :returns: ``raw`` unchanged, a lowercase hex string, or a padded base64 string
    """
    match DigestEncoding.parse(encoding):
        case DigestEncoding.HEX:
            return raw.hex()
        case DigestEncoding.BASE64:
            return base64.b64encode(raw).decode("ascii")
        case _:
            return bytes(raw)
