"""Payload decompression for mapping files."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Mapping

import brotli
import zstandard

from mapping_tables.errors import (
    DecompressionFailedError,
    MappingError,
    SizeMismatchError,
    UnsupportedCompressionError,
)

logger = logging.getLogger(__name__)

# (compressed bytes, declared decompressed size) -> decompressed bytes
Codec = Callable[[bytes, int], bytes]


class CompressionMethod(Enum):
    """Compression method tag stored in the file header."""

    NONE = 0
    OODLE = 1
    BROTLI = 2
    ZSTANDARD = 3
    UNKNOWN = 0xFF

    @classmethod
    def from_tag(cls, tag: int) -> CompressionMethod:
        """Map a raw header byte to a usable method."""
        try:
            method = cls(tag)
        except ValueError:
            raise UnsupportedCompressionError(tag, "not recognized") from None
        if method is cls.UNKNOWN:
            raise UnsupportedCompressionError(tag, "not recognized")
        return method

    def decompress(
        self,
        compressed: bytes,
        expected_size: int,
        codecs: Mapping[CompressionMethod, Codec | None] | None = None,
    ) -> bytes:
        """Decompress a payload with this method."""
        return decompress(self, compressed, expected_size, codecs)


def _presized(data: bytes, expected_size: int) -> bytes:
    """Place decoded output into a buffer of the declared size."""
    if len(data) < expected_size:
        return data + b"\x00" * (expected_size - len(data))
    return data


def _decompress_brotli(compressed: bytes, expected_size: int) -> bytes:
    try:
        data = brotli.decompress(compressed)
    except brotli.error as exc:
        raise DecompressionFailedError(f"brotli failed: {exc}") from exc
    return data


def _decompress_zstandard(compressed: bytes, expected_size: int) -> bytes:
    """Decode every frame in the payload; an unfinished frame is an error."""
    dctx = zstandard.ZstdDecompressor()
    chunks = []
    remaining = compressed
    try:
        while True:
            dobj = dctx.decompressobj()
            chunks.append(dobj.decompress(remaining))
            if not dobj.eof:
                raise DecompressionFailedError("zstd failed: incomplete frame")
            remaining = dobj.unused_data
            if not remaining:
                break
    except zstandard.ZstdError as exc:
        raise DecompressionFailedError(f"zstd failed: {exc}") from exc
    return b"".join(chunks)


_CODECS: dict[CompressionMethod, Codec | None] = {
    CompressionMethod.OODLE: None,
    CompressionMethod.BROTLI: _decompress_brotli,
    CompressionMethod.ZSTANDARD: _decompress_zstandard,
}


def register_codec(method: CompressionMethod, codec: Codec | None) -> None:
    """Install (or with None, remove) the decoder used for a method.

    Oodle has no bundled decoder; callers with access to one register it
    here. The decoder must raise on corrupt input.
    """
    if method in (CompressionMethod.NONE, CompressionMethod.UNKNOWN):
        raise ValueError(f"Cannot register a codec for {method.name}")
    _CODECS[method] = codec


def decompress(
    method: CompressionMethod,
    compressed: bytes,
    expected_size: int,
    codecs: Mapping[CompressionMethod, Codec | None] | None = None,
) -> bytes:
    """Decompress a payload.

    Args:
        method: Compression method from the header.
        compressed: The compressed payload bytes.
        expected_size: Declared decompressed size.
        codecs: Decoders for this call only; they take precedence over the
            registered ones.

    Returns:
        The decompressed payload.
    """
    if method is CompressionMethod.NONE:
        if len(compressed) != expected_size:
            raise SizeMismatchError(len(compressed), expected_size)
        return compressed

    if codecs is not None and method in codecs:
        codec = codecs[method]
    else:
        codec = _CODECS.get(method)
    if codec is None:
        raise UnsupportedCompressionError(method.value, "not available")

    logger.debug(
        "Decompressing %d bytes with %s (expecting %d)", len(compressed), method.name, expected_size
    )
    try:
        data = codec(compressed, expected_size)
    except MappingError:
        raise
    except Exception as exc:
        raise DecompressionFailedError(f"{method.name.lower()} failed: {exc}") from exc
    return _presized(data, expected_size)
