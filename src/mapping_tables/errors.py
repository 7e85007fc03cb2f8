"""Errors raised while decoding mapping files."""

from __future__ import annotations


class MappingError(ValueError):
    """Base class for all mapping file decode errors."""


class InvalidFormatError(MappingError):
    """Bad magic, unparseable tag, or malformed table data."""


class UnknownVersionError(MappingError):
    """The version ordinal does not name a known file revision."""

    def __init__(self, ordinal: int) -> None:
        super().__init__(f"Unknown mapping file version: {ordinal}")
        self.ordinal = ordinal


class UnsupportedCompressionError(MappingError):
    """The compression tag is unknown or has no decoder available."""

    def __init__(self, tag: int, reason: str = "unsupported") -> None:
        super().__init__(f"Compression method {tag} is {reason}")
        self.tag = tag


class DecompressionFailedError(MappingError):
    """The codec rejected the compressed payload."""


class SizeMismatchError(MappingError):
    """Declared and actual payload sizes disagree for an uncompressed file."""

    def __init__(self, compressed_size: int, decompressed_size: int) -> None:
        super().__init__(
            f"compressed size {compressed_size} != decompressed size "
            f"{decompressed_size} on an uncompressed file"
        )
        self.compressed_size = compressed_size
        self.decompressed_size = decompressed_size


class InvalidEncodingError(MappingError):
    """A string in the file is not valid for its declared encoding."""


class TruncatedInputError(MappingError):
    """The stream ended before a fixed-size field could be read."""

    def __init__(self, needed: int, available: int, position: int) -> None:
        super().__init__(
            f"Unexpected end of input at offset {position}: "
            f"needed {needed} bytes, {available} available"
        )
        self.needed = needed
        self.available = available
        self.position = position


class InvalidExtensionDataError(MappingError):
    """The optional extension section is malformed."""
