"""Mapping file header and layout detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mapping_tables.compression import CompressionMethod
from mapping_tables.errors import InvalidFormatError, UnknownVersionError
from mapping_tables.reader import ByteReader
from mapping_tables.types import CustomVersion, MappingVersion

logger = logging.getLogger(__name__)

# Bytes C4 30 read as a little-endian u16
MAGIC = 0x30C4

# Version ordinal of the community (UE4SS) layout
UNOFFICIAL_VERSION = 0


@dataclass(frozen=True)
class MappingHeader:
    """Everything read before the compressed payload.

    The layout flags decide how the payload tables are decoded:
    the unofficial variant always uses 1-byte name lengths and enum counts,
    official files widen them from LongFName and LargeEnums onward.
    """

    version: MappingVersion
    is_unofficial: bool
    has_versioning: bool
    object_version: int
    object_version_ue5: int
    custom_versions: tuple[CustomVersion, ...]
    net_cl: int
    compression_method: CompressionMethod
    compressed_size: int
    decompressed_size: int

    @property
    def name_length_width(self) -> int:
        """Byte width of each name-table length prefix."""
        if self.is_unofficial or self.version < MappingVersion.LONG_FNAME:
            return 1
        return 2

    @property
    def enum_count_width(self) -> int:
        """Byte width of each enum member count."""
        if self.is_unofficial or self.version < MappingVersion.LARGE_ENUMS:
            return 1
        return 2

    @property
    def reads_extensions(self) -> bool:
        """Whether trailing payload bytes are an extension section."""
        return not self.is_unofficial


def read_custom_version(reader: ByteReader) -> CustomVersion:
    guid = reader.read_bytes(16)
    return CustomVersion(guid=guid, version=reader.read_i32())


def read_header(reader: ByteReader) -> MappingHeader:
    """Read the header from a reader positioned at offset 0.

    Args:
        reader: Reader over the raw file.

    Returns:
        The decoded header. The reader is left at the start of the
        compressed payload.
    """
    magic = reader.read_u16()
    if magic != MAGIC:
        raise InvalidFormatError(f"File is not a valid mapping file (magic 0x{magic:04X})")

    ordinal = reader.read_u8()
    is_unofficial = ordinal == UNOFFICIAL_VERSION
    try:
        version = MappingVersion(ordinal)
    except ValueError:
        raise UnknownVersionError(ordinal) from None

    has_versioning = False
    object_version = 0
    object_version_ue5 = 0
    custom_versions: tuple[CustomVersion, ...] = ()
    net_cl = 0

    if not is_unofficial:
        if version >= MappingVersion.PACKAGE_VERSIONING:
            # Flag byte overrides what the version implies
            has_versioning = reader.read_bool()

        if has_versioning:
            object_version = reader.read_i32()
            object_version_ue5 = reader.read_i32()
            custom_versions = tuple(reader.read_array(read_custom_version))
            net_cl = reader.read_u32()

    compression_method = CompressionMethod.from_tag(reader.read_u8())
    compressed_size = reader.read_u32()
    decompressed_size = reader.read_u32()

    logger.debug(
        "Mapping header: version=%s unofficial=%s versioning=%s compression=%s sizes=%d/%d",
        version.name,
        is_unofficial,
        has_versioning,
        compression_method.name,
        compressed_size,
        decompressed_size,
    )

    return MappingHeader(
        version=version,
        is_unofficial=is_unofficial,
        has_versioning=has_versioning,
        object_version=object_version,
        object_version_ue5=object_version_ue5,
        custom_versions=custom_versions,
        net_cl=net_cl,
        compression_method=compression_method,
        compressed_size=compressed_size,
        decompressed_size=decompressed_size,
    )
