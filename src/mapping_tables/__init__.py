"""Mapping Tables - A decoder for engine type-mapping (usmap) files."""

from mapping_tables.compression import CompressionMethod, register_codec
from mapping_tables.errors import (
    DecompressionFailedError,
    InvalidEncodingError,
    InvalidExtensionDataError,
    InvalidFormatError,
    MappingError,
    SizeMismatchError,
    TruncatedInputError,
    UnknownVersionError,
    UnsupportedCompressionError,
)
from mapping_tables.mapping import MappingFile
from mapping_tables.package_records import (
    AssetFormat,
    DependencyBundleEntry,
    DependencyBundleHeader,
    ExportBundleEntry,
    ExportBundleHeader,
    ExportCommandType,
    MappedName,
    ZenPackageSummary,
    detect_format,
)
from mapping_tables.table import IndexedTable
from mapping_tables.types import (
    Ancestry,
    ArrayPropertyData,
    CustomVersion,
    EnumPropertyData,
    ExtensionFlags,
    MappingVersion,
    MapPropertyData,
    OptionalPropertyData,
    Property,
    PropertyData,
    PropertyType,
    Schema,
    SetPropertyData,
    ShallowPropertyData,
    StructPropertyData,
)

__all__ = [
    # Main API
    "MappingFile",
    "Ancestry",
    "IndexedTable",
    # Compression
    "CompressionMethod",
    "register_codec",
    # Type definitions
    "MappingVersion",
    "ExtensionFlags",
    "CustomVersion",
    "Schema",
    "Property",
    "PropertyType",
    "PropertyData",
    "ShallowPropertyData",
    "StructPropertyData",
    "EnumPropertyData",
    "ArrayPropertyData",
    "SetPropertyData",
    "OptionalPropertyData",
    "MapPropertyData",
    # Package records
    "AssetFormat",
    "detect_format",
    "MappedName",
    "ExportCommandType",
    "ExportBundleHeader",
    "ExportBundleEntry",
    "DependencyBundleHeader",
    "DependencyBundleEntry",
    "ZenPackageSummary",
    # Errors
    "MappingError",
    "InvalidFormatError",
    "UnknownVersionError",
    "UnsupportedCompressionError",
    "DecompressionFailedError",
    "SizeMismatchError",
    "InvalidEncodingError",
    "TruncatedInputError",
    "InvalidExtensionDataError",
]

__version__ = "0.1.0"
