"""Record shapes of the next-generation (zen) package format.

Only the records are decoded here. Deciding which summary layout a package
uses depends on its engine version, which the caller must supply.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mapping_tables.errors import InvalidFormatError
from mapping_tables.reader import ByteReader

# Traditional package magic, in stream order
PACKAGE_MAGIC = bytes([0xC1, 0x83, 0x2A, 0x9E])

_GLOBAL_NAME_FLAG = 0x80000000
_EXPORT_INDEX_MASK = 0x3FFFFFFF


class AssetFormat(Enum):
    """Package container formats that can be told apart from file bytes alone."""

    TRADITIONAL = "traditional"


class ExportCommandType(Enum):
    CREATE = 0
    SERIALIZE = 1

    @classmethod
    def from_raw(cls, value: int) -> ExportCommandType:
        """Map the top bits of a bundle entry; unknown values mean CREATE."""
        if value == 1:
            return cls.SERIALIZE
        return cls.CREATE


@dataclass(frozen=True)
class MappedName:
    """Name reference used by zen packages."""

    index: int
    number: int

    @property
    def is_global(self) -> bool:
        return bool(self.index & _GLOBAL_NAME_FLAG)

    def get_index(self) -> int:
        """Return the index without the global flag."""
        return self.index & ~_GLOBAL_NAME_FLAG

    @classmethod
    def read(cls, reader: ByteReader) -> MappedName:
        index = reader.read_u32()
        return cls(index=index, number=reader.read_u32())


@dataclass(frozen=True)
class ExportBundleHeader:
    first_entry_index: int
    entry_count: int

    @classmethod
    def read(cls, reader: ByteReader) -> ExportBundleHeader:
        first_entry_index = reader.read_u32()
        return cls(first_entry_index=first_entry_index, entry_count=reader.read_u32())


@dataclass(frozen=True)
class ExportBundleEntry:
    """Export index and command packed into one u32 (command in the top two bits)."""

    local_export_index: int
    command_type: ExportCommandType

    @classmethod
    def read(cls, reader: ByteReader) -> ExportBundleEntry:
        raw = reader.read_u32()
        return cls(
            local_export_index=raw & _EXPORT_INDEX_MASK,
            command_type=ExportCommandType.from_raw(raw >> 30),
        )


@dataclass(frozen=True)
class DependencyBundleHeader:
    first_entry_index: int
    entry_count: int

    @classmethod
    def read(cls, reader: ByteReader) -> DependencyBundleHeader:
        first_entry_index = reader.read_u32()
        return cls(first_entry_index=first_entry_index, entry_count=reader.read_u32())


@dataclass(frozen=True)
class DependencyBundleEntry:
    local_index: int

    @classmethod
    def read(cls, reader: ByteReader) -> DependencyBundleEntry:
        return cls(local_index=reader.read_u32())


@dataclass(frozen=True)
class ZenPackageSummary:
    """Zen package summary.

    Packages from 5.3 onward replace the graph data offset with three
    dependency-bundle offsets; the unused fields are 0.
    """

    has_versioning_info: int
    header_size: int
    name: MappedName
    package_flags: int
    cooked_header_size: int
    imported_public_export_hashes_offset: int
    import_map_offset: int
    export_map_offset: int
    export_bundle_entries_offset: int
    graph_data_offset: int = 0
    dependency_bundle_headers_offset: int = 0
    dependency_bundle_entries_offset: int = 0
    imported_package_names_offset: int = 0

    @classmethod
    def read(cls, reader: ByteReader, is_ue53_plus: bool) -> ZenPackageSummary:
        """Read a summary.

        Args:
            reader: Reader positioned at the summary.
            is_ue53_plus: Whether the package uses the 5.3+ layout.
        """
        has_versioning_info = reader.read_u32()
        header_size = reader.read_u32()
        name = MappedName.read(reader)
        package_flags = reader.read_u32()
        cooked_header_size = reader.read_u32()
        imported_public_export_hashes_offset = reader.read_i32()
        import_map_offset = reader.read_i32()
        export_map_offset = reader.read_i32()
        export_bundle_entries_offset = reader.read_i32()

        tail: dict[str, int] = {}
        if is_ue53_plus:
            tail["dependency_bundle_headers_offset"] = reader.read_i32()
            tail["dependency_bundle_entries_offset"] = reader.read_i32()
            tail["imported_package_names_offset"] = reader.read_i32()
        else:
            tail["graph_data_offset"] = reader.read_i32()

        return cls(
            has_versioning_info=has_versioning_info,
            header_size=header_size,
            name=name,
            package_flags=package_flags,
            cooked_header_size=cooked_header_size,
            imported_public_export_hashes_offset=imported_public_export_hashes_offset,
            import_map_offset=import_map_offset,
            export_map_offset=export_map_offset,
            export_bundle_entries_offset=export_bundle_entries_offset,
            **tail,
        )


def detect_format(data: bytes) -> AssetFormat:
    """Detect the container format from the start of a package file.

    Only the traditional magic is recognised; zen and IoStore detection
    need engine version information this function does not have.
    """
    if data[:4] == PACKAGE_MAGIC:
        return AssetFormat.TRADITIONAL
    raise InvalidFormatError("Unknown asset format")
