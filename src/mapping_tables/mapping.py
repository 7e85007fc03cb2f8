"""Decoding of whole mapping files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import BinaryIO, Mapping, Sequence

from mapping_tables import resolution
from mapping_tables.compression import Codec, CompressionMethod
from mapping_tables.errors import InvalidExtensionDataError, InvalidFormatError
from mapping_tables.header import MappingHeader, read_header
from mapping_tables.reader import ByteReader
from mapping_tables.table import IndexedTable
from mapping_tables.types import (
    ArrayPropertyData,
    CustomVersion,
    EnumPropertyData,
    ExtensionFlags,
    MappingVersion,
    MapPropertyData,
    OptionalPropertyData,
    Property,
    PropertyData,
    PropertyKey,
    PropertyType,
    Schema,
    SetPropertyData,
    ShallowPropertyData,
    StructPropertyData,
)

logger = logging.getLogger(__name__)

# Name reference meaning "no name"
NULL_NAME_INDEX = -1


class _PayloadDecoder:
    """Decodes the tables of a decompressed payload.

    The name table must be read first; every later table refers to it.
    """

    def __init__(self, reader: ByteReader, header: MappingHeader) -> None:
        self.reader = reader
        self.header = header
        self.names: tuple[str, ...] = ()

    def read_names(self) -> tuple[str, ...]:
        width = self.header.name_length_width

        def read_entry(reader: ByteReader) -> str:
            return reader.read_utf8(reader.read_uint(width))

        self.names = tuple(self.reader.read_array(read_entry))
        logger.debug("Read %d names (%d-byte lengths)", len(self.names), width)
        return self.names

    def read_name(self) -> str:
        """Read an i32 name reference and resolve it through the name table."""
        index = self.reader.read_i32()
        if index == NULL_NAME_INDEX:
            return ""
        if index < 0 or index >= len(self.names):
            raise InvalidFormatError(
                f"Name index {index} out of range [0, {len(self.names)}) "
                f"at offset {self.reader.position - 4}"
            )
        return self.names[index]

    def read_enums(self) -> IndexedTable[str, tuple[str, ...]]:
        width = self.header.enum_count_width
        count = self.reader.read_u32()
        enums: IndexedTable[str, tuple[str, ...]] = IndexedTable()
        for _ in range(count):
            enum_name = self.read_name()
            member_count = self.reader.read_uint(width)
            members = tuple(self.read_name() for _ in range(member_count))
            enums.insert(enum_name, members)
        logger.debug("Read %d enums (%d-byte member counts)", count, width)
        return enums.freeze()

    def read_property_data(self) -> PropertyData:
        """Read a type tag and its type-specific payload."""
        tag = self.reader.read_u8()
        try:
            property_type = PropertyType(tag)
        except ValueError:
            raise InvalidFormatError(
                f"Unknown property type {tag} at offset {self.reader.position - 1}"
            ) from None

        if property_type is PropertyType.ENUM:
            inner = self.read_property_data()
            return EnumPropertyData(inner=inner, enum_name=self.read_name())
        if property_type is PropertyType.STRUCT:
            return StructPropertyData(struct_type=self.read_name())
        if property_type is PropertyType.ARRAY:
            return ArrayPropertyData(inner=self.read_property_data())
        if property_type is PropertyType.SET:
            return SetPropertyData(inner=self.read_property_data())
        if property_type is PropertyType.OPTIONAL:
            return OptionalPropertyData(inner=self.read_property_data())
        if property_type is PropertyType.MAP:
            inner = self.read_property_data()
            return MapPropertyData(inner=inner, value=self.read_property_data())
        return ShallowPropertyData(property_type=property_type)

    def read_property(self) -> Property:
        schema_index = self.reader.read_u16()
        array_size = self.reader.read_u8()
        name = self.read_name()
        data = self.read_property_data()
        return Property(
            name=name,
            schema_index=schema_index,
            array_index=0,
            array_size=array_size,
            data=data,
        )

    def read_schema(self) -> Schema:
        """Read one schema, expanding array properties into one entry per slot."""
        name = self.read_name()
        super_type = self.read_name()
        prop_count = self.reader.read_u16()
        serializable_count = self.reader.read_u16()

        properties: IndexedTable[PropertyKey, Property] = IndexedTable()
        for _ in range(serializable_count):
            base = self.read_property()
            for slot in range(base.array_size):
                prop = replace(
                    base,
                    array_index=slot,
                    schema_index=base.schema_index + slot,
                )
                properties.insert((prop.name, prop.schema_index), prop)

        return Schema(
            name=name,
            super_type=super_type,
            prop_count=prop_count,
            properties=properties.freeze(),
        )

    def read_schemas(self) -> list[Schema]:
        count = self.reader.read_u32()
        schemas = [self.read_schema() for _ in range(count)]
        logger.debug("Read %d schemas", count)
        return schemas

    def read_extensions(self, schemas: list[Schema]) -> tuple[ExtensionFlags, list[Schema]]:
        """Read the optional trailing section and apply module paths."""
        raw_flags = self.reader.read_u32()
        if raw_flags & ~int(ExtensionFlags.PATHS):
            raise InvalidExtensionDataError(f"Invalid extension version 0x{raw_flags:08X}")
        flags = ExtensionFlags(raw_flags)

        if ExtensionFlags.PATHS in flags:
            path_count = self.reader.read_u16()
            paths = [self.reader.read_fstring() for _ in range(path_count)]
            width = 2 if path_count > 0xFF else 1
            with_paths = []
            for schema in schemas:
                index = self.reader.read_uint(width)
                if index >= path_count:
                    raise InvalidExtensionDataError(
                        f"Module path index {index} out of range [0, {path_count}) "
                        f"for schema '{schema.name}'"
                    )
                with_paths.append(replace(schema, module_path=paths[index]))
            schemas = with_paths
            logger.debug("Applied %d module paths", path_count)

        return flags, schemas


@dataclass(frozen=True)
class MappingFile:
    """A fully decoded mapping file.

    Built in a single decode pass by parse(); never modified afterwards, so
    one instance can serve lookups from several threads.
    """

    version: MappingVersion
    is_unofficial: bool
    extension_flags: ExtensionFlags
    object_version: int
    object_version_ue5: int
    custom_versions: tuple[CustomVersion, ...]
    compression_method: CompressionMethod
    net_cl: int
    names: tuple[str, ...]
    enums: IndexedTable[str, tuple[str, ...]]
    schemas: IndexedTable[str, Schema]

    @classmethod
    def parse(
        cls,
        data: bytes | bytearray | memoryview | BinaryIO,
        codecs: Mapping[CompressionMethod, Codec | None] | None = None,
    ) -> MappingFile:
        """Decode a mapping file.

        Args:
            data: Raw file contents, or a binary stream positioned at the
                start of the file.
            codecs: Decoders to use for this file in place of the
                registered ones, e.g. an Oodle decoder.

        Returns:
            The decoded mapping file.

        Raises:
            MappingError: If any part of the file is malformed.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            data = data.read()

        reader = ByteReader(data)
        header = read_header(reader)
        compressed = reader.read_bytes(header.compressed_size)
        payload = header.compression_method.decompress(
            compressed, header.decompressed_size, codecs
        )

        decoder = _PayloadDecoder(ByteReader(payload), header)
        names = decoder.read_names()
        enums = decoder.read_enums()
        schema_list = decoder.read_schemas()

        extension_flags = ExtensionFlags.NONE
        if header.reads_extensions and decoder.reader.remaining > 0:
            extension_flags, schema_list = decoder.read_extensions(schema_list)

        return cls(
            version=header.version,
            is_unofficial=header.is_unofficial,
            extension_flags=extension_flags,
            object_version=header.object_version,
            object_version_ue5=header.object_version_ue5,
            custom_versions=header.custom_versions,
            compression_method=header.compression_method,
            net_cl=header.net_cl,
            names=names,
            enums=enums,
            schemas=IndexedTable.from_items((s.name, s) for s in schema_list).freeze(),
        )

    @classmethod
    def from_file(
        cls,
        path: Path | str,
        codecs: Mapping[CompressionMethod, Codec | None] | None = None,
    ) -> MappingFile:
        """Read and decode a mapping file from disk."""
        if isinstance(path, str):
            path = Path(path)
        logger.debug("Loading mapping file %s", path)
        return cls.parse(path.read_bytes(), codecs)

    def get_schema(self, name: str) -> Schema | None:
        return self.schemas.get_by_key(name)

    def get_enum(self, name: str) -> tuple[str, ...] | None:
        return self.enums.get_by_key(name)

    def get_all_properties(self, type_name: str) -> list[Property]:
        """Get the properties of a type and all of its super types, closest first."""
        return resolution.get_all_properties(self.schemas, type_name)

    def get_property_with_duplication_index(
        self,
        property_name: str,
        ancestry: Sequence[str],
        duplication_index: int,
    ) -> tuple[Property, int] | None:
        """Find a property and its global index for an object's ancestry.

        Args:
            property_name: Property name, or a numeric array index.
            ancestry: Type names from the immediate parent outward.
            duplication_index: Which same-named property to pick.

        Returns:
            (property, global_index), or None if nothing matches.
        """
        return resolution.find_property(self.schemas, property_name, ancestry, duplication_index)

    def get_property(self, property_name: str, ancestry: Sequence[str]) -> Property | None:
        """Find a property with duplication index 0."""
        found = self.get_property_with_duplication_index(property_name, ancestry, 0)
        if found is None:
            return None
        return found[0]
