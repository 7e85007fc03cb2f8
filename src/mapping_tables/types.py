"""Type definitions for decoded mapping files."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
from typing import Iterator, Sequence, Union

from mapping_tables.table import IndexedTable


class MappingVersion(IntEnum):
    """Official mapping file revisions, in ascending order."""

    INITIAL = 0
    # Adds package versioning to aid with compatibility
    PACKAGE_VERSIONING = 1
    # Adds 16-bit wide name lengths
    LONG_FNAME = 2
    # Adds enums with more than 255 values
    LARGE_ENUMS = 3


class ExtensionFlags(IntFlag):
    """Bitset announcing optional sections after the schema table."""

    NONE = 0
    PATHS = 1


class PropertyType(Enum):
    """Engine property kinds that can appear in a schema."""

    BYTE = 0
    BOOL = 1
    INT = 2
    FLOAT = 3
    OBJECT = 4
    NAME = 5
    DELEGATE = 6
    DOUBLE = 7
    ARRAY = 8
    STRUCT = 9
    STR = 10
    TEXT = 11
    INTERFACE = 12
    MULTICAST_DELEGATE = 13
    WEAK_OBJECT = 14
    LAZY_OBJECT = 15
    ASSET_OBJECT = 16
    SOFT_OBJECT = 17
    UINT64 = 18
    UINT32 = 19
    UINT16 = 20
    INT64 = 21
    INT16 = 22
    INT8 = 23
    MAP = 24
    SET = 25
    ENUM = 26
    FIELD_PATH = 27
    OPTIONAL = 28
    UTF8_STR = 29
    ANSI_STR = 30
    UNKNOWN = 0xFF

    @property
    def engine_name(self) -> str:
        """Return the engine's class name for this kind, e.g. ``IntProperty``."""
        return _ENGINE_NAMES.get(self, "UnknownProperty")


_ENGINE_NAMES: dict[PropertyType, str] = {
    PropertyType.BYTE: "ByteProperty",
    PropertyType.BOOL: "BoolProperty",
    PropertyType.INT: "IntProperty",
    PropertyType.FLOAT: "FloatProperty",
    PropertyType.OBJECT: "ObjectProperty",
    PropertyType.NAME: "NameProperty",
    PropertyType.DELEGATE: "DelegateProperty",
    PropertyType.DOUBLE: "DoubleProperty",
    PropertyType.ARRAY: "ArrayProperty",
    PropertyType.STRUCT: "StructProperty",
    PropertyType.STR: "StrProperty",
    PropertyType.TEXT: "TextProperty",
    PropertyType.INTERFACE: "InterfaceProperty",
    PropertyType.MULTICAST_DELEGATE: "MulticastDelegateProperty",
    PropertyType.WEAK_OBJECT: "WeakObjectProperty",
    PropertyType.LAZY_OBJECT: "LazyObjectProperty",
    PropertyType.ASSET_OBJECT: "AssetObjectProperty",
    PropertyType.SOFT_OBJECT: "SoftObjectProperty",
    PropertyType.UINT64: "UInt64Property",
    PropertyType.UINT32: "UInt32Property",
    PropertyType.UINT16: "UInt16Property",
    PropertyType.INT64: "Int64Property",
    PropertyType.INT16: "Int16Property",
    PropertyType.INT8: "Int8Property",
    PropertyType.MAP: "MapProperty",
    PropertyType.SET: "SetProperty",
    PropertyType.ENUM: "EnumProperty",
    PropertyType.FIELD_PATH: "FieldPathProperty",
    PropertyType.OPTIONAL: "OptionalProperty",
    PropertyType.UTF8_STR: "Utf8StrProperty",
    PropertyType.ANSI_STR: "AnsiStrProperty",
}


@dataclass(frozen=True)
class CustomVersion:
    """A legacy compatibility version record: (GUID, version)."""

    guid: bytes
    version: int

    @property
    def guid_str(self) -> str:
        """Return the GUID as four 32-bit hex words, as the engine prints it."""
        words = [int.from_bytes(self.guid[i:i + 4], "little") for i in range(0, 16, 4)]
        return "-".join(f"{w:08X}" for w in words)


@dataclass(frozen=True)
class ShallowPropertyData:
    """Property kind with no further type information."""

    property_type: PropertyType


@dataclass(frozen=True)
class StructPropertyData:
    """Nested struct; struct_type names another schema."""

    struct_type: str

    @property
    def property_type(self) -> PropertyType:
        return PropertyType.STRUCT


@dataclass(frozen=True)
class EnumPropertyData:
    """Enum-backed property: underlying storage kind plus the enum's name."""

    inner: PropertyData
    enum_name: str

    @property
    def property_type(self) -> PropertyType:
        return PropertyType.ENUM


@dataclass(frozen=True)
class ArrayPropertyData:
    inner: PropertyData

    @property
    def property_type(self) -> PropertyType:
        return PropertyType.ARRAY


@dataclass(frozen=True)
class SetPropertyData:
    inner: PropertyData

    @property
    def property_type(self) -> PropertyType:
        return PropertyType.SET


@dataclass(frozen=True)
class OptionalPropertyData:
    inner: PropertyData

    @property
    def property_type(self) -> PropertyType:
        return PropertyType.OPTIONAL


@dataclass(frozen=True)
class MapPropertyData:
    """Map property: key kind and value kind."""

    inner: PropertyData
    value: PropertyData

    @property
    def property_type(self) -> PropertyType:
        return PropertyType.MAP


PropertyData = Union[
    ShallowPropertyData,
    StructPropertyData,
    EnumPropertyData,
    ArrayPropertyData,
    SetPropertyData,
    OptionalPropertyData,
    MapPropertyData,
]


def describe_property_data(data: PropertyData) -> str:
    """Render property data as a compact type expression, e.g. ``MapProperty<NameProperty, Foo>``."""
    if isinstance(data, StructPropertyData):
        return data.struct_type
    if isinstance(data, EnumPropertyData):
        return f"{data.enum_name}({describe_property_data(data.inner)})"
    if isinstance(data, MapPropertyData):
        key = describe_property_data(data.inner)
        value = describe_property_data(data.value)
        return f"{PropertyType.MAP.engine_name}<{key}, {value}>"
    if isinstance(data, (ArrayPropertyData, SetPropertyData, OptionalPropertyData)):
        return f"{data.property_type.engine_name}<{describe_property_data(data.inner)}>"
    return data.property_type.engine_name


@dataclass(frozen=True)
class Property:
    """One addressable property slot of a schema.

    Fixed-size array properties are expanded into one Property per slot;
    array_index is the slot and schema_index the flattened position.
    """

    name: str
    schema_index: int
    array_index: int
    array_size: int
    data: PropertyData

    @property
    def property_type(self) -> PropertyType:
        return self.data.property_type


# (property name, duplication index)
PropertyKey = tuple[str, int]


@dataclass(frozen=True)
class Schema:
    """Property layout of one engine type.

    prop_count is the declared count from the file. It is not guaranteed to
    match len(properties) once array slots are expanded.
    """

    name: str
    super_type: str
    prop_count: int
    properties: IndexedTable[PropertyKey, Property] = field(default_factory=IndexedTable)
    module_path: str | None = None

    @property
    def has_parent(self) -> bool:
        return self.super_type != ""

    def get_property(self, name: str, duplication_index: int = 0) -> Property | None:
        """Get a property by name and duplication index."""
        return self.properties.get_by_key((name, duplication_index))


class Ancestry(Sequence[str]):
    """Chain of type names from the innermost (closest) entry outward."""

    def __init__(self, names: Sequence[str] = ()) -> None:
        self._names: tuple[str, ...] = tuple(names)

    @property
    def parent(self) -> str | None:
        """Return the immediate parent, or None for an empty chain."""
        return self._names[0] if self._names else None

    def without_parent(self) -> Ancestry:
        return Ancestry(self._names[1:])

    def with_parent(self, name: str) -> Ancestry:
        """Return a chain with name pushed as the new immediate parent."""
        return Ancestry((name,) + self._names)

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, slice):
            return Ancestry(self._names[index])
        return self._names[index]

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Ancestry):
            return self._names == other._names
        if isinstance(other, (tuple, list)):
            return list(self._names) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"Ancestry({list(self._names)!r})"
