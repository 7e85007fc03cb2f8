"""Property lookup across a type's inheritance chain."""

from __future__ import annotations

from typing import Sequence

from mapping_tables.table import IndexedTable
from mapping_tables.types import Property, Schema

# Largest value an array-index pseudo-name may take (u32)
MAX_ARRAY_INDEX = 0xFFFFFFFF


def is_array_index_name(name: str) -> bool:
    """Check whether a property name is really a base-10 array index."""
    if not name.isascii() or not name.isdecimal():
        return False
    return int(name) <= MAX_ARRAY_INDEX


def iter_schema_chain(schemas: IndexedTable[str, Schema], type_name: str):
    """Yield a schema and then each super type, stopping at the first unknown name.

    A super-type cycle also ends the chain.
    """
    seen: set[str] = set()
    schema = schemas.get_by_key(type_name)
    while schema is not None and schema.name not in seen:
        seen.add(schema.name)
        yield schema
        schema = schemas.get_by_key(schema.super_type)


def get_all_properties(schemas: IndexedTable[str, Schema], type_name: str) -> list[Property]:
    """Concatenate the properties of a type and its ancestors, closest first."""
    properties: list[Property] = []
    for schema in iter_schema_chain(schemas, type_name):
        properties.extend(schema.properties.values())
    return properties


def _find_in_chain(
    schemas: IndexedTable[str, Schema],
    property_name: str,
    type_name: str,
    duplication_index: int,
) -> tuple[Property, int] | None:
    global_index = 0
    for schema in iter_schema_chain(schemas, type_name):
        prop = schema.get_property(property_name, duplication_index)
        if prop is not None:
            return prop, global_index + prop.schema_index
        global_index += schema.prop_count
    return None


def find_property(
    schemas: IndexedTable[str, Schema],
    property_name: str,
    ancestry: Sequence[str],
    duplication_index: int,
) -> tuple[Property, int] | None:
    """Resolve a property by name and duplication index.

    The search starts at the immediate parent (ancestry[0]) and walks its
    super types. The global index is the sum of prop_count over every
    schema passed without a match, plus the match's own schema_index.

    A name that matches nothing but parses as an array index refers to a
    slot of the array property that owns it. The owner is the immediate
    parent, so the search is repeated for that parent's name, one level
    further out in the ancestry.
    """
    name = property_name
    chain = tuple(ancestry)
    while chain:
        found = _find_in_chain(schemas, name, chain[0], duplication_index)
        if found is not None:
            return found
        if not is_array_index_name(name):
            return None
        name, chain = chain[0], chain[1:]
    return None
