"""Tool for dumping decoded mapping files as JSON."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from mapping_tables.errors import MappingError
from mapping_tables.mapping import MappingFile
from mapping_tables.types import (
    EnumPropertyData,
    MapPropertyData,
    Property,
    PropertyData,
    Schema,
    StructPropertyData,
)


def property_data_to_dict(data: PropertyData) -> dict[str, Any]:
    """Serialize property data, recursing into container element types."""
    result: dict[str, Any] = {"type": data.property_type.engine_name}
    if isinstance(data, StructPropertyData):
        result["struct_type"] = data.struct_type
    elif isinstance(data, EnumPropertyData):
        result["enum_name"] = data.enum_name
        result["inner"] = property_data_to_dict(data.inner)
    elif isinstance(data, MapPropertyData):
        result["inner"] = property_data_to_dict(data.inner)
        result["value"] = property_data_to_dict(data.value)
    elif hasattr(data, "inner"):
        result["inner"] = property_data_to_dict(data.inner)  # type: ignore[union-attr]
    return result


def property_to_dict(prop: Property) -> dict[str, Any]:
    return {
        "name": prop.name,
        "schema_index": prop.schema_index,
        "array_index": prop.array_index,
        "array_size": prop.array_size,
        "data": property_data_to_dict(prop.data),
    }


def schema_to_dict(schema: Schema) -> dict[str, Any]:
    result: dict[str, Any] = {
        "name": schema.name,
        "super_type": schema.super_type if schema.has_parent else None,
        "prop_count": schema.prop_count,
        "properties": [property_to_dict(p) for p in schema.properties.values()],
    }
    if schema.module_path is not None:
        result["module_path"] = schema.module_path
    return result


def mapping_to_dict(mapping: MappingFile, limit: int | None = None) -> dict[str, Any]:
    """Convert a mapping file to JSON-compatible data.

    Args:
        mapping: The decoded mapping file.
        limit: Optional maximum number of names, enums and schemas to include.
    """
    enums = list(mapping.enums.items())
    schemas = mapping.schemas.values()
    names = list(mapping.names)
    if limit is not None:
        enums = enums[:limit]
        schemas = schemas[:limit]
        names = names[:limit]

    return {
        "version": mapping.version.name,
        "unofficial": mapping.is_unofficial,
        "compression": mapping.compression_method.name,
        "object_version": mapping.object_version,
        "object_version_ue5": mapping.object_version_ue5,
        "net_cl": mapping.net_cl,
        "custom_versions": [
            {"guid": cv.guid_str, "version": cv.version} for cv in mapping.custom_versions
        ],
        "extensions": int(mapping.extension_flags),
        "names": names,
        "enums": {name: list(members) for name, members in enums},
        "schemas": [schema_to_dict(s) for s in schemas],
    }


def dump_mapping(mapping: MappingFile, indent: int | None = 2, limit: int | None = None) -> str:
    """Render a mapping file as a JSON document."""
    return json.dumps(mapping_to_dict(mapping, limit), indent=indent)


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Dump a mapping file as JSON"
    )
    parser.add_argument(
        "mapping_file",
        type=Path,
        help="Path to the mapping file",
    )
    parser.add_argument(
        "schema",
        nargs="?",
        help="Name of a single schema to dump (omit to dump everything)",
    )
    parser.add_argument(
        "-n", "--limit",
        type=_non_negative_int,
        default=None,
        help="Limit number of names, enums and schemas to display",
    )

    args = parser.parse_args(argv)

    if not args.mapping_file.exists():
        print(f"Error: Mapping file not found: {args.mapping_file}", file=sys.stderr)
        return 1

    try:
        mapping = MappingFile.from_file(args.mapping_file)
    except MappingError as e:
        print(f"Error loading mapping: {e}", file=sys.stderr)
        return 1

    if args.schema is None:
        print(dump_mapping(mapping, limit=args.limit))
        return 0

    schema = mapping.get_schema(args.schema)
    if schema is None:
        print(f"Error: Unknown schema: {args.schema}", file=sys.stderr)
        return 1
    print(json.dumps(schema_to_dict(schema), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
