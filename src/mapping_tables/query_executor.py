"""Executes inspection queries against a decoded mapping file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mapping_tables.dump import dump_mapping
from mapping_tables.mapping import MappingFile
from mapping_tables.parsing.query_parser import (
    DescribeQuery,
    DumpQuery,
    EnumQuery,
    InfoQuery,
    LookupQuery,
    PropertiesQuery,
    Query,
    ShowEnumsQuery,
    ShowNamesQuery,
    ShowSchemasQuery,
)
from mapping_tables.types import Property, describe_property_data

PROPERTY_COLUMNS = ["name", "schema_index", "array_index", "array_size", "type"]


@dataclass
class QueryResult:
    """Result of a query execution."""

    columns: list[str]
    rows: list[dict[str, Any]]
    message: str | None = None


@dataclass
class DumpResult(QueryResult):
    """Result of a DUMP query - the REPL prints or writes the document."""

    document: str = ""
    output_file: str | None = None


def _property_row(prop: Property, **extra: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "name": prop.name,
        "schema_index": prop.schema_index,
        "array_index": prop.array_index,
        "array_size": prop.array_size,
        "type": describe_property_data(prop.data),
    }
    row.update(extra)
    return row


class QueryExecutor:
    """Executes inspection queries against one mapping file."""

    def __init__(self, mapping: MappingFile) -> None:
        self.mapping = mapping

    def execute(self, query: Query) -> QueryResult:
        """Execute a query and return results."""
        if isinstance(query, InfoQuery):
            return self._execute_info(query)
        elif isinstance(query, ShowNamesQuery):
            return self._execute_show_names(query)
        elif isinstance(query, ShowEnumsQuery):
            return self._execute_show_enums(query)
        elif isinstance(query, ShowSchemasQuery):
            return self._execute_show_schemas(query)
        elif isinstance(query, DescribeQuery):
            return self._execute_describe(query)
        elif isinstance(query, EnumQuery):
            return self._execute_enum(query)
        elif isinstance(query, PropertiesQuery):
            return self._execute_properties(query)
        elif isinstance(query, LookupQuery):
            return self._execute_lookup(query)
        elif isinstance(query, DumpQuery):
            return self._execute_dump(query)
        else:
            raise ValueError(f"Unknown query type: {type(query)}")

    def _execute_info(self, query: InfoQuery) -> QueryResult:
        m = self.mapping
        info = [
            ("version", m.version.name),
            ("unofficial", m.is_unofficial),
            ("compression", m.compression_method.name),
            ("object_version", m.object_version),
            ("object_version_ue5", m.object_version_ue5),
            ("custom_versions", len(m.custom_versions)),
            ("net_cl", m.net_cl),
            ("extensions", int(m.extension_flags)),
            ("names", len(m.names)),
            ("enums", len(m.enums)),
            ("schemas", len(m.schemas)),
        ]
        return QueryResult(
            columns=["field", "value"],
            rows=[{"field": k, "value": v} for k, v in info],
        )

    def _execute_show_names(self, query: ShowNamesQuery) -> QueryResult:
        names = self.mapping.names
        if query.limit is not None:
            names = names[:query.limit]
        return QueryResult(
            columns=["index", "name"],
            rows=[{"index": i, "name": n} for i, n in enumerate(names)],
        )

    def _execute_show_enums(self, query: ShowEnumsQuery) -> QueryResult:
        rows = [
            {"enum": name, "members": len(members)}
            for name, members in self.mapping.enums.items()
        ]
        return QueryResult(columns=["enum", "members"], rows=rows)

    def _execute_show_schemas(self, query: ShowSchemasQuery) -> QueryResult:
        rows = []
        for schema in self.mapping.schemas.values():
            rows.append({
                "schema": schema.name,
                "super_type": schema.super_type if schema.has_parent else None,
                "prop_count": schema.prop_count,
                "properties": len(schema.properties),
                "module_path": schema.module_path,
            })
        return QueryResult(
            columns=["schema", "super_type", "prop_count", "properties", "module_path"],
            rows=rows,
        )

    def _execute_describe(self, query: DescribeQuery) -> QueryResult:
        schema = self.mapping.get_schema(query.schema)
        if schema is None:
            return QueryResult(columns=[], rows=[], message=f"Unknown schema: {query.schema}")
        return QueryResult(
            columns=PROPERTY_COLUMNS,
            rows=[_property_row(p) for p in schema.properties.values()],
        )

    def _execute_enum(self, query: EnumQuery) -> QueryResult:
        members = self.mapping.get_enum(query.name)
        if members is None:
            return QueryResult(columns=[], rows=[], message=f"Unknown enum: {query.name}")
        return QueryResult(
            columns=["index", "member"],
            rows=[{"index": i, "member": m} for i, m in enumerate(members)],
        )

    def _execute_properties(self, query: PropertiesQuery) -> QueryResult:
        if self.mapping.get_schema(query.schema) is None:
            return QueryResult(columns=[], rows=[], message=f"Unknown schema: {query.schema}")
        return QueryResult(
            columns=PROPERTY_COLUMNS,
            rows=[_property_row(p) for p in self.mapping.get_all_properties(query.schema)],
        )

    def _execute_lookup(self, query: LookupQuery) -> QueryResult:
        found = self.mapping.get_property_with_duplication_index(
            query.property_name, query.ancestry, query.duplication_index
        )
        if found is None:
            return QueryResult(columns=PROPERTY_COLUMNS + ["global_index"], rows=[])
        prop, global_index = found
        return QueryResult(
            columns=PROPERTY_COLUMNS + ["global_index"],
            rows=[_property_row(prop, global_index=global_index)],
        )

    def _execute_dump(self, query: DumpQuery) -> DumpResult:
        return DumpResult(
            columns=[],
            rows=[],
            document=dump_mapping(self.mapping),
            output_file=query.output_file,
        )
