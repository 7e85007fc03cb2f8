"""Parsing module for the inspection query language."""

from mapping_tables.parsing.query_parser import (
    DescribeQuery,
    DumpQuery,
    EnumQuery,
    InfoQuery,
    LookupQuery,
    PropertiesQuery,
    Query,
    QueryParser,
    ShowEnumsQuery,
    ShowNamesQuery,
    ShowSchemasQuery,
)

__all__ = [
    "DescribeQuery",
    "DumpQuery",
    "EnumQuery",
    "InfoQuery",
    "LookupQuery",
    "PropertiesQuery",
    "Query",
    "QueryParser",
    "ShowEnumsQuery",
    "ShowNamesQuery",
    "ShowSchemasQuery",
]
