"""Parser for the mapping inspection query language."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import ply.yacc as yacc

from mapping_tables.parsing.query_lexer import QueryLexer


@dataclass
class InfoQuery:
    """An INFO query: header fields and table sizes."""

    pass


@dataclass
class ShowNamesQuery:
    """A SHOW NAMES query."""

    limit: int | None = None


@dataclass
class ShowEnumsQuery:
    """A SHOW ENUMS query."""

    pass


@dataclass
class ShowSchemasQuery:
    """A SHOW SCHEMAS query."""

    pass


@dataclass
class DescribeQuery:
    """A DESCRIBE query: the schema's own properties."""

    schema: str


@dataclass
class EnumQuery:
    """An ENUM query: members of one enum."""

    name: str


@dataclass
class PropertiesQuery:
    """A PROPERTIES OF query: properties including inherited ones."""

    schema: str


@dataclass
class LookupQuery:
    """A LOOKUP query resolving a property against an ancestry."""

    property_name: str
    ancestry: list[str] = field(default_factory=list)
    duplication_index: int = 0


@dataclass
class DumpQuery:
    """A DUMP query, optionally written to a file."""

    output_file: str | None = None


Query = Union[
    InfoQuery,
    ShowNamesQuery,
    ShowEnumsQuery,
    ShowSchemasQuery,
    DescribeQuery,
    EnumQuery,
    PropertiesQuery,
    LookupQuery,
    DumpQuery,
]


class QueryParser:
    """Parser for inspection queries."""

    tokens = QueryLexer.tokens

    def __init__(self) -> None:
        self.lexer = QueryLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : query SEMICOLON
                     | query"""
        p[0] = p[1]

    def p_query_info(self, p: yacc.YaccProduction) -> None:
        """query : INFO"""
        p[0] = InfoQuery()

    def p_query_show_names(self, p: yacc.YaccProduction) -> None:
        """query : SHOW NAMES"""
        p[0] = ShowNamesQuery()

    def p_query_show_names_limit(self, p: yacc.YaccProduction) -> None:
        """query : SHOW NAMES LIMIT INTEGER"""
        p[0] = ShowNamesQuery(limit=p[4])

    def p_query_show_enums(self, p: yacc.YaccProduction) -> None:
        """query : SHOW ENUMS"""
        p[0] = ShowEnumsQuery()

    def p_query_show_schemas(self, p: yacc.YaccProduction) -> None:
        """query : SHOW SCHEMAS"""
        p[0] = ShowSchemasQuery()

    def p_query_describe(self, p: yacc.YaccProduction) -> None:
        """query : DESCRIBE name"""
        p[0] = DescribeQuery(schema=p[2])

    def p_query_enum(self, p: yacc.YaccProduction) -> None:
        """query : ENUM name"""
        p[0] = EnumQuery(name=p[2])

    def p_query_properties(self, p: yacc.YaccProduction) -> None:
        """query : PROPERTIES OF name"""
        p[0] = PropertiesQuery(schema=p[3])

    def p_query_lookup(self, p: yacc.YaccProduction) -> None:
        """query : LOOKUP property_name IN name_list"""
        p[0] = LookupQuery(property_name=p[2], ancestry=p[4])

    def p_query_lookup_duplication(self, p: yacc.YaccProduction) -> None:
        """query : LOOKUP property_name IN name_list DUPLICATION INTEGER"""
        p[0] = LookupQuery(property_name=p[2], ancestry=p[4], duplication_index=p[6])

    def p_query_dump(self, p: yacc.YaccProduction) -> None:
        """query : DUMP"""
        p[0] = DumpQuery()

    def p_query_dump_to(self, p: yacc.YaccProduction) -> None:
        """query : DUMP TO STRING"""
        p[0] = DumpQuery(output_file=p[3])

    def p_name(self, p: yacc.YaccProduction) -> None:
        """name : IDENTIFIER
                | STRING"""
        p[0] = p[1]

    def p_property_name(self, p: yacc.YaccProduction) -> None:
        """property_name : name"""
        p[0] = p[1]

    def p_property_name_index(self, p: yacc.YaccProduction) -> None:
        """property_name : INTEGER"""
        # Array-index pseudo-name
        p[0] = str(p[1])

    def p_name_list_single(self, p: yacc.YaccProduction) -> None:
        """name_list : name"""
        p[0] = [p[1]]

    def p_name_list_multiple(self, p: yacc.YaccProduction) -> None:
        """name_list : name_list COMMA name"""
        p[0] = p[1] + [p[3]]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="statement", **kwargs)

    def parse(self, data: str) -> Query:
        """Parse a query string."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        return self.parser.parse(data, lexer=self.lexer.lexer)
