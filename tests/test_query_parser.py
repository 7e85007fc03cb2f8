"""Tests for the inspection query parser."""

import pytest

from mapping_tables.parsing.query_lexer import QueryLexer, escape_if_keyword
from mapping_tables.parsing.query_parser import (
    DescribeQuery,
    DumpQuery,
    EnumQuery,
    InfoQuery,
    LookupQuery,
    PropertiesQuery,
    QueryParser,
    ShowEnumsQuery,
    ShowNamesQuery,
    ShowSchemasQuery,
)


class TestQueryLexer:
    """Tests for the query lexer."""

    def test_tokenize_lookup(self):
        """Test tokenizing a lookup query."""
        lexer = QueryLexer()
        lexer.build()

        tokens = lexer.tokenize("lookup Health in Pawn, Actor duplication 2")
        token_types = [t.type for t in tokens]

        assert token_types == [
            "LOOKUP", "IDENTIFIER", "IN", "IDENTIFIER", "COMMA", "IDENTIFIER", "DUPLICATION", "INTEGER",
        ]
        assert tokens[-1].value == 2

    def test_keywords_case_insensitive(self):
        """Test that keywords match regardless of case."""
        lexer = QueryLexer()
        lexer.build()
        assert [t.type for t in lexer.tokenize("SHOW Schemas")] == ["SHOW", "SCHEMAS"]

    def test_backtick_identifier(self):
        """Test that backticks turn keywords into identifiers."""
        lexer = QueryLexer()
        lexer.build()
        tokens = lexer.tokenize("describe `enum`")
        assert tokens[1].type == "IDENTIFIER"
        assert tokens[1].value == "enum"

    def test_comment(self):
        """Test that comments are skipped."""
        lexer = QueryLexer()
        lexer.build()
        assert [t.type for t in lexer.tokenize("info -- header fields")] == ["INFO"]

    def test_illegal_character(self):
        lexer = QueryLexer()
        lexer.build()
        with pytest.raises(SyntaxError):
            lexer.tokenize("describe @")

    def test_escape_if_keyword(self):
        assert escape_if_keyword("Info") == "`Info`"
        assert escape_if_keyword("Actor") == "Actor"


class TestQueryParser:
    """Tests for the query parser."""

    @pytest.fixture
    def parser(self):
        return QueryParser()

    def test_info(self, parser):
        assert parser.parse("info") == InfoQuery()

    def test_show(self, parser):
        """Test the show statements."""
        assert parser.parse("show names") == ShowNamesQuery()
        assert parser.parse("show names limit 5;") == ShowNamesQuery(limit=5)
        assert parser.parse("show enums") == ShowEnumsQuery()
        assert parser.parse("show schemas;") == ShowSchemasQuery()

    def test_describe(self, parser):
        assert parser.parse("describe Actor") == DescribeQuery(schema="Actor")
        assert parser.parse('describe "Odd Name"') == DescribeQuery(schema="Odd Name")

    def test_enum(self, parser):
        assert parser.parse("enum EColor") == EnumQuery(name="EColor")

    def test_properties(self, parser):
        assert parser.parse("properties of Pawn") == PropertiesQuery(schema="Pawn")

    def test_lookup(self, parser):
        """Test lookups with and without a duplication index."""
        assert parser.parse("lookup Health in Pawn") == LookupQuery(
            property_name="Health", ancestry=["Pawn"]
        )
        assert parser.parse("lookup Flags in Actor, Object duplication 2") == LookupQuery(
            property_name="Flags", ancestry=["Actor", "Object"], duplication_index=2
        )

    def test_lookup_numeric_name(self, parser):
        """Test that an integer property name becomes its decimal string."""
        query = parser.parse("lookup 3 in Slots, Inventory")
        assert query == LookupQuery(property_name="3", ancestry=["Slots", "Inventory"])

    def test_dump(self, parser):
        assert parser.parse("dump") == DumpQuery()
        assert parser.parse('dump to "out.json"') == DumpQuery(output_file="out.json")

    def test_parser_reusable(self, parser):
        """Test that one parser handles several statements."""
        assert parser.parse("info") == InfoQuery()
        assert parser.parse("enum EColor") == EnumQuery(name="EColor")

    def test_syntax_errors(self, parser):
        """Test that malformed statements raise SyntaxError."""
        with pytest.raises(SyntaxError):
            parser.parse("show")
        with pytest.raises(SyntaxError):
            parser.parse("lookup Health in")
        with pytest.raises(SyntaxError):
            parser.parse("properties Pawn")
