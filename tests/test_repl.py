"""Tests for the mapping inspector REPL and command line."""

import json
from pathlib import Path

import pytest

from mapping_builder import sample_file
from mapping_tables.mapping import MappingFile
from mapping_tables.query_executor import QueryResult
from mapping_tables.repl import _split_statements, format_value, main, print_result, run_file


@pytest.fixture
def mapping_path(tmp_path: Path) -> Path:
    path = tmp_path / "Mappings.usmap"
    path.write_bytes(sample_file())
    return path


class TestHelperFunctions:
    """Tests for REPL helper functions."""

    def test_split_statements(self):
        assert _split_statements("info; show enums ;") == ["info", "show enums"]

    def test_split_respects_strings(self):
        assert _split_statements('dump to "a;b.json"; info') == ['dump to "a;b.json"', "info"]

    def test_format_value(self):
        assert format_value(None) == "NULL"
        assert format_value(True) == "true"
        assert format_value(12) == "12"
        assert format_value("x" * 50).endswith("...")
        assert len(format_value("x" * 50)) == 40

    def test_print_result_table(self, capsys):
        result = QueryResult(columns=["name"], rows=[{"name": "Actor"}, {"name": "Pawn"}])
        print_result(result)
        out = capsys.readouterr().out
        assert "Actor" in out
        assert "(2 rows)" in out

    def test_print_result_empty(self, capsys):
        print_result(QueryResult(columns=["name"], rows=[]))
        assert "(no results)" in capsys.readouterr().out

    def test_print_result_message(self, capsys):
        print_result(QueryResult(columns=[], rows=[], message="Unknown schema: X"))
        assert "Error: Unknown schema: X" in capsys.readouterr().out


class TestRunFile:
    """Tests for file execution."""

    def test_run_file(self, tmp_path: Path, mapping_path: Path, capsys):
        """Test a script with comments and several statements."""
        script = tmp_path / "inspect.mapq"
        script.write_text("""
-- Overview
info;
show schemas;

-- Resolution
lookup Name in Pawn;
""")
        mapping = MappingFile.from_file(mapping_path)
        assert run_file(script, mapping, verbose=True) == 0
        out = capsys.readouterr().out
        assert "--> info" in out
        assert "/Script/Engine" in out

    def test_run_file_syntax_error(self, tmp_path: Path, mapping_path: Path, capsys):
        script = tmp_path / "bad.mapq"
        script.write_text("info; show;")
        mapping = MappingFile.from_file(mapping_path)
        assert run_file(script, mapping) == 1
        assert "Syntax error" in capsys.readouterr().err

    def test_run_file_empty(self, tmp_path: Path, mapping_path: Path):
        script = tmp_path / "empty.mapq"
        script.write_text("-- nothing here\n")
        assert run_file(script, MappingFile.from_file(mapping_path)) == 1

    def test_dump_to_file(self, tmp_path: Path, mapping_path: Path):
        out_file = tmp_path / "out.json"
        script = tmp_path / "dump.mapq"
        script.write_text(f'dump to "{out_file}";')
        assert run_file(script, MappingFile.from_file(mapping_path)) == 0
        assert json.loads(out_file.read_text())["net_cl"] == 7


class TestMain:
    """Tests for the command line entry point."""

    def test_command(self, mapping_path: Path, capsys):
        assert main([str(mapping_path), "-c", "enum EColor"]) == 0
        out = capsys.readouterr().out
        assert "Green" in out
        assert "(3 rows)" in out

    def test_command_syntax_error(self, mapping_path: Path, capsys):
        assert main([str(mapping_path), "-c", "describe"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_file(self, tmp_path: Path, mapping_path: Path, capsys):
        script = tmp_path / "q.mapq"
        script.write_text("properties of Pawn")
        assert main([str(mapping_path), "-f", str(script)]) == 0
        assert "(6 rows)" in capsys.readouterr().out

    def test_missing_mapping(self, tmp_path: Path, capsys):
        assert main([str(tmp_path / "absent.usmap"), "-c", "info"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_mapping(self, tmp_path: Path, capsys):
        path = tmp_path / "bad.usmap"
        path.write_bytes(b"\xC4\x30\x09")
        assert main([str(path), "-c", "info", "--log-level", "DEBUG"]) == 1
        assert "Unknown mapping file version: 9" in capsys.readouterr().err
