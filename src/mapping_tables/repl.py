"""Interactive REPL for inspecting mapping files."""

from __future__ import annotations

import argparse
import logging
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path
from typing import Any

from mapping_tables.errors import MappingError
from mapping_tables.mapping import MappingFile
from mapping_tables.parsing.query_parser import QueryParser
from mapping_tables.query_executor import DumpResult, QueryExecutor, QueryResult

logger = logging.getLogger(__name__)


def _split_statements(content: str) -> list[str]:
    """Split content into statements on semicolons outside string literals."""
    statements = []
    current = []
    in_string = False
    escape_next = False

    for ch in content:
        if escape_next:
            current.append(ch)
            escape_next = False
            continue

        if ch == '\\' and in_string:
            current.append(ch)
            escape_next = True
            continue

        if ch == '"':
            in_string = not in_string
            current.append(ch)
            continue

        if ch == ';' and not in_string:
            stmt = ''.join(current).strip()
            if stmt:
                statements.append(stmt)
            current = []
        else:
            current.append(ch)

    stmt = ''.join(current).strip()
    if stmt:
        statements.append(stmt)

    return statements


def format_value(value: Any, max_width: int = 40) -> str:
    """Format a value for display.

    Args:
        value: The value to format
        max_width: Maximum character width before truncating
    """
    if value is None:
        return "NULL"
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, int):
        if value > 0xFFFFFFFF:
            return f"0x{value:x}"
        return str(value)
    elif isinstance(value, str):
        if len(value) > max_width:
            return value[:max_width - 3] + "..."
        return value
    else:
        s = str(value)
        if len(s) > max_width:
            return s[:max_width - 3] + "..."
        return s


def print_result(result: QueryResult) -> None:
    """Print query results in a formatted table."""
    if isinstance(result, DumpResult):
        if result.output_file:
            try:
                Path(result.output_file).write_text(result.document)
                print(f"Dumped to {result.output_file}")
            except OSError as e:
                print(f"Error writing to {result.output_file}: {e}")
        else:
            print(result.document)
        return

    if result.message:
        print(f"Error: {result.message}")
        return

    if not result.rows:
        print("(no results)")
        return

    col_widths = {col: len(col) for col in result.columns}
    for row in result.rows:
        for col in result.columns:
            col_widths[col] = max(col_widths[col], len(format_value(row.get(col))))

    max_col_width = 40
    for col in col_widths:
        col_widths[col] = min(col_widths[col], max_col_width)

    header = " | ".join(col.ljust(col_widths[col])[:col_widths[col]] for col in result.columns)
    print(header)
    print("-" * len(header))

    for row in result.rows:
        values = []
        for col in result.columns:
            val = format_value(row.get(col))
            if len(val) > col_widths[col]:
                val = val[: col_widths[col] - 3] + "..."
            values.append(val.ljust(col_widths[col]))
        print(" | ".join(values))

    print(f"\n({len(result.rows)} row{'s' if len(result.rows) != 1 else ''})")


def print_help() -> None:
    """Print help information."""
    print("""
Mapping inspection queries

OVERVIEW:
  info                         Header fields and table sizes
  show names [limit N]         List the name table
  show enums                   List enums with their member counts
  show schemas                 List schemas with super types and module paths

SCHEMAS:
  describe <schema>            Properties declared directly on a schema
  enum <name>                  Members of an enum
  properties of <schema>       Properties including inherited ones, closest first

RESOLUTION:
  lookup <name> in <type>[, <type>...] [duplication N]
                               Resolve a property against an ancestry chain
                               (first type is the innermost). A numeric name
                               addresses an element of an array property.

EXPORT:
  dump                         Print the whole mapping as JSON
  dump to "file.json"          Write the JSON document to a file

Names that clash with keywords can be written as `name` or "name".
Other commands: help, clear, exit, quit
""")


def run_repl(mapping: MappingFile, mapping_path: Path) -> int:
    """Run the interactive REPL."""
    print("Mapping inspector")
    print(f"Mapping file: {mapping_path}")
    print("Type 'help' for commands, 'exit' to quit.\n")

    parser = QueryParser()
    executor = QueryExecutor(mapping)

    # Command history
    history_file = Path.home() / ".mapq_history"
    try:
        readline.read_history_file(history_file)
    except FileNotFoundError:
        pass

    try:
        while True:
            try:
                line = input("mapq> ").strip()
            except EOFError:
                print()
                break

            if not line:
                continue

            lower = line.lower().rstrip(";")
            if lower in ("exit", "quit"):
                break
            elif lower == "help":
                print_help()
                continue
            elif lower == "clear":
                print("\033[2J\033[H", end="")
                continue

            try:
                for statement in _split_statements(line):
                    print_result(executor.execute(parser.parse(statement)))
            except SyntaxError as e:
                print(f"Syntax error: {e}")
            except MappingError as e:
                print(f"Error: {e}")

            print()

    finally:
        try:
            readline.set_history_length(1000)
            readline.write_history_file(history_file)
        except OSError as e:
            logger.debug("Could not save history to %s: %s", history_file, e)

    return 0


def run_file(file_path: Path, mapping: MappingFile, verbose: bool = False) -> int:
    """Execute queries from a file.

    Args:
        file_path: Path to the file containing queries
        mapping: The decoded mapping file to query
        verbose: If True, print each query before executing

    Returns:
        0 on success, 1 on error
    """
    try:
        content = file_path.read_text()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    # Strip comments (lines starting with --)
    lines = []
    for line in content.split("\n"):
        if line.strip().startswith("--"):
            continue
        lines.append(line)
    queries = _split_statements("\n".join(lines))

    if not queries:
        print("No queries found in file", file=sys.stderr)
        return 1

    parser = QueryParser()
    executor = QueryExecutor(mapping)

    for query_text in queries:
        if verbose:
            print(f"--> {query_text}")
        try:
            print_result(executor.execute(parser.parse(query_text)))
        except SyntaxError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            return 1
        except MappingError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Inspect the schemas, enums and names stored in a usmap file"
    )
    arg_parser.add_argument(
        "mapping_file",
        type=Path,
        help="Path to the mapping file",
    )
    group = arg_parser.add_mutually_exclusive_group()
    group.add_argument(
        "-c", "--command",
        type=str,
        help="Execute a single command and exit",
    )
    group.add_argument(
        "-f", "--file",
        type=Path,
        help="Execute queries from a file and exit",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print each query before executing (for -f/--file)",
    )
    arg_parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for the decoder (default: WARNING)",
    )

    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.mapping_file.exists():
        print(f"Error: Mapping file not found: {args.mapping_file}", file=sys.stderr)
        return 1

    try:
        mapping = MappingFile.from_file(args.mapping_file)
    except MappingError as e:
        print(f"Error loading mapping: {e}", file=sys.stderr)
        return 1

    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, mapping, args.verbose)

    if args.command:
        try:
            query = QueryParser().parse(args.command)
            print_result(QueryExecutor(mapping).execute(query))
        except (SyntaxError, MappingError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    return run_repl(mapping, args.mapping_file)


if __name__ == "__main__":
    sys.exit(main())
