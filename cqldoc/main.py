"""
cqldoc — CQL Schema Documentation Extractor
===========================================
Entry point: reads CQL data-definition statements and prints the tables,
columns and their documentation comments as JSON.

Usage:
    cqldoc [options] [schema.cql]

Options:
    --help              Show help
    --file PATH         Read CQL from PATH (default: standard input)
    --compact           Single-line JSON
    --verbose           Debug logging on standard error
    --log-level LEVEL   Logging level (DEBUG, INFO, WARNING, ERROR)
"""

import logging
import sys
from typing import List, Optional

from cqlparser import CqlSyntaxError
from cqlschema import SchemaError, parse_file, parse_stream
from cqldoc.renderer import Renderer

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def print_help():
    print("""
cqldoc — CQL Schema Documentation Extractor

Usage:
    cqldoc < schema.cql                  Read CQL from standard input
    cqldoc schema.cql                    Read CQL from a file
    cqldoc --file schema.cql             Same as above

Options:
    --help              Show this help
    --file PATH         Read CQL from PATH
    --compact           Print JSON on a single line
    --verbose           Same as --log-level DEBUG
    --log-level LEVEL   Logging level for messages on stderr (default: WARNING)

Exit status is 1 on syntax errors, schema errors (unknown table, unknown or
duplicate column on RENAME) and unreadable input.
""")


def configure_logging(level_name: str):
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        print(f"Unknown log level: {level_name}", file=sys.stderr)
        sys.exit(1)
    logging.basicConfig(level=level, stream=sys.stderr, format=LOG_FORMAT)


def main(argv: Optional[List[str]] = None) -> None:
    """Parse CLI arguments and dispatch."""
    args = sys.argv[1:] if argv is None else list(argv)

    if "--help" in args or "-h" in args:
        print_help()
        return

    path = None
    compact = False
    log_level = "WARNING"

    i = 0
    while i < len(args):
        if args[i] in ("--file", "--log-level") and i + 1 >= len(args):
            value = "a path" if args[i] == "--file" else "a level"
            print(f"{args[i]} requires {value}", file=sys.stderr)
            sys.exit(1)
        elif args[i] == "--file":
            path = args[i + 1]
            i += 2
        elif args[i] == "--log-level":
            log_level = args[i + 1]
            i += 2
        elif args[i] == "--verbose":
            log_level = "DEBUG"
            i += 1
        elif args[i] == "--compact":
            compact = True
            i += 1
        elif args[i].startswith("-"):
            print(f"Unknown option: {args[i]}", file=sys.stderr)
            print_help()
            sys.exit(1)
        else:
            path = args[i]
            i += 1

    configure_logging(log_level)

    renderer = Renderer()
    if compact:
        renderer.indent = None

    try:
        if path is None:
            logger.debug("reading CQL from stdin")
            schema = parse_stream(sys.stdin)
        else:
            logger.debug("reading CQL from %s", path)
            schema = parse_file(path)
    except (CqlSyntaxError, SchemaError, OSError, UnicodeDecodeError) as e:
        renderer.render_error(e)
        sys.exit(1)

    renderer.render_schema(schema)


if __name__ == "__main__":
    main()
