"""
relatable.cli - Command-line interface.

Main entry point for the relatable CLI tool.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from relatable import __version__
from relatable.commands import export, summary, tags
from relatable.config import get_config
from relatable.logging import LoggingConfig, configure_logging


def _add_root(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        type=Path,
        help="Directory to index",
        metavar="ROOT",
    )


def _add_json(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="relatable",
        description="Index files, directories and their .tags files as one graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  relatable summary ~/photos                 # Count nodes and edges
  relatable tags ~/photos ~/photos/img.png   # Tags applying to a file
  relatable tagged ~/photos favorite         # Paths tagged "favorite"
  relatable list-tags ~/photos               # Every known tag
  relatable export ~/photos > graph.json     # Full graph as JSON

Tag files:
  <stem>.tags   one tag per line, attached to siblings named or stemmed <stem>
  dir.tags      one tag per line, attached to the containing directory
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"relatable {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (default: nearest .relatable.toml)",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # summary command
    summary_parser = subparsers.add_parser(
        "summary",
        help="Show node and edge counts",
    )
    _add_root(summary_parser)
    _add_json(summary_parser)

    # tags command
    tags_parser = subparsers.add_parser(
        "tags",
        help="List the tags applying to a path",
    )
    _add_root(tags_parser)
    tags_parser.add_argument(
        "path",
        type=Path,
        help="File or directory inside ROOT",
        metavar="PATH",
    )
    tags_parser.add_argument(
        "--direct",
        action="store_true",
        help="Only tags attached to PATH itself, not inherited from directories",
    )
    _add_json(tags_parser)

    # tagged command
    tagged_parser = subparsers.add_parser(
        "tagged",
        help="List the paths a tag is assigned to",
    )
    _add_root(tagged_parser)
    tagged_parser.add_argument(
        "tag",
        help="Exact tag name",
        metavar="TAG",
    )
    tagged_parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Include everything inside tagged directories",
    )
    _add_json(tagged_parser)

    # list-tags command
    list_parser = subparsers.add_parser(
        "list-tags",
        help="List every known tag",
    )
    _add_root(list_parser)
    _add_json(list_parser)

    # export command
    export_parser = subparsers.add_parser(
        "export",
        help="Write the graph as JSON to stdout",
    )
    _add_root(export_parser)
    export_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    try:
        config = get_config(args.root, args.config)

        log_config = LoggingConfig.from_dict(config)
        if args.verbose:
            log_config = LoggingConfig(level="DEBUG")
        elif args.quiet:
            log_config = LoggingConfig(level="ERROR")
        configure_logging(log_config, force=True)

        if args.command == "summary":
            return summary.run(args, config)
        elif args.command == "tags":
            return tags.run_tags(args, config)
        elif args.command == "tagged":
            return tags.run_tagged(args, config)
        elif args.command == "list-tags":
            return tags.run_list(args, config)
        elif args.command == "export":
            return export.run(args, config)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
