"""Main CLI entry point for the xmlx command-line tool.

Provides query commands over a single XML file: path lookup, recursive find,
predicate search, splitting and flattening. Results are printed as JSON.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from xmlx import __version__
from xmlx.api import XMLNodeParser
from xmlx.shared.config import ConfigError, XMLNodeConfig
from xmlx.shared.errors import EmptyDocumentError, XMLNodeError
from xmlx.shared.logging import configure_logging, get_logger
from xmlx.tree import Node

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def load_config(args: argparse.Namespace) -> XMLNodeConfig:
    """Build the configuration from ``--preset`` and ``--config``.

    A configuration file replaces the preset entirely.
    """
    if args.config:
        return XMLNodeConfig.from_json(args.config.read_text())
    return XMLNodeConfig.preset(args.preset)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xmlx",
        description="Query XML documents through generic node trees"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file (JSON)"
    )
    parser.add_argument(
        "--preset",
        choices=["default", "strict", "lenient"],
        default="default",
        help="Configuration preset (default: default)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Get command
    get_parser = subparsers.add_parser("get", help="Select a node by path")
    get_parser.add_argument("file", type=Path, help="XML file")
    get_parser.add_argument("path", help="Path starting with the root name, e.g. a/b/c")
    get_parser.add_argument(
        "--data", "-d",
        action="store_true",
        help="Print the node's data instead of the node"
    )

    # Find command
    find_parser = subparsers.add_parser("find", help="Find the first node with a name")
    find_parser.add_argument("file", type=Path, help="XML file")
    find_parser.add_argument("name", help="Element name to search for")

    # Search command
    search_parser = subparsers.add_parser(
        "search", help="Find a child matching path=value predicates"
    )
    search_parser.add_argument("file", type=Path, help="XML file")
    search_parser.add_argument("root", help="Path below the root holding the candidates")
    search_parser.add_argument("label", help="Name of the candidate elements")
    search_parser.add_argument(
        "predicates",
        nargs="*",
        metavar="PATH=VALUE",
        help="Conditions every candidate must satisfy"
    )
    search_parser.add_argument(
        "--get", "-g",
        dest="sub_label",
        help="Print the data at this path of the match instead of the node"
    )

    # Split command
    split_parser = subparsers.add_parser("split", help="Split nested repeated elements")
    split_parser.add_argument("file", type=Path, help="XML file")
    split_parser.add_argument("label", help="Chain of element names, e.g. b.c")

    # Map command
    map_parser = subparsers.add_parser("map", help="Flatten the document into keys")
    map_parser.add_argument("file", type=Path, help="XML file")
    map_parser.add_argument(
        "--path", "-p",
        help="Flatten the node at this path instead of the root"
    )

    return parser


def parse_predicates(predicates: List[str]) -> List[str]:
    """Turn ``PATH=VALUE`` arguments into alternating path and value items."""
    pairs: List[str] = []
    for predicate in predicates:
        path, sep, value = predicate.partition("=")
        if not sep:
            raise ValueError(f"Predicate must be PATH=VALUE: {predicate}")
        pairs.extend((path, value))
    return pairs


def _print_json(value: Any) -> None:
    print(json.dumps(value, indent=2, ensure_ascii=False))


def _load_root(parser: XMLNodeParser, file_path: Path) -> Node:
    root = parser.parse_file(file_path)
    if root is None:
        raise EmptyDocumentError(f"Document contains no root element: {file_path}")
    return root


def cmd_get(parser: XMLNodeParser, args: argparse.Namespace) -> int:
    """Handle get command."""
    node = parser.parse_path(args.file.read_bytes(), args.path)
    if node is None:
        print(f"Not found: {args.path}", file=sys.stderr)
        return EXIT_NOT_FOUND

    if args.data:
        print(node.data)
    else:
        _print_json(node.to_dict())
    return EXIT_OK


def cmd_find(parser: XMLNodeParser, args: argparse.Namespace) -> int:
    """Handle find command."""
    node = _load_root(parser, args.file).find_node(args.name)
    if node is None:
        print(f"Not found: {args.name}", file=sys.stderr)
        return EXIT_NOT_FOUND

    _print_json(node.to_dict())
    return EXIT_OK


def cmd_search(parser: XMLNodeParser, args: argparse.Namespace) -> int:
    """Handle search command."""
    pairs = parse_predicates(args.predicates)
    root = _load_root(parser, args.file)

    if args.sub_label is not None:
        data = root.get_sub_node_data_by_x(args.root, args.label, args.sub_label, *pairs)
        if data is None:
            print("No matching element", file=sys.stderr)
            return EXIT_NOT_FOUND
        print(data)
        return EXIT_OK

    node = root.get_sub_node_by_x(args.root, args.label, *pairs)
    if node is None:
        print("No matching element", file=sys.stderr)
        return EXIT_NOT_FOUND

    _print_json(node.to_dict())
    return EXIT_OK


def cmd_split(parser: XMLNodeParser, args: argparse.Namespace) -> int:
    """Handle split command."""
    root = _load_root(parser, args.file)
    pieces = root.split(args.label, parser.config.query.split_delimiter)
    if not pieces:
        print(f"Not found: {args.label}", file=sys.stderr)
        return EXIT_NOT_FOUND

    _print_json([piece.to_dict() for piece in pieces])
    return EXIT_OK


def cmd_map(parser: XMLNodeParser, args: argparse.Namespace) -> int:
    """Handle map command."""
    if args.path:
        node = parser.parse_path(args.file.read_bytes(), args.path)
        if node is None:
            print(f"Not found: {args.path}", file=sys.stderr)
            return EXIT_NOT_FOUND
    else:
        node = _load_root(parser, args.file)

    _print_json(dict(sorted(node.map().items())))
    return EXIT_OK


COMMANDS = {
    "get": cmd_get,
    "find": cmd_find,
    "search": cmd_search,
    "split": cmd_split,
    "map": cmd_map,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    arg_parser = create_argument_parser()
    args = arg_parser.parse_args(argv)

    if not args.command:
        arg_parser.print_help()
        return EXIT_ERROR

    try:
        config = load_config(args)
    except (ConfigError, OSError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    logger = get_logger(__name__, None, "cli")
    parser = XMLNodeParser(config)

    try:
        return COMMANDS[args.command](parser, args)
    except XMLNodeError as e:
        logger.debug("Command failed", extra={"command": args.command})
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
