"""Burrow CLI — inspect composed route tables.

Entry point registered as ``burrow`` in ``pyproject.toml``::

    [project.scripts]
    burrow = "burrow.cli:main"
"""

import argparse
import sys

from burrow.routing.types import TrailingSlash


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``burrow`` command."""
    parser = argparse.ArgumentParser(
        prog="burrow",
        description="Burrow — compose directory trees of handler modules into one router.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- burrow routes ----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the composed route table")
    routes_parser.add_argument(
        "mounts",
        nargs="+",
        metavar="DIR[=PREFIX]",
        help="Mount directory, optionally with a URL prefix (e.g. libs/admin=/admin)",
    )
    routes_parser.add_argument(
        "--trailing-slash",
        choices=[policy.value for policy in TrailingSlash],
        default=TrailingSlash.OFF.value,
        help="Trailing-slash policy applied to every mount",
    )
    routes_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log discovery and registration details",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from burrow.cli._routes import run_routes

        run_routes(args)
