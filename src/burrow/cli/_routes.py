"""``burrow routes`` — list the composed route table.

Runs discovery, loading and conflict validation over the given mounts and
prints every entry in registration order with method, path, and source.
"""

import argparse
import logging
import sys

import anyio

from burrow.errors import ConfigurationError, RouteBuildError
from burrow.routing.assembler import collect_routes
from burrow.routing.conflicts import normalize_prefix
from burrow.routing.types import MountSpec, TrailingSlash


def parse_mount(value: str, *, trailing_slash: TrailingSlash = TrailingSlash.OFF) -> MountSpec:
    """Parse ``DIR`` or ``DIR=PREFIX`` into a :class:`MountSpec`."""
    root, sep, prefix = value.partition("=")
    if not root:
        msg = f"Invalid mount {value!r}: expected DIR or DIR=PREFIX."
        raise ConfigurationError(msg)
    return MountSpec(
        root_directory=root,
        prefix=normalize_prefix(prefix) if sep else "/",
        trailing_slash=trailing_slash,
    )


def run_routes(args: argparse.Namespace) -> None:
    """List composed routes for one or more mounts.

    Builds the route table exactly as ``build_router`` would and prints
    a table of METHOD, PATH, and SOURCE. Any build error is reported on
    stderr with exit status 1.
    """
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    policy = TrailingSlash(args.trailing_slash)
    try:
        mounts = [parse_mount(value, trailing_slash=policy) for value in args.mounts]
        entries = anyio.run(collect_routes, *mounts)
    except (RouteBuildError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not entries:
        print("No routes discovered.")
        return

    rows = [(entry.method.upper(), entry.path, str(entry.source_path)) for entry in entries]

    # Column widths
    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "SOURCE"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, source in rows:
        print(fmt.format(method, path, source))
