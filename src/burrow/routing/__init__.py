"""Filesystem route composition.

Turns directory trees of handler modules into one conflict-checked,
specificity-ordered routing table.

Conventions::

    pages/
      index.py            # /
      about.py            # /about
      users/
        index.py          # /users
        [id].py           # /users/:id
        [id]/
          posts.py        # /users/:id/posts
      _helpers.py         # private, skipped
      test_users.py       # test module, skipped

A module exports verb-named handlers (``get``, ``POST``, ``delete`` or
``del``, ``all``, ...) and optionally ``on_error``.
"""

from burrow.routing.assembler import RoutingSurface, build_router, collect_routes, register_routes
from burrow.routing.conflicts import normalize_prefix, resolve_path, validate_routes
from burrow.routing.discovery import discover_routes, file_path_to_url_path
from burrow.routing.loader import extract_handlers, load_route_module
from burrow.routing.specificity import sort_routes, specificity_key
from burrow.routing.types import (
    DiscoveredRoute,
    Handler,
    HandlerKind,
    MountSpec,
    RouteEntry,
    RouteModule,
    TrailingSlash,
)

__all__ = [
    "DiscoveredRoute",
    "Handler",
    "HandlerKind",
    "MountSpec",
    "RouteEntry",
    "RouteModule",
    "RoutingSurface",
    "TrailingSlash",
    "build_router",
    "collect_routes",
    "discover_routes",
    "extract_handlers",
    "file_path_to_url_path",
    "load_route_module",
    "normalize_prefix",
    "register_routes",
    "resolve_path",
    "sort_routes",
    "specificity_key",
    "validate_routes",
]
