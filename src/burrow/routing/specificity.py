"""Specificity ordering for route registration.

Hosts that match in registration order (the burrow router, Express-style
stacks) need the most specific routes registered first. The ordering is
total and deterministic, so sorting is idempotent and independent of the
input order::

    1. fewer parameter segments first   (static beats dynamic)
    2. fewer segments first             (shorter paths first)
    3. literal before parameter, slot by slot, left to right
    4. lexicographic path
"""

from collections.abc import Iterable
from typing import TypeAlias, TypeVar

from burrow.routing.types import HTTP_METHODS, MIDDLEWARE_METHOD, DiscoveredRoute, RouteEntry

SpecificityKey: TypeAlias = tuple[int, int, tuple[int, ...], str]

# Equal-path entries: concrete verbs, then ``all``, then error middleware
_METHOD_RANK: dict[str, int] = {
    **{method: rank for rank, method in enumerate(HTTP_METHODS)},
    MIDDLEWARE_METHOD: len(HTTP_METHODS),
}

_T = TypeVar("_T", DiscoveredRoute, RouteEntry)


def specificity_key(path: str) -> SpecificityKey:
    """Sort key for a URL pattern such as ``/users/:id``."""
    segments = [s for s in path.split("/") if s]
    param_flags = tuple(1 if s.startswith(":") else 0 for s in segments)
    return (sum(param_flags), len(segments), param_flags, path)


def _route_key(route: DiscoveredRoute | RouteEntry) -> tuple[SpecificityKey, int, str]:
    if isinstance(route, RouteEntry):
        rank = _METHOD_RANK.get(route.method, len(_METHOD_RANK))
        return (specificity_key(route.path), rank, str(route.source_path))
    return (specificity_key(route.url_path), 0, route.relative_path)


def sort_routes(routes: Iterable[_T]) -> list[_T]:
    """Return *routes* in registration order, most specific first.

    Accepts discovered routes or resolved entries. Equal paths fall back
    to verb rank and then source file, so the result never depends on
    the input order.
    """
    return sorted(routes, key=_route_key)
