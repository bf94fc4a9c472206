"""Prefix resolution and cross-mount conflict detection."""

from collections.abc import Sequence

from burrow.errors import RouteConflictError
from burrow.routing.types import RouteEntry


def normalize_prefix(prefix: str | None) -> str:
    """Normalise a mount prefix.

    Examples::

        ""        -> "/"
        "admin"   -> "/admin"
        "/admin/" -> "/admin"
        "/"       -> "/"
    """
    if not prefix or prefix == "/":
        return "/"
    normalized = prefix if prefix.startswith("/") else f"/{prefix}"
    if normalized.endswith("/") and normalized != "/":
        normalized = normalized[:-1]
    return normalized


def resolve_path(prefix: str, url_path: str) -> str:
    """Join a normalised prefix and a discovered URL path.

    The root of a prefixed mount is the prefix itself: ``("/admin", "/")``
    resolves to ``/admin``, not ``/admin/``.
    """
    if prefix == "/":
        return url_path
    if url_path == "/":
        return prefix
    return f"{prefix}{url_path}"


def validate_routes(entries: Sequence[RouteEntry]) -> Sequence[RouteEntry]:
    """Reject two source files claiming the same ``(METHOD, path)``.

    Returns *entries* unchanged when every key is unique.

    Raises:
        RouteConflictError: Naming both source files and both mounts.
    """
    seen: dict[tuple[str, str], RouteEntry] = {}
    for entry in entries:
        existing = seen.get(entry.key)
        if existing is not None and existing.source_path != entry.source_path:
            method, path = entry.key
            raise RouteConflictError(
                method,
                path,
                existing.source_path,
                existing.mount,
                entry.source_path,
                entry.mount,
            )
        seen.setdefault(entry.key, entry)
    return entries
