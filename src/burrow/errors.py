"""Burrow exception hierarchy.

Shared across discovery, loading, validation, assembly and the host
router so every module raises and catches the same types.

Every ``RouteBuildError`` is fatal to router construction. They carry the
offending file paths and mounts as attributes so callers can report them
without parsing the message.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from burrow.routing.types import MountSpec


class BurrowError(Exception):
    """Base for all burrow-specific errors."""


class ConfigurationError(BurrowError):
    """Raised when composer or router configuration is invalid."""


class RouteBuildError(BurrowError):
    """Base for errors that abort router construction."""


class InvalidSegmentError(RouteBuildError):
    """A path segment is neither a valid literal nor a ``[param]`` token."""

    def __init__(self, segment: str, path: str | Path) -> None:
        self.segment = segment
        self.path = str(path)
        super().__init__(
            f"Invalid route segment {segment!r} in {self.path}. "
            "Segments must contain only letters, digits, hyphens or underscores, "
            "or be a parameter like [id]."
        )


class DuplicateHandlerExportError(RouteBuildError):
    """A module exports the same HTTP verb under two different names."""

    def __init__(self, method: str, exports: tuple[str, str], source_path: str | Path) -> None:
        self.method = method
        self.exports = exports
        self.source_path = str(source_path)
        first, second = exports
        super().__init__(
            f"Duplicate handler export for {method.upper()} in {self.source_path}: "
            f"{first!r} and {second!r} claim the same method with different casings."
        )


class InvalidHandlerShapeError(RouteBuildError):
    """An exported handler is not a function, a list of functions, or has the wrong arity."""

    def __init__(self, export: str, expected: str, actual: str, source_path: str | Path) -> None:
        self.export = export
        self.expected = expected
        self.actual = actual
        self.source_path = str(source_path)
        super().__init__(
            f"Invalid handler export {export!r} in {self.source_path}. "
            f"Expected {expected}, got {actual}."
        )


class RouteConflictError(RouteBuildError):
    """Two source files resolve to the same (method, path) pair."""

    def __init__(
        self,
        method: str,
        path: str,
        first_source: str | Path,
        first_mount: MountSpec,
        second_source: str | Path,
        second_mount: MountSpec,
    ) -> None:
        self.method = method.upper()
        self.path = path
        self.first_source = str(first_source)
        self.first_mount = first_mount
        self.second_source = str(second_source)
        self.second_mount = second_mount
        super().__init__(
            "Route conflict detected:\n"
            f"  {self.method} {path}\n"
            "  Defined in:\n"
            f"    1. {self.first_source} (mount: {first_mount})\n"
            f"    2. {self.second_source} (mount: {second_mount})"
        )


class MissingMountDirectoryError(RouteBuildError):
    """A configured mount root does not exist or is not a directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = str(root)
        super().__init__(f"Mount directory does not exist: {self.root}")


class RouteModuleLoadError(RouteBuildError):
    """Executing a route module raised. The original error is ``__cause__``."""

    def __init__(self, source_path: str | Path, reason: str) -> None:
        self.source_path = str(source_path)
        super().__init__(f"Failed to load route module {self.source_path}: {reason}")


@dataclass(frozen=True, slots=True)
class HTTPError(BurrowError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or the host router. The router turns these into
    responses when no error middleware handles them.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
