"""Data models for filesystem-based route composition.

Immutable frozen dataclasses representing mounts, discovered route files,
loaded route modules and the resolved entries registered on a router.
Built fresh on every construction call; never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

# Pseudo-method used for path-scoped error middleware entries
MIDDLEWARE_METHOD = "use"

# Canonical verb order: used for registration tie-breaks at equal paths
HTTP_METHODS: tuple[str, ...] = (
    "get",
    "head",
    "post",
    "put",
    "patch",
    "delete",
    "options",
    "trace",
    "connect",
    "all",
)

# Export names that alias a canonical verb
METHOD_ALIASES: dict[str, str] = {"del": "delete"}


class TrailingSlash(StrEnum):
    """How the host router treats a trailing slash on a request path.

    ``OFF``: ``/users/`` is served by ``/users``.
    ``ENFORCE``: only the exact path matches.
    ``REDIRECT``: ``/users/`` answers 301 (308 for non-GET) with ``Location: /users``.
    """

    OFF = "off"
    ENFORCE = "enforce"
    REDIRECT = "redirect"


class HandlerKind(StrEnum):
    """Capability of a handler in a dispatch chain."""

    REQUEST = "request"  # (request, response[, next])
    ERROR = "error"  # (error, request, response, next)


@dataclass(frozen=True, slots=True)
class MountSpec:
    """One independently-owned directory of route modules.

    Attributes:
        root_directory: Directory walked by discovery.
        prefix: URL prefix applied to every route in the mount.
        trailing_slash: Trailing-slash policy handed to the host router.
    """

    root_directory: str | Path
    prefix: str = "/"
    trailing_slash: TrailingSlash = TrailingSlash.OFF

    def __str__(self) -> str:
        return f"{self.root_directory} -> {self.prefix or '/'}"


@dataclass(frozen=True, slots=True)
class DiscoveredRoute:
    """A candidate handler file found under a mount root.

    Attributes:
        relative_path: Path from the mount root, POSIX separators.
        url_path: Translated URL pattern (e.g., ``/users/:id``).
        absolute_path: Resolved filesystem path of the module.
    """

    relative_path: str
    url_path: str
    absolute_path: Path

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(s for s in self.url_path.split("/") if s)

    @property
    def param_count(self) -> int:
        return sum(1 for s in self.segments if s.startswith(":"))


@dataclass(frozen=True, slots=True)
class Handler:
    """A validated handler function with an explicit kind tag.

    Calling a ``Handler`` calls the wrapped function, so it can be handed
    to any host that expects plain callables.
    """

    func: Callable[..., Any]
    kind: HandlerKind
    arity: int
    export_name: str

    def __call__(self, *args: Any) -> Any:
        return self.func(*args)

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", None) or getattr(
            self.func, "__name__", repr(self.func)
        )


@dataclass(frozen=True, slots=True)
class RouteModule:
    """The validated contract of one loaded route module.

    Attributes:
        source_path: File the module was loaded from.
        handlers: Normalised lower-case verb -> ordered handlers, in export order.
        error_handler: Optional path-scoped error middleware.
    """

    source_path: Path
    handlers: Mapping[str, tuple[Handler, ...]]
    error_handler: Handler | None = None

    @classmethod
    def from_namespace(
        cls,
        namespace: Mapping[str, Any],
        *,
        source_path: str | Path,
        error_handler_export: str = "on_error",
    ) -> RouteModule:
        """Validate a module namespace into a ``RouteModule``.

        The single schema check for route modules; see
        :func:`burrow.routing.loader.extract_handlers`.
        """
        from burrow.routing.loader import extract_handlers

        return extract_handlers(
            namespace,
            source_path=source_path,
            error_handler_export=error_handler_export,
        )

    @property
    def methods(self) -> tuple[str, ...]:
        return tuple(self.handlers)


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A fully resolved, prefix-applied unit registered on a router.

    Attributes:
        path: Resolved URL pattern including the mount prefix.
        method: Lower-case verb, or ``"use"`` for error middleware.
        handlers: Handlers run in order for this entry.
        source_path: Module that declared the entry.
        mount: Mount the module was discovered under.
    """

    path: str
    method: str
    handlers: tuple[Handler, ...]
    source_path: Path
    mount: MountSpec

    @property
    def is_middleware(self) -> bool:
        return self.method == MIDDLEWARE_METHOD

    @property
    def key(self) -> tuple[str, str]:
        """Composite conflict key: ``(METHOD, path)``."""
        return (self.method.upper(), self.path)
