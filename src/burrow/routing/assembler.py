"""Router assembly — compose mounts into one routing table.

Drives the whole pipeline for every mount, in order::

    discover -> sort -> load (one module at a time) -> entries
    -> validate conflicts across all mounts -> sort -> register

Construction is all-or-nothing: the first error aborts the build and
propagates to the caller unchanged. Nothing is cached between calls.
"""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from burrow.config import ComposerConfig
from burrow.errors import ConfigurationError
from burrow.routing.conflicts import normalize_prefix, resolve_path, validate_routes
from burrow.routing.discovery import discover_routes
from burrow.routing.loader import load_route_module
from burrow.routing.specificity import sort_routes
from burrow.routing.types import (
    MIDDLEWARE_METHOD,
    DiscoveredRoute,
    Handler,
    MountSpec,
    RouteEntry,
    TrailingSlash,
)

logger = logging.getLogger("burrow.routing")


class RoutingSurface(Protocol):
    """What a host router must offer for burrow to register routes on it.

    The bundled :class:`burrow.server.router.Router` implements it; any
    host that matches in registration order can be adapted.
    """

    def add_route(
        self,
        method: str,
        path: str,
        handlers: Sequence[Handler],
        *,
        trailing_slash: TrailingSlash = TrailingSlash.OFF,
    ) -> None: ...

    def use(
        self,
        path: str,
        handlers: Sequence[Handler],
        *,
        trailing_slash: TrailingSlash = TrailingSlash.OFF,
    ) -> None: ...


async def build_router(
    *mounts: MountSpec,
    config: ComposerConfig | None = None,
    surface: RoutingSurface | None = None,
) -> RoutingSurface:
    """Compose mount directories into a single routing table.

    Args:
        mounts: Directories of route modules, composed in order.
        config: Discovery and loading settings.
        surface: Router to register on. Defaults to a fresh
            :class:`burrow.server.router.Router`, frozen before returning.

    Returns:
        The surface with every validated route registered.

    Raises:
        ConfigurationError: If no mounts are given.
        RouteBuildError: Any discovery, loading or conflict error.

    Example::

        router = await build_router(
            MountSpec("app/pages"),
            MountSpec("libs/admin/pages", prefix="/admin"),
        )
    """
    if not mounts:
        msg = "At least one mount specification is required."
        raise ConfigurationError(msg)

    try:
        entries = await collect_routes(*mounts, config=config)
    except Exception:
        logger.error("Failed to initialize file-system router", exc_info=True)
        raise

    if surface is None:
        from burrow.server.router import Router

        target: RoutingSurface = Router()
    else:
        target = surface

    register_routes(target, entries)

    freeze = getattr(target, "freeze", None)
    if surface is None and callable(freeze):
        freeze()

    logger.info(
        "Composed %d route entr%s from %d mount%s",
        len(entries),
        "y" if len(entries) == 1 else "ies",
        len(mounts),
        "" if len(mounts) == 1 else "s",
    )
    return target


async def collect_routes(
    *mounts: MountSpec,
    config: ComposerConfig | None = None,
) -> list[RouteEntry]:
    """Discover, load and validate every route, returning registration order."""
    config = config or ComposerConfig()
    entries: list[RouteEntry] = []
    # Sequential on purpose: claim order and error order stay deterministic
    for mount in mounts:
        entries.extend(await _process_mount(mount, config))

    validate_routes(entries)
    return sort_routes(entries)


async def _process_mount(mount: MountSpec, config: ComposerConfig) -> list[RouteEntry]:
    root = Path(mount.root_directory).resolve()
    prefix = normalize_prefix(mount.prefix)
    entries: list[RouteEntry] = []
    for route in sort_routes(discover_routes(root, config=config)):
        entries.extend(await _load_entries(route, prefix, mount, config))
    logger.debug("Mount %s produced %d entries", mount, len(entries))
    return entries


async def _load_entries(
    route: DiscoveredRoute,
    prefix: str,
    mount: MountSpec,
    config: ComposerConfig,
) -> list[RouteEntry]:
    module = await load_route_module(route, config=config)
    full_path = resolve_path(prefix, route.url_path)

    entries = [
        RouteEntry(
            path=full_path,
            method=method,
            handlers=handlers,
            source_path=route.absolute_path,
            mount=mount,
        )
        for method, handlers in module.handlers.items()
    ]

    # Error middleware runs after the verb handlers it guards
    if module.error_handler is not None:
        entries.append(
            RouteEntry(
                path=full_path,
                method=MIDDLEWARE_METHOD,
                handlers=(module.error_handler,),
                source_path=route.absolute_path,
                mount=mount,
            )
        )
    return entries


def register_routes(surface: RoutingSurface, entries: Sequence[RouteEntry]) -> None:
    """Register entries on *surface* exactly in the given order."""
    for entry in entries:
        if entry.is_middleware:
            surface.use(entry.path, entry.handlers, trailing_slash=entry.mount.trailing_slash)
        else:
            surface.add_route(
                entry.method,
                entry.path,
                entry.handlers,
                trailing_slash=entry.mount.trailing_slash,
            )
        logger.debug(
            "Registered %s %s -> %s (%s)",
            entry.method.upper(),
            entry.path,
            ", ".join(handler.name for handler in entry.handlers),
            entry.source_path,
        )
