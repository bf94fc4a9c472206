"""Burrow — compose a directory tree of handler modules into one HTTP router.

Every mount is walked, translated into URL patterns, loaded, validated
and merged into a single conflict-checked table ordered by specificity.

Basic usage::

    from burrow import MountSpec, build_router

    router = await build_router(
        MountSpec("app/pages"),
        MountSpec("libs/accounts/pages", prefix="/accounts"),
    )

    # router is an ASGI application
    uvicorn.run(router)

A route module::

    # app/pages/users/[id].py
    async def get(request, response):
        response.json({"id": request.params["id"]})
"""

__version__ = "0.1.0"
__all__ = [
    "BurrowError",
    "ComposerConfig",
    "ConfigurationError",
    "DuplicateHandlerExportError",
    "HTTPError",
    "InvalidHandlerShapeError",
    "InvalidSegmentError",
    "MethodNotAllowed",
    "MissingMountDirectoryError",
    "MountSpec",
    "NotFound",
    "Request",
    "Response",
    "RouteBuildError",
    "RouteConflictError",
    "RouteModuleLoadError",
    "Router",
    "TrailingSlash",
    "build_router",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import burrow`` fast while providing a clean top-level API.
    """
    if name == "build_router":
        from burrow.routing.assembler import build_router

        return build_router

    if name in ("MountSpec", "TrailingSlash"):
        from burrow.routing import types as _types

        return getattr(_types, name)

    if name == "ComposerConfig":
        from burrow.config import ComposerConfig

        return ComposerConfig

    if name == "Router":
        from burrow.server.router import Router

        return Router

    if name in ("Request", "Response"):
        from burrow import http as _http

        return getattr(_http, name)

    if name in (
        "BurrowError",
        "ConfigurationError",
        "DuplicateHandlerExportError",
        "HTTPError",
        "InvalidHandlerShapeError",
        "InvalidSegmentError",
        "MethodNotAllowed",
        "MissingMountDirectoryError",
        "NotFound",
        "RouteBuildError",
        "RouteConflictError",
        "RouteModuleLoadError",
    ):
        from burrow import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
