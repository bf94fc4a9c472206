"""Route module loading and handler validation.

Loads a discovered module in isolation and validates its exports into a
:class:`RouteModule` in one place. A route module exports handlers named
after HTTP verbs, in any casing::

    # users/[id].py
    async def get(request, response):
        response.json({"id": request.params["id"]})

    def delete(request, response, next): ...

    patch = [require_login, update_user]   # handler chain

    def on_error(error, request, response, next):   # path-scoped error middleware
        response.set_status(500).send("Could not load user")

Modules are executed under a synthetic name that is registered in
``sys.modules`` only while the module body runs (dataclasses and pickling
resolve classes through it), so repeated builds always see fresh module state.
"""

from __future__ import annotations

import importlib.util
import inspect
import re
import sys
from collections.abc import Callable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import anyio.to_thread

from burrow.config import ComposerConfig
from burrow.errors import (
    DuplicateHandlerExportError,
    InvalidHandlerShapeError,
    RouteModuleLoadError,
)
from burrow.routing.types import (
    HTTP_METHODS,
    METHOD_ALIASES,
    DiscoveredRoute,
    Handler,
    HandlerKind,
    RouteModule,
)

# Export names (lower-cased) recognised as verb handlers
VALID_METHODS: frozenset[str] = frozenset(HTTP_METHODS) | frozenset(METHOD_ALIASES)

_HANDLER_SHAPE = "a function or non-empty list of functions with 2-4 parameters"
_ERROR_HANDLER_SHAPE = "a function with 4 parameters (error, request, response, next)"

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


async def load_route_module(
    route: DiscoveredRoute | str | Path,
    *,
    config: ComposerConfig | None = None,
) -> RouteModule:
    """Load the module backing a discovered route and validate its exports.

    Module execution blocks on import machinery, so it runs in a worker
    thread. Callers await loads one at a time.

    Raises:
        RouteModuleLoadError: If the module cannot be executed.
        DuplicateHandlerExportError: If a verb is exported twice.
        InvalidHandlerShapeError: If an export has the wrong shape.
    """
    config = config or ComposerConfig()
    path = route.absolute_path if isinstance(route, DiscoveredRoute) else Path(route).resolve()
    namespace = await anyio.to_thread.run_sync(_execute_module, path)
    return extract_handlers(
        namespace,
        source_path=path,
        error_handler_export=config.error_handler_export,
    )


def _execute_module(path: Path) -> dict[str, Any]:
    """Execute a module file and return its namespace."""
    safe_stem = re.sub(r"\W", "_", path.stem)
    module_name = f"_burrow_route_{safe_stem}_{id(path):x}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise RouteModuleLoadError(path, "no import loader for this file type")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise RouteModuleLoadError(path, f"{type(exc).__name__}: {exc}") from exc
    finally:
        sys.modules.pop(module_name, None)
    return vars(module)


def _public_exports(namespace: Mapping[str, Any]) -> list[tuple[str, Any]]:
    """Exported names in definition order, honouring ``__all__``."""
    exported = namespace.get("__all__")
    if exported is not None:
        return [(name, namespace[name]) for name in exported if name in namespace]
    return [(name, value) for name, value in namespace.items() if not name.startswith("_")]


def extract_handlers(
    namespace: Mapping[str, Any],
    *,
    source_path: str | Path,
    error_handler_export: str = "on_error",
) -> RouteModule:
    """Validate a module namespace into a :class:`RouteModule`.

    Lower-cases every export name; names matching an HTTP verb token
    (``get``, ``post``, ..., ``del``, ``all``) become verb handlers and
    ``del`` is normalised to ``delete``. The designated error handler
    export is validated separately and never bound to a verb.
    """
    source = Path(source_path)
    handlers: dict[str, tuple[Handler, ...]] = {}
    claimed: dict[str, str] = {}

    for export, value in _public_exports(namespace):
        if export == error_handler_export:
            continue
        token = export.lower()
        if token not in VALID_METHODS:
            continue

        method = METHOD_ALIASES.get(token, token)
        if method in claimed:
            raise DuplicateHandlerExportError(method, (claimed[method], export), source)
        claimed[method] = export

        handlers[method] = _validate_handler_export(export, value, source)

    error_handler = None
    if error_handler_export in namespace:
        error_handler = _validate_error_handler(
            error_handler_export, namespace[error_handler_export], source
        )

    return RouteModule(
        source_path=source,
        handlers=MappingProxyType(handlers),
        error_handler=error_handler,
    )


def normalize_handlers(value: Callable[..., Any] | list[Any] | tuple[Any, ...]) -> tuple[Any, ...]:
    """Wrap a single handler in a tuple; pass sequences through as tuples."""
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def parameter_count(func: Callable[..., Any]) -> int | None:
    """Number of required positional parameters, or ``None`` if unknown.

    Parameters with defaults and ``*args`` are not counted, so
    ``def get(request, response, next=None)`` counts as 2.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    return sum(
        1
        for param in sig.parameters.values()
        if param.kind in _POSITIONAL and param.default is inspect.Parameter.empty
    )


def describe_value(value: Any) -> str:
    """Human description of an export for shape errors."""
    if isinstance(value, type):
        return f"class {value.__name__}"
    if callable(value):
        count = parameter_count(value)
        if count is None:
            return "callable without an inspectable signature"
        return f"function with {count} parameter{'s' if count != 1 else ''}"
    if isinstance(value, (list, tuple)) and not value:
        return f"empty {type(value).__name__}"
    return type(value).__name__


def _as_handler(export: str, value: Any, allowed: range) -> Handler | None:
    if isinstance(value, type) or not callable(value):
        return None
    count = parameter_count(value)
    if count is None or count not in allowed:
        return None
    kind = HandlerKind.ERROR if count == 4 else HandlerKind.REQUEST
    return Handler(func=value, kind=kind, arity=count, export_name=export)


def _validate_handler_export(export: str, value: Any, source: Path) -> tuple[Handler, ...]:
    """A verb export: one handler or a non-empty list of 2-4 parameter handlers."""
    if isinstance(value, (list, tuple)):
        if not value:
            raise InvalidHandlerShapeError(export, _HANDLER_SHAPE, describe_value(value), source)
        chain: list[Handler] = []
        for index, item in enumerate(value):
            handler = _as_handler(export, item, range(2, 5))
            if handler is None:
                actual = f"{type(value).__name__} containing {describe_value(item)} at index {index}"
                raise InvalidHandlerShapeError(export, _HANDLER_SHAPE, actual, source)
            chain.append(handler)
        return tuple(chain)

    handler = _as_handler(export, value, range(2, 5))
    if handler is None:
        raise InvalidHandlerShapeError(export, _HANDLER_SHAPE, describe_value(value), source)
    return (handler,)


def _validate_error_handler(export: str, value: Any, source: Path) -> Handler:
    handler = _as_handler(export, value, range(4, 5))
    if handler is None:
        raise InvalidHandlerShapeError(export, _ERROR_HANDLER_SHAPE, describe_value(value), source)
    return handler
