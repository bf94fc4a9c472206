"""Host router — registration-order matching with continuation chains.

The reference :class:`~burrow.routing.assembler.RoutingSurface`. Routes
are matched in the order they were registered, so the composer's
specificity order decides precedence. Each matched layer runs its
handlers in order, Express style:

- request handlers ``(request, response[, next])`` run while there is no
  error; error handlers ``(error, request, response, next)`` run only
  while there is one;
- ``next()`` continues with the next handler, ``next(error)`` (or raising)
  switches to error mode;
- a handler that returns without calling ``next`` ends dispatch.

Unhandled errors become a 500 response; nothing sent becomes 404, or 405
when the path matched under another method.
"""

import inspect
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from burrow._internal.asgi import Receive, Scope, Send
from burrow._internal.invoke import invoke
from burrow.errors import ConfigurationError, HTTPError, MethodNotAllowed, NotFound
from burrow.http.request import Request
from burrow.http.response import Response
from burrow.routing.loader import normalize_handlers, parameter_count
from burrow.routing.types import Handler, HandlerKind, TrailingSlash
from burrow.server.sender import send_response

logger = logging.getLogger("burrow.server")

_PARAM_RE = re.compile(r"^:([A-Za-z_][A-Za-z0-9_]*)$")

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class _Redirect:
    """Match result: the path differs from the route only by a trailing slash."""

    __slots__ = ("location",)

    def __init__(self, location: str) -> None:
        self.location = location


def compile_pattern(pattern: str, *, prefix: bool = False) -> re.Pattern[str]:
    """Compile a ``/users/:id`` pattern into a regex.

    With ``prefix=True`` the pattern also matches every path below it
    (segment boundary), as used by path-scoped middleware.
    """
    parts: list[str] = []
    for segment in (s for s in pattern.split("/") if s):
        param = _PARAM_RE.match(segment)
        parts.append(f"(?P<{param.group(1)}>[^/]+)" if param else re.escape(segment))
    body = "".join(f"/{part}" for part in parts)
    try:
        if prefix:
            return re.compile(f"^{body}(?:/.*)?$")
        return re.compile(f"^{body or '/'}$")
    except re.error as exc:
        msg = f"Invalid route pattern {pattern!r}: {exc}"
        raise ConfigurationError(msg) from exc


def _positional_capacity(func: Callable[..., Any]) -> int:
    """How many positional arguments *func* accepts (optional ones included)."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return 4
    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 4
        if param.kind in _POSITIONAL:
            count += 1
    return count


def _as_handler(value: Handler | Callable[..., Any]) -> Handler:
    """Accept tagged handlers as-is; classify plain callables by arity."""
    if isinstance(value, Handler):
        return value
    count = parameter_count(value)
    if count is None or not 2 <= count <= 4:
        msg = f"Handler {value!r} must take 2-4 positional parameters."
        raise ConfigurationError(msg)
    kind = HandlerKind.ERROR if count == 4 else HandlerKind.REQUEST
    name = getattr(value, "__name__", "handler")
    return Handler(func=value, kind=kind, arity=count, export_name=name)


@dataclass(frozen=True, slots=True)
class Layer:
    """One registered route or middleware, matched in registration order.

    ``method`` is an upper-case verb, ``"ALL"``, or ``None`` for
    path-scoped middleware.
    """

    method: str | None
    pattern: str
    regex: re.Pattern[str]
    handlers: tuple[tuple[Handler, int], ...]
    trailing_slash: TrailingSlash

    def accepts(self, method: str) -> bool:
        if self.method is None or self.method in ("ALL", method):
            return True
        return method == "HEAD" and self.method == "GET"

    def match(self, path: str) -> dict[str, str] | _Redirect | None:
        found = self.regex.match(path)
        if found is not None:
            return found.groupdict()

        if path == "/" or not path.endswith("/") or self.trailing_slash is TrailingSlash.ENFORCE:
            return None

        stripped = path.rstrip("/") or "/"
        found = self.regex.match(stripped)
        if found is None:
            return None
        if self.trailing_slash is TrailingSlash.REDIRECT and self.method is not None:
            return _Redirect(stripped)
        return found.groupdict()


class _Next:
    """The ``next`` continuation handed to a handler."""

    __slots__ = ("called", "error")

    def __init__(self) -> None:
        self.called = False
        self.error: Exception | None = None

    def __call__(self, error: Exception | None = None) -> None:
        self.called = True
        self.error = error


class Router:
    """Registration-order router and ASGI application.

    Usage::

        router = Router()
        router.add_route("get", "/users/:id", [show_user])
        router.use("/users", [on_error])
        router.freeze()

        # mount on any ASGI server
        uvicorn.run(router)
    """

    __slots__ = ("_frozen", "_layers")

    def __init__(self) -> None:
        self._layers: list[Layer] = []
        self._frozen = False

    # -- Registration --

    def add_route(
        self,
        method: str,
        path: str,
        handlers: Sequence[Handler | Callable[..., Any]] | Callable[..., Any],
        *,
        trailing_slash: TrailingSlash = TrailingSlash.OFF,
    ) -> None:
        """Register handlers for one verb (or ``"all"``) on *path*."""
        self._add(method.upper(), path, handlers, trailing_slash, prefix=False)

    def use(
        self,
        path: str,
        handlers: Sequence[Handler | Callable[..., Any]] | Callable[..., Any],
        *,
        trailing_slash: TrailingSlash = TrailingSlash.OFF,
    ) -> None:
        """Register middleware for *path* and every path below it."""
        self._add(None, path, handlers, trailing_slash, prefix=True)

    def _add(
        self,
        method: str | None,
        path: str,
        handlers: Any,
        trailing_slash: TrailingSlash,
        *,
        prefix: bool,
    ) -> None:
        if self._frozen:
            msg = "Cannot add routes after the router has been frozen."
            raise RuntimeError(msg)
        chain = tuple(
            (handler, _positional_capacity(handler.func))
            for handler in map(_as_handler, normalize_handlers(handlers))
        )
        if not chain:
            msg = f"No handlers given for {method or 'USE'} {path}."
            raise ConfigurationError(msg)
        self._layers.append(
            Layer(
                method=method,
                pattern=path,
                regex=compile_pattern(path, prefix=prefix),
                handlers=chain,
                trailing_slash=TrailingSlash(trailing_slash),
            )
        )

    def freeze(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> list[tuple[str, str]]:
        """``(METHOD, pattern)`` pairs in registration order (``USE`` for middleware)."""
        return [(layer.method or "USE", layer.pattern) for layer in self._layers]

    # -- Dispatch --

    async def dispatch(self, request: Request) -> Response:
        """Run *request* through the layers and return the finished response."""
        response = Response()
        error: Exception | None = None
        allowed: set[str] = set()

        for layer in self._layers:
            result = layer.match(request.path)
            if result is None:
                continue
            if not layer.accepts(request.method):
                if layer.method is not None:
                    allowed.add(layer.method)
                continue
            if isinstance(result, _Redirect):
                if error is None:
                    location = result.location
                    if request.query.raw:
                        location = f"{location}?{request.query.raw.decode('latin-1')}"
                    # Non-GET requests must keep their method and body
                    status = 301 if request.method in ("GET", "HEAD") else 308
                    response.redirect(location, status=status)
                    return response
                continue

            bound = request.with_params(result)
            error, proceed = await self._run_layer(layer, bound, response, error)
            if not proceed:
                return response

        if error is not None:
            self._finish_with_error(error, request, response)
        elif not response.sent:
            if allowed:
                self._finish_with_error(MethodNotAllowed(frozenset(allowed)), request, response)
            else:
                not_found = NotFound(f"No route matches {request.method} {request.path!r}")
                self._finish_with_error(not_found, request, response)
        return response

    async def _run_layer(
        self,
        layer: Layer,
        request: Request,
        response: Response,
        error: Exception | None,
    ) -> tuple[Exception | None, bool]:
        """Run one layer's chain. Returns the error state and whether to continue."""
        for handler, capacity in layer.handlers:
            if (error is None) != (handler.kind is HandlerKind.REQUEST):
                continue
            nxt = _Next()
            if handler.kind is HandlerKind.REQUEST:
                args: tuple[Any, ...] = (request, response, nxt)
            else:
                args = (error, request, response, nxt)
            try:
                await invoke(handler.func, *args[:capacity])
            except Exception as exc:
                error = exc
                continue
            if not nxt.called:
                return error, False
            error = nxt.error
        return error, True

    def _finish_with_error(self, error: Exception, request: Request, response: Response) -> None:
        if isinstance(error, HTTPError):
            status, detail, headers = error.status, error.detail, error.headers
        else:
            logger.error(
                "Unhandled error in %s %s", request.method, request.path, exc_info=error
            )
            status, detail, headers = 500, "Internal Server Error", ()

        if response.sent:
            return
        response.set_status(status)
        for name, value in headers:
            response.set_header(name, value)
        response.send(detail, content_type="text/plain; charset=utf-8")

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            msg = f"Unsupported ASGI scope type: {scope['type']!r}"
            raise ConfigurationError(msg)

        request = Request.from_asgi(scope, receive)
        response = await self.dispatch(request)
        await send_response(response, send, head=request.method == "HEAD")

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self.freeze()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
