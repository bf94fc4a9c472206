"""HTTP response writer handed to route handlers.

Handlers receive ``(request, response[, next])`` and write through the
response: set a status, add headers, then ``send`` exactly once. Setters
return the response so calls chain::

    response.set_status(201).set_header("Location", "/users/7").json(user)
"""

from __future__ import annotations

import json as json_module
from typing import Any


class ResponseAlreadySentError(RuntimeError):
    """A handler wrote to a response that was already sent."""


class Response:
    """Mutable response builder for a single request."""

    __slots__ = ("body", "content_type", "headers", "sent", "status_code")

    def __init__(self) -> None:
        self.status_code: int = 200
        self.headers: list[tuple[str, str]] = []
        self.content_type: str = "text/html; charset=utf-8"
        self.body: bytes = b""
        self.sent: bool = False

    def __repr__(self) -> str:
        return f"<Response {self.status_code} sent={self.sent}>"

    def set_status(self, status: int) -> Response:
        self._check_not_sent()
        self.status_code = status
        return self

    def set_header(self, name: str, value: str) -> Response:
        """Replace any existing values of *name* with *value*."""
        self._check_not_sent()
        lowered = name.lower()
        self.headers = [(n, v) for n, v in self.headers if n.lower() != lowered]
        self.headers.append((name, value))
        return self

    def add_header(self, name: str, value: str) -> Response:
        """Append a header value, keeping existing ones (e.g. ``Set-Cookie``)."""
        self._check_not_sent()
        self.headers.append((name, value))
        return self

    def get_header(self, name: str) -> str | None:
        lowered = name.lower()
        for n, v in self.headers:
            if n.lower() == lowered:
                return v
        return None

    def send(self, body: str | bytes = b"", *, content_type: str | None = None) -> None:
        """Finish the response with *body*."""
        self._check_not_sent()
        if content_type is not None:
            self.content_type = content_type
        elif isinstance(body, bytes) and body and self.content_type.startswith("text/html"):
            self.content_type = "application/octet-stream"
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        self.sent = True

    def json(self, data: Any) -> None:
        """Finish the response with a JSON body."""
        self.send(
            json_module.dumps(data, default=str),
            content_type="application/json",
        )

    def redirect(self, location: str, status: int = 302) -> None:
        """Finish the response with a redirect to *location*."""
        self.set_status(status).set_header("Location", location)
        self.send(b"", content_type="text/plain; charset=utf-8")

    def _check_not_sent(self) -> None:
        if self.sent:
            msg = "Response already sent; a handler wrote to it after send()."
            raise ResponseAlreadySentError(msg)
