"""Reference host router — an ASGI application burrow registers routes on."""

from burrow.server.router import Router, compile_pattern

__all__ = ["Router", "compile_pattern"]
