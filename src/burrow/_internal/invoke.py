"""Invoke helper — call sync or async handlers uniformly.

Route handlers can be ``def`` or ``async def``. Code that calls a
user-provided handler goes through :func:`invoke` so the sync/async check
lives in exactly one place.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any) -> Any:
    """Call *handler* and await the result if it is awaitable."""
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
