"""Testing utilities for burrow route trees.

Usage::

    from burrow.testing import TestClient

    router = await build_router(MountSpec("pages"))
    async with TestClient(router) as client:
        response = await client.get("/")
        assert response.status == 200
"""

from burrow.testing.client import ClientResponse, TestClient

__all__ = ["ClientResponse", "TestClient"]
