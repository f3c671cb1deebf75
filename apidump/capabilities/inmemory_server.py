"""In-memory server driving ASGI or WSGI apps through httpx transports."""

import asyncio
from typing import Any

import httpx

CONTRACT_VERSION = 1


class InMemoryClient:
    """Blocking HTTP client bound to an in-memory server."""

    def __init__(self, app: Any, interface: str, base_address: str) -> None:
        self.app = app
        self.interface = interface
        self.base_address = base_address

    def get(self, path: str) -> httpx.Response:
        """Send one GET and return the fully read response."""
        if self.interface == "asgi":
            return asyncio.run(self._aget(path))
        transport = httpx.WSGITransport(app=self.app)
        with httpx.Client(transport=transport, base_url=self.base_address) as client:
            response = client.get(path)
            response.read()
            return response

    async def _aget(self, path: str) -> httpx.Response:
        transport = httpx.ASGITransport(app=self.app)
        async with httpx.AsyncClient(
            transport=transport, base_url=self.base_address
        ) as client:
            response = await client.get(path)
            await response.aread()
            return response


class InMemoryServer:
    """Hosts an app without binding a socket."""

    def __init__(self, host: Any) -> None:
        self.app = host.app
        self.interface = host.interface

    def create_client(self, base_address: str) -> InMemoryClient:
        """Return a client whose relative requests resolve against base_address."""
        return InMemoryClient(self.app, self.interface, base_address)
