"""Transports that carry MCP messages between a client and the server."""

from __future__ import annotations

from typing import ClassVar

import anyio
from mcp.server import Server
from mcp.server.stdio import stdio_server


class Transport:
    """Base transport.

    ``supports_graceful_close`` tells the composition root whether
    :meth:`close` does anything useful before the process exits.
    """

    name: ClassVar[str] = "transport"
    supports_graceful_close: ClassVar[bool] = False

    async def serve(self, server: Server) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        """Stop serving. No-op unless the transport supports graceful close."""


class StdioTransport(Transport):
    """Line-delimited JSON-RPC over the process's stdin/stdout."""

    name = "stdio"
    supports_graceful_close = True

    def __init__(self) -> None:
        self._scope: anyio.CancelScope | None = None

    async def serve(self, server: Server) -> None:
        self._scope = anyio.CancelScope()
        with self._scope:
            async with stdio_server() as (read_stream, write_stream):
                await server.run(
                    read_stream, write_stream, server.create_initialization_options()
                )

    async def close(self) -> None:
        if self._scope is not None:
            self._scope.cancel()
