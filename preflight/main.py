"""Process entry-point – builds the registry, owns the transport's lifecycle.

Run with:
    preflight            # console script
    python -m preflight.main

Logs go to stderr; stdout carries the MCP protocol.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from typing import Callable

import anyio
from anyio.abc import TaskStatus

from preflight.config import Settings, settings as default_settings
from preflight.mcp.registry import ToolRegistry
from preflight.mcp.server import create_mcp_server
from preflight.mcp.tools import register_all_tools
from preflight.mcp.transport import StdioTransport, Transport

logger = logging.getLogger("preflight")

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def build_registry() -> ToolRegistry:
    """Create the registry, register every tool, and freeze it."""
    registry = ToolRegistry()
    register_all_tools(registry)
    registry.freeze()
    return registry


def _exit_process(code: int) -> None:
    """Terminate now; a blocked stdin read would otherwise keep us alive."""
    logging.shutdown()
    os._exit(code)


async def _shutdown_on_signal(
    transport: Transport,
    scope: anyio.CancelScope,
    served: anyio.Event,
    timeout: float,
    exit_process: Callable[[int], None],
    *,
    task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED,
) -> None:
    with anyio.open_signal_receiver(*SHUTDOWN_SIGNALS) as signals:
        task_status.started()
        async for signum in signals:
            logger.info("shutting down (%s)", signal.Signals(signum).name)
            try:
                if transport.supports_graceful_close:
                    await transport.close()
            except Exception:
                logger.exception("shutdown error")
            finally:
                scope.cancel()

            with anyio.CancelScope(shield=True):
                with anyio.move_on_after(timeout):
                    await served.wait()
            if not served.is_set():
                logger.info("transport still busy after %.1fs, exiting", timeout)
                exit_process(0)
            return


async def run(
    transport: Transport | None = None,
    settings: Settings | None = None,
    exit_process: Callable[[int], None] = _exit_process,
) -> None:
    """Serve the MCP tools until the client disconnects or a signal arrives.

    On SIGINT/SIGTERM the transport gets ``settings.shutdown_timeout`` seconds
    to stop; after that *exit_process* is called with status 0.
    """
    settings = settings or default_settings
    transport = transport or StdioTransport()
    server = create_mcp_server(build_registry(), settings)
    served = anyio.Event()

    async with anyio.create_task_group() as tg:
        await tg.start(
            _shutdown_on_signal,
            transport,
            tg.cancel_scope,
            served,
            settings.shutdown_timeout,
            exit_process,
        )
        logger.info("MCP server started")
        logger.debug(
            "server '%s' v%s on %s transport",
            settings.mcp_server_name,
            settings.mcp_server_version,
            transport.name,
        )
        try:
            await transport.serve(server)
        finally:
            served.set()
        tg.cancel_scope.cancel()


def main() -> None:
    """CLI entry-point."""
    logging.basicConfig(
        level=default_settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        asyncio.run(run())
    except Exception:
        logger.exception("fatal")
        sys.exit(1)


if __name__ == "__main__":
    main()
