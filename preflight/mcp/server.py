"""MCP server factory – exposes a :class:`ToolRegistry` over the MCP protocol."""

from __future__ import annotations

import logging

from mcp.server import Server
from mcp.types import TextContent, Tool

from preflight.config import Settings, settings as default_settings
from preflight.mcp.registry import ToolRegistry
from preflight.schemas.common import InvocationRequest
from preflight.utils.envelope import dumps

logger = logging.getLogger("preflight.mcp.server")


def tool_definitions(registry: ToolRegistry) -> list[Tool]:
    """MCP tool listing built from the registry's descriptors."""
    return [
        Tool(
            name=descriptor.name,
            description=descriptor.description,
            inputSchema=descriptor.input_schema(),
        )
        for descriptor in registry.descriptors()
    ]


def create_mcp_server(registry: ToolRegistry, settings: Settings | None = None) -> Server:
    """Create and configure the MCP server instance."""
    settings = settings or default_settings
    server = Server(settings.mcp_server_name, version=settings.mcp_server_version)
    definitions = tool_definitions(registry)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return definitions

    # The registry validates parameters itself so that bad input still
    # produces an envelope instead of an SDK-level error result.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict | None) -> list[TextContent]:
        request = InvocationRequest(tool_name=name, arguments=arguments or {})
        logger.debug("tools/call %s args=%s", request.tool_name, request.arguments)
        envelope = await registry.dispatch(request.tool_name, request.arguments)
        return [TextContent(type="text", text=dumps(envelope))]

    return server
