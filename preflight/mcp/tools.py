"""MCP tool catalogue – the bridge between tool names and the service layer.

Tool names are public API: renaming one breaks clients.
"""

from __future__ import annotations

from preflight.mcp.registry import ToolRegistry
from preflight.schemas.system import DateTimeParams, PingParams
from preflight.services.system_service import system_date_time, system_ping


def register_system_tools(registry: ToolRegistry) -> None:
    registry.register(
        "system.ping",
        PingParams,
        system_ping,
        description="Health check. Echoes the optional message back with pong=true.",
    )
    registry.register(
        "system.dateTime",
        DateTimeParams,
        system_date_time,
        description=(
            "Current date and time (24-hour clock) in an IANA time zone. "
            "Returns dateTime, date, time and the zone used; defaults to UTC."
        ),
    )


def register_all_tools(registry: ToolRegistry) -> None:
    """Register every tool the server exposes."""
    register_system_tools(registry)
