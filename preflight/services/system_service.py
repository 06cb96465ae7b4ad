"""System service – transport-agnostic ping and clock operations."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from preflight.errors import ToolExecutionError
from preflight.schemas.system import DateTimeParams, PingParams

DEFAULT_TIMEZONE = "UTC"


async def system_ping(params: PingParams) -> dict:
    """Echo the optional message back with ``pong: True``."""
    return {"pong": True, "message": params.message}


def _resolve_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ToolExecutionError(f"Invalid time zone specified: {name}") from exc


async def system_date_time(params: DateTimeParams) -> dict:
    """Return the current wall-clock date and time in the requested zone.

    Args:
        params: ``timezone`` is an IANA zone name; absent means UTC.

    Returns:
        ``{"dateTime": "YYYY-MM-DDTHH:MM:SS", "date": ..., "time": ..., "timezone": ...}``
        where ``time`` is on a 24-hour clock and carries no offset.

    Raises:
        ToolExecutionError: the zone name is unknown.
    """
    tz = DEFAULT_TIMEZONE if params.timezone is None else params.timezone
    now = datetime.now(_resolve_zone(tz))

    date = now.strftime("%Y-%m-%d")
    time = now.strftime("%H:%M:%S")
    return {
        "dateTime": f"{date}T{time}",
        "date": date,
        "time": time,
        "timezone": tz,
    }
