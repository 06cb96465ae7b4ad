"""Parameter schemas for the ``system.*`` tools."""

from __future__ import annotations

from pydantic import Field

from preflight.schemas.common import ToolParams


class PingParams(ToolParams):
    message: str | None = Field(None, description="Text echoed back in the response")


class DateTimeParams(ToolParams):
    timezone: str | None = Field(
        None, description="IANA time zone name, e.g. 'Europe/Berlin' (defaults to UTC)"
    )
