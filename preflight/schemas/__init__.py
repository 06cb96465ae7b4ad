"""Pydantic schemas: the Envelope and per-tool parameter models."""

from preflight.schemas.common import Envelope, InvocationRequest, ToolParams
from preflight.schemas.system import DateTimeParams, PingParams

__all__ = [
    "Envelope",
    "InvocationRequest",
    "ToolParams",
    "DateTimeParams",
    "PingParams",
]
