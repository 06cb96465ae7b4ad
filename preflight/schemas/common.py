"""Shared Envelope response schema and the base class for tool parameters."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_validator


class Envelope(BaseModel):
    """Standard envelope for every tool result, on every transport."""

    ok: bool
    data: JsonValue = None
    meta: dict[str, JsonValue] = Field(default_factory=dict, description="Always carries 'ts'")
    error: str | None = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "Envelope":
        if self.ok and self.error is not None:
            raise ValueError("successful envelope cannot carry an error")
        if not self.ok and (self.error is None or self.data is not None):
            raise ValueError("failed envelope needs an error and no data")
        return self


class ToolParams(BaseModel):
    """Base for tool parameter schemas.

    Types are strict (no silent coercion of ``5`` into ``"5"``) and unknown
    keys are dropped, so clients may send extra fields without failing.
    """

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)


class InvocationRequest(BaseModel):
    """One tool call as received by a transport; discarded once answered."""

    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
