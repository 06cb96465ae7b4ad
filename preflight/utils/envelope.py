"""Envelope codec – turns a result or an error into the uniform response shape.

Every transport (MCP tools, HTTP routes) returns the same JSON object::

    {"ok": bool, "data": any | null, "meta": {"ts": "<ISO-8601>", ...}, "error": str | null}

The codec only builds :class:`~preflight.schemas.common.Envelope` values;
turning them into bytes is the transport's job (see :func:`dumps`).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic_core import to_jsonable_python

from preflight.errors import PreflightError
from preflight.schemas.common import Envelope


def utc_timestamp() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _merge_meta(meta: Mapping[str, Any] | None) -> dict[str, Any]:
    # Timestamp first, caller meta overlaid: a caller-supplied "ts" wins.
    return to_jsonable_python({"ts": utc_timestamp(), **(meta or {})})


def render_error(error: object) -> str:
    """Render any error value as a human-readable message. Never raises."""
    try:
        if isinstance(error, PreflightError):
            return error.user_message
        if isinstance(error, BaseException):
            return str(error) or type(error).__name__
        return str(error)
    except Exception:
        return f"<unrenderable {type(error).__name__}>"


def wrap_success(data: Any, meta: Mapping[str, Any] | None = None) -> Envelope:
    """Wrap a successful result.

    Args:
        data: JSON-serializable payload.
        meta: Optional extra metadata (source, version, request id, ...).

    Tuples, dates and models are normalized to their JSON form first.

    Raises:
        ValueError: *data* or *meta* has no JSON representation.
    """
    return Envelope(
        ok=True, data=to_jsonable_python(data), meta=_merge_meta(meta), error=None
    )


def wrap_failure(error: object, meta: Mapping[str, Any] | None = None) -> Envelope:
    """Wrap an error (exception, :class:`PreflightError` or plain value).

    Unusable ``meta`` is dropped rather than allowed to raise: wrapping a
    failure must always succeed.
    """
    message = render_error(error)
    try:
        return Envelope(ok=False, data=None, meta=_merge_meta(meta), error=message)
    except (TypeError, ValueError):
        return Envelope(ok=False, data=None, meta=_merge_meta(None), error=message)


def to_wire(envelope: Envelope) -> dict[str, Any]:
    """JSON-ready dict for *envelope*."""
    return envelope.model_dump(mode="json")


def dumps(envelope: Envelope) -> str:
    """Serialize *envelope* as pretty-printed JSON text."""
    return json.dumps(to_wire(envelope), indent=2)


def parse(text: str | bytes) -> Envelope:
    """Inverse of :func:`dumps`."""
    return Envelope.model_validate_json(text)
