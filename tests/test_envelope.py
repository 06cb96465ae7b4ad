"""Tests for the envelope codec."""

from __future__ import annotations

import json
import re

import pytest
from pydantic import ValidationError

from preflight.errors import ToolExecutionError, ToolNotFoundError
from preflight.schemas.common import Envelope
from preflight.utils.envelope import (
    dumps,
    parse,
    render_error,
    to_wire,
    utc_timestamp,
    wrap_failure,
    wrap_success,
)

TS_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class _Unprintable(Exception):
    def __str__(self) -> str:
        raise RuntimeError("cannot render")


def test_utc_timestamp_format():
    assert TS_RE.match(utc_timestamp())


def test_wrap_success_shape():
    env = wrap_success({"pong": True})
    assert env.ok is True
    assert env.error is None
    assert env.data == {"pong": True}
    assert TS_RE.match(env.meta["ts"])


def test_wrap_success_merges_caller_meta():
    env = wrap_success([1, 2], meta={"source": "test", "version": "0.1.0"})
    assert env.meta["source"] == "test"
    assert env.meta["version"] == "0.1.0"
    assert "ts" in env.meta


def test_caller_meta_can_override_timestamp():
    """Caller meta is overlaid after the timestamp is generated."""
    env = wrap_success(None, meta={"ts": "fixed"})
    assert env.meta["ts"] == "fixed"


def test_wrap_failure_from_preflight_error():
    env = wrap_failure(ToolNotFoundError("nope.tool"))
    assert env.ok is False
    assert env.data is None
    assert env.error == "tool not found: 'nope.tool'"


def test_wrap_failure_from_plain_exception():
    assert wrap_failure(ValueError("boom")).error == "boom"


def test_wrap_failure_empty_exception_uses_class_name():
    assert wrap_failure(KeyError()).error == "KeyError"


def test_wrap_failure_stringifies_non_exceptions():
    assert wrap_failure("plain message").error == "plain message"
    assert wrap_failure({"code": 7}).error == "{'code': 7}"


def test_wrap_failure_never_raises_on_unprintable_error():
    env = wrap_failure(_Unprintable())
    assert env.ok is False
    assert env.error == "<unrenderable _Unprintable>"


def test_wrap_failure_drops_unusable_meta():
    env = wrap_failure("bad", meta=42)  # type: ignore[arg-type]
    assert env.error == "bad"
    assert list(env.meta) == ["ts"]


def test_render_error_uses_user_message():
    assert render_error(ToolExecutionError("Invalid time zone specified: X")) == (
        "Invalid time zone specified: X"
    )


def test_envelope_rejects_success_with_error():
    with pytest.raises(ValidationError):
        Envelope(ok=True, data=None, meta={}, error="oops")


def test_envelope_rejects_failure_without_error():
    with pytest.raises(ValidationError):
        Envelope(ok=False, data=None, meta={}, error=None)


def test_envelope_rejects_failure_with_data():
    with pytest.raises(ValidationError):
        Envelope(ok=False, data={"x": 1}, meta={}, error="oops")


def test_wire_format_keys():
    wire = to_wire(wrap_success({"a": 1}))
    assert set(wire) == {"ok", "data", "meta", "error"}
    assert wire["error"] is None
    assert isinstance(wire["meta"]["ts"], str)


@pytest.mark.parametrize(
    "envelope",
    [
        wrap_success({"pong": True, "message": None}),
        wrap_success([1, "two", 3.5, None, {"nested": [True]}], meta={"tool": "x.y"}),
        wrap_failure(ToolExecutionError("Invalid time zone specified: Not/AZone")),
    ],
)
def test_round_trip(envelope):
    assert parse(dumps(envelope)) == envelope


def test_dumps_is_pretty_json():
    text = dumps(wrap_success({"k": "v"}))
    assert text.startswith('{\n  "ok": true')
    assert json.loads(text)["data"] == {"k": "v"}


def test_wrap_failure_drops_non_json_meta():
    env = wrap_failure("bad", meta={"obj": object()})
    assert env.error == "bad"
    assert list(env.meta) == ["ts"]
    assert json.loads(dumps(env))["error"] == "bad"


def test_wrap_success_normalizes_tuples():
    env = wrap_success((1, 2), meta={"pair": ("a", "b")})
    assert env.data == [1, 2]
    assert env.meta["pair"] == ["a", "b"]
    assert parse(dumps(env)) == env


def test_wrap_success_rejects_non_json_data():
    with pytest.raises(ValueError):
        wrap_success({"obj": object()})


def test_envelope_model_rejects_non_json_values():
    with pytest.raises(ValidationError):
        Envelope(ok=True, data=object(), meta={}, error=None)
    with pytest.raises(ValidationError):
        Envelope(ok=True, data=None, meta={"obj": object()}, error=None)
