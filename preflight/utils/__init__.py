"""Utility modules for the preflight server."""

from preflight.utils.envelope import (
    dumps,
    parse,
    render_error,
    to_wire,
    utc_timestamp,
    wrap_failure,
    wrap_success,
)

__all__ = [
    "dumps",
    "parse",
    "render_error",
    "to_wire",
    "utc_timestamp",
    "wrap_failure",
    "wrap_success",
]
