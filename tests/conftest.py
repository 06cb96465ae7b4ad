"""Shared pytest fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from preflight.main import build_registry
from preflight.mcp.registry import ToolRegistry
from preflight.schemas.common import ToolParams


class EchoParams(ToolParams):
    text: str
    count: int = 1


@pytest.fixture
def registry() -> ToolRegistry:
    """The production registry with every tool registered."""
    return build_registry()


@pytest.fixture
def spy():
    """Call-count spy used as the body of test handlers."""
    return AsyncMock(side_effect=lambda params: {"echo": params.text * params.count})


@pytest.fixture
def echo_registry(spy) -> ToolRegistry:
    """Registry holding a single ``test.echo`` tool backed by *spy*."""
    reg = ToolRegistry()

    async def echo(params: EchoParams) -> dict:
        """Repeat text."""
        return await spy(params)

    reg.register("test.echo", EchoParams, echo)
    reg.freeze()
    return reg
