"""Tool registry – binds tool names to a parameter schema and a handler.

The registry is the dispatch boundary: whatever happens inside a tool
(unknown name, bad parameters, a raising handler) comes back out of
:meth:`ToolRegistry.dispatch` as an :class:`~preflight.schemas.common.Envelope`.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import re
import time
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError
from pydantic_core import to_jsonable_python

from preflight.errors import (
    DuplicateToolError,
    PreflightError,
    RegistrationError,
    RegistryFrozenError,
    ToolNotFoundError,
    ToolValidationError,
)
from preflight.schemas.common import Envelope, ToolParams
from preflight.utils.envelope import wrap_failure, wrap_success

logger = logging.getLogger("preflight.mcp.registry")

ToolHandler = Callable[[Any], Any]

TOOL_NAME_RE = re.compile(r"^[a-z][A-Za-z0-9_]*(\.[A-Za-z][A-Za-z0-9_]*)+$")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class ToolDescriptor:
    """A registered tool: name, parameter schema and handler."""

    name: str
    params_model: type[ToolParams]
    handler: ToolHandler
    description: str = ""
    is_async: bool = True

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the accepted parameters."""
        return self.params_model.model_json_schema()

    def validate(self, arguments: Mapping[str, Any] | None) -> ToolParams:
        """Check raw *arguments* against the schema, filling in defaults."""
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ToolValidationError(self.name, ["parameters must be an object"])
        try:
            return self.params_model.model_validate(dict(arguments))
        except ValidationError as exc:
            issues = [
                f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
                for err in exc.errors()
            ]
            raise ToolValidationError(self.name, issues) from exc

    async def invoke(self, params: ToolParams) -> Any:
        """Run the handler; plain functions go to a worker thread."""
        if self.is_async:
            result = self.handler(params)
        else:
            result = await asyncio.to_thread(self.handler, params)
        if inspect.isawaitable(result):
            result = await result
        return result


def _is_async_callable(handler: ToolHandler) -> bool:
    if inspect.iscoroutinefunction(handler):
        return True
    call = getattr(type(handler), "__call__", None)
    return inspect.iscoroutinefunction(call)


def _check_handler(name: str, params_model: type[ToolParams], handler: ToolHandler) -> None:
    """Reject handlers whose shape cannot accept a single validated params object."""
    if not (isinstance(params_model, type) and issubclass(params_model, ToolParams)):
        raise RegistrationError(f"'{name}': params_model must be a ToolParams subclass")
    if not callable(handler):
        raise RegistrationError(f"'{name}': handler is not callable")

    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        return  # builtins without introspectable signatures

    parameters = list(signature.parameters.values())
    if not parameters or parameters[0].kind not in _POSITIONAL:
        raise RegistrationError(f"'{name}': handler must accept one positional params argument")
    extra_required = [
        p for p in parameters[1:] if p.default is p.empty and p.kind not in _VARIADIC
    ]
    if extra_required:
        raise RegistrationError(
            f"'{name}': handler has extra required parameters "
            f"{[p.name for p in extra_required]}"
        )

    try:
        hints = typing.get_type_hints(handler)
    except Exception:
        return  # unresolvable annotations are not worth failing startup over
    expected = hints.get(parameters[0].name)
    if isinstance(expected, type) and not issubclass(params_model, expected):
        raise RegistrationError(
            f"'{name}': handler expects {expected.__name__}, "
            f"schema is {params_model.__name__}"
        )


class ToolRegistry:
    """Process-wide name → :class:`ToolDescriptor` mapping.

    Populated once at startup, then :meth:`freeze`-d; after that it is
    read-only and safe to share between concurrent invocations.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._frozen = False

    # ── Registration ──────────────────────────────────────────────────────

    def register(
        self,
        name: str,
        params_model: type[ToolParams],
        handler: ToolHandler,
        description: str = "",
    ) -> ToolDescriptor:
        """Register *handler* under *name*.

        Raises:
            RegistryFrozenError: called after :meth:`freeze`.
            DuplicateToolError: *name* is already taken.
            RegistrationError: bad name, schema or handler shape.
        """
        if self._frozen:
            raise RegistryFrozenError(name)
        if not isinstance(name, str) or not TOOL_NAME_RE.match(name):
            raise RegistrationError(
                f"invalid tool name {name!r}: expected dot-namespaced 'domain.action'"
            )
        if name in self._tools:
            raise DuplicateToolError(name)
        _check_handler(name, params_model, handler)

        if not description:
            doc = inspect.getdoc(handler) or ""
            description = doc.splitlines()[0] if doc else name

        descriptor = ToolDescriptor(
            name=name,
            params_model=params_model,
            handler=handler,
            description=description,
            is_async=_is_async_callable(handler),
        )
        self._tools[name] = descriptor
        logger.debug("registered tool %s (%s)", name, params_model.__name__)
        return descriptor

    def tool(
        self, name: str, params_model: type[ToolParams], description: str = ""
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of :meth:`register`."""

        def decorator(func: ToolHandler) -> ToolHandler:
            self.register(name, params_model, func, description)
            return func

        return decorator

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ── Lookup ────────────────────────────────────────────────────────────

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def descriptors(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    # ── Dispatch ──────────────────────────────────────────────────────────

    async def _run(self, tool_name: str, arguments: Mapping[str, Any] | None) -> Any:
        descriptor = self._tools.get(tool_name)
        if descriptor is None:
            raise ToolNotFoundError(tool_name)
        params = descriptor.validate(arguments)
        result = await descriptor.invoke(params)
        return to_jsonable_python(result)

    async def dispatch(
        self,
        tool_name: str,
        arguments: Mapping[str, Any] | None,
        meta: Mapping[str, Any] | None = None,
    ) -> Envelope:
        """Resolve *tool_name*, validate *arguments*, run the handler, wrap the outcome.

        Never raises for anything a tool or its caller can do wrong; the
        returned envelope carries ``tool`` and ``execution_ms`` in ``meta``.
        """
        t0 = time.perf_counter()
        try:
            result = await self._run(tool_name, arguments)
        except PreflightError as exc:
            elapsed = round((time.perf_counter() - t0) * 1000, 2)
            logger.info("%s failed (%s) ms=%.1f", tool_name, type(exc).__name__, elapsed)
            return wrap_failure(exc, self._meta(tool_name, elapsed, meta))
        except Exception as exc:
            elapsed = round((time.perf_counter() - t0) * 1000, 2)
            logger.exception("%s raised an unexpected error", tool_name)
            return wrap_failure(exc, self._meta(tool_name, elapsed, meta))

        elapsed = round((time.perf_counter() - t0) * 1000, 2)
        try:
            envelope = wrap_success(result, self._meta(tool_name, elapsed, meta))
        except ValueError as exc:
            logger.warning("%s: caller meta is not JSON-serializable", tool_name)
            return wrap_failure(exc, self._meta(tool_name, elapsed, None))
        logger.info("%s ok ms=%.1f", tool_name, elapsed)
        return envelope

    @staticmethod
    def _meta(
        tool_name: str, elapsed: float, extra: Mapping[str, Any] | None
    ) -> dict[str, Any]:
        caller = dict(extra) if isinstance(extra, Mapping) else {}
        return {"tool": tool_name, "execution_ms": elapsed, **caller}
