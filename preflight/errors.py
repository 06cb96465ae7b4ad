"""Error taxonomy shared by the registry, services and transports."""

from __future__ import annotations


class PreflightError(Exception):
    """Base class for every error the server knows how to render."""

    @property
    def user_message(self) -> str:
        """Client-visible text for this error."""
        return str(self) or type(self).__name__


class ToolValidationError(PreflightError):
    """Tool parameters are missing or of the wrong type."""

    def __init__(self, tool_name: str, issues: list[str]) -> None:
        self.tool_name = tool_name
        self.issues = issues
        super().__init__(f"invalid parameters for '{tool_name}': " + "; ".join(issues))


class ToolNotFoundError(PreflightError):
    """No tool is registered under the requested name."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"tool not found: '{tool_name}'")


class ToolExecutionError(PreflightError):
    """Raised by a service function when it cannot produce a result."""


class TransportError(PreflightError):
    """Connection or protocol level failure."""


class RegistrationError(PreflightError):
    """Programming error while building the tool registry."""


class DuplicateToolError(RegistrationError):
    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"tool already registered: '{tool_name}'")


class RegistryFrozenError(RegistrationError):
    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"registry is frozen, cannot register '{tool_name}'")
