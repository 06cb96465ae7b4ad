"""preflight – schema-validated MCP tools with uniform result envelopes."""

__version__ = "0.1.0"
