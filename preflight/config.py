"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings pulled from .env / environment (``PREFLIGHT_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="PREFLIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_env: str = "development"
    log_level: str = "INFO"

    # MCP
    mcp_server_name: str = "preflight"
    mcp_server_version: str = "0.1.0"

    # HTTP route layer
    http_host: str = "127.0.0.1"
    http_port: int = 8000
    api_prefix: str = "/api/v1"
    allowed_origins: str = "*"
    """Comma-separated list of allowed CORS origins. Use '*' only in development."""

    # Tools
    default_timezone: str = "UTC"
    """Zone used by the HTTP datetime route when the query string omits one."""

    # Lifecycle
    shutdown_timeout: float = 2.0
    """Seconds the transport gets to stop after SIGINT/SIGTERM before the process exits."""

    def cors_origins(self) -> list[str]:
        """Split ``allowed_origins`` into a list, dropping blanks."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
