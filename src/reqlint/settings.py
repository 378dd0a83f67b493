"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the reqlint REST API and MCP servers.

    Values are read from environment variables and
    from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # Cloud Run injects PORT; takes precedence over api_server_port

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (Cloud Run PORT takes precedence)."""
        return self.port if self.port is not None else self.api_server_port

    # Limits
    max_spec_size: int = 5_000_000  # characters per specification document
    max_body_bytes: int = 5 * 1024 * 1024  # request bodies on /specs and /validate

    # MCP
    mcp_transport: str = "stdio"  # stdio | http | sse
    mcp_server_host: str = "localhost"
    mcp_server_port: int = 9000
