"""Configuration for the Onboardly MCP Server.

Values are read from environment variables (case-insensitive) and an optional
``.env`` file in the working directory.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(default=3000, description="Port to bind the server")
    debug: bool = Field(default=False, description="Enable debug mode (reload, no HSTS)")
    environment: str = Field(default="development", description="Deployment environment name")
    log_level: str = Field(default="INFO", description="Root log level")

    # CORS
    cors_allowed_origins: str = Field(
        default="*", description="Comma-separated list of allowed CORS origins"
    )

    # Error tracking
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN (disabled when unset)")

    # MCP transport
    api_prefix: str = Field(default="", description="Path prefix for all routes, e.g. /api")
    public_base_url: str | None = Field(
        default=None,
        description="Externally visible base URL used in the SSE endpoint event",
    )
    endpoint_event_delay_seconds: float = Field(
        default=0.1,
        ge=0,
        description="Delay before the endpoint event is emitted on a new stream",
    )
    server_name: str = Field(default="onboardly-mcp-server")
    protocol_version: str = Field(default="2024-11-05")

    # Database (Prisma reads DATABASE_URL itself when this is unset)
    database_url: str | None = Field(default=None)
    database_connect_attempts: int = Field(default=3, ge=1)
    database_retry_delay_seconds: float = Field(default=1.0, ge=0)

    # Outbound HTTP
    http_timeout_seconds: float = Field(default=30.0, gt=0)

    # SMTP
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=587)
    smtp_user: str = Field(default="")
    smtp_password: str = Field(default="")
    smtp_from: str | None = Field(default=None, description="Sender address, defaults to smtp_user")
    mail_from_name: str = Field(default="Onboardly")

    # Resume parsing (Gemini)
    gemini_api_key: str | None = Field(default=None)
    gemini_model: str = Field(default="gemini-1.5-flash")
    gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")

    # Profile lookup
    relevance_webhook_url: str | None = Field(
        default=None, description="Relevance AI webhook that resolves LinkedIn profiles"
    )

    # Evaluation emails
    meeting_url_base: str = Field(default="https://onboardly.com/interview/")
    evaluation_threshold_score: float = Field(default=70.0)

    # Resume storage (MinIO / S3)
    minio_endpoint: str = Field(default="localhost:9000")
    minio_access_key: str = Field(default="minioadmin")
    minio_secret_key: str = Field(default="minioadmin")
    minio_secure: bool = Field(default=False)
    minio_bucket: str = Field(default="store-resume")
    minio_public_url: str | None = Field(
        default=None, description="Public base URL for uploaded objects"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma-separated CORS origins."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def mail_sender(self) -> str:
        return self.smtp_from or self.smtp_user


settings = Settings()
