"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:4200"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class RateLimiterConfig(BaseModel):
    """Rate limiter configuration model."""

    requests: int = Field(
        default=10, description="Number of requests allowed per window"
    )
    window_ms: int = Field(default=60000, description="Time window in milliseconds")
    enabled: bool = Field(default=True, description="Enable rate limiting")
    per_endpoint: bool = Field(
        default=True, description="Apply rate limiting per endpoint"
    )
    per_method: bool = Field(
        default=True, description="Apply rate limiting per HTTP method"
    )


class JWTConfig(BaseModel):
    """JWT issuance and validation configuration."""

    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms allowed for token validation",
    )
    gen_issuer: str = Field(
        default="membership-api", description="Issuer name to use when generating tokens"
    )
    audiences: list[str] = Field(
        default_factory=lambda: ["api://membership"],
        description="JWT audiences that this API accepts",
    )
    access_token_ttl_seconds: int = Field(
        default=60 * 60 * 24, description="Lifetime of login access tokens"
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./membership.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @computed_field
    @property
    def password(self) -> str | None:
        """Resolve the database password from a secrets file or environment variable.

        Falls back to whatever is embedded in the URL.
        """
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            import os

            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(f"Environment variable {self.password_env_var} not set")
            return password

        from sqlalchemy.engine import make_url

        return make_url(self.url).password

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        if base_url.drivername.startswith("sqlite"):
            return self.url

        resolved_password = self.password
        if resolved_password and resolved_password != base_url.password:
            base_url = base_url.set(password=resolved_password)
        return base_url.render_as_string(hide_password=False)


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    signing_secret: str | None = Field(
        default=None, description="Secret for signing access and reset JWTs"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class SecurityConfig(BaseModel):
    """Password and reset-token policy."""

    bcrypt_rounds: int = Field(default=10, description="bcrypt cost factor")
    reset_token_ttl_seconds: int = Field(
        default=3600, description="Lifetime of password reset tokens"
    )


class SiteConfig(BaseModel):
    """Branding used in outgoing emails."""

    name: str = Field(default="Membership Registry", description="Site name")
    email: str = Field(
        default="no-reply@example.com", description="Sender address for site emails"
    )


class EmailConfig(BaseModel):
    """Email provider configuration."""

    provider: Literal["http", "log"] = Field(
        default="log", description="'http' posts to an email API, 'log' only logs"
    )
    api_url: str | None = Field(
        default=None, description="Email API endpoint (e.g. SendGrid v3 mail/send)"
    )
    api_key: str | None = Field(default=None, description="Email API secret")
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout")


class StorageConfig(BaseModel):
    """Blob storage configuration for uploaded profile images."""

    provider: Literal["azure", "memory"] = Field(
        default="memory", description="Blob storage backend"
    )
    account_url: str = Field(
        default="http://localhost:10000/devstoreaccount1/",
        description="Public base URL of the storage account (trailing slash)",
    )
    sas_token: str | None = Field(
        default=None, description="Shared access signature used for writes"
    )
    container: str = Field(default="userfiles", description="Container for uploads")
    max_upload_bytes: int = Field(
        default=5_000_000, description="Maximum accepted upload size"
    )
    timeout_seconds: float = Field(default=30.0, description="HTTP timeout")


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    rate_limiter: RateLimiterConfig = Field(
        default_factory=RateLimiterConfig, description="Rate limiter configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
    site: SiteConfig = Field(
        default_factory=SiteConfig, description="Site branding"
    )
    email: EmailConfig = Field(
        default_factory=EmailConfig, description="Email configuration"
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Blob storage configuration"
    )
