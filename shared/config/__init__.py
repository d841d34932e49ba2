"""Shared configuration base classes.

Provides the common configuration patterns used by the tracker library and
the HTTP service so both read the same environment variables.
"""

from pydantic_settings import BaseSettings


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "authorization",
        "cookie",
        "session",
    ]
    app_environment: str = "production"


class BaseRedisConfig(BaseSettings):
    """Common Redis connection configuration."""

    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout_seconds: float = 5.0


class BaseServiceConfig(BaseLoggingConfig, BaseRedisConfig):
    """Base configuration combining logging and Redis settings.

    Services should inherit from this and add their own specific settings.
    The otel_service_name should be overridden by each service.
    """

    otel_service_name: str = "unknown"  # Should be overridden by service


__all__ = ["BaseLoggingConfig", "BaseRedisConfig", "BaseServiceConfig"]
