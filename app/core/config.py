"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Nothing is required at import time; the SQL engine
and the Redis connection validate their own settings when first used.
"""

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENTS = ("development", "test", "staging", "production")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "replication-webhook"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "production"

    # Database (postgresql+asyncpg://...)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # Redis (lookup entries and new-story markers)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_key_prefix: str = "sealed_love:"

    # SNS inbound gate
    allowed_sns_topic_arns: str = ""
    skip_sns_arn_validation: bool = False
    skip_sns_signature_verification: bool = False
    sns_cert_host_pattern: str = r"^sns\.[a-z0-9-]+\.amazonaws\.com(\.cn)?$"
    sns_cert_cache_ttl_seconds: int = 24 * 60 * 60
    http_client_timeout_seconds: float = 10.0

    # Replication bookkeeping
    replication_lookup_ttl_seconds: int = 60 * 60
    new_story_marker_ttl_seconds: int = 30 * 60

    # Email (SendGrid). Without an API key, emails are logged instead of sent.
    sendgrid_api_key: SecretStr | None = None
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    email_from: str = ""
    email_from_name: str = "SealedLove"
    site_domain: str = "sealed.love"

    # Request / middleware
    request_timeout_seconds: int = 30
    # Message alone may be 256 KiB; the envelope adds escaping and signature fields
    max_request_body_bytes: int = 1024 * 1024
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, value: str) -> str:
        """Normalize and restrict ENVIRONMENT to the known deployment names."""
        normalized = value.strip().lower()
        if normalized not in _ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {', '.join(_ENVIRONMENTS)}, got: {value!r}"
            )
        return normalized

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def allowed_topic_arns(self) -> frozenset[str]:
        """Parsed ALLOWED_SNS_TOPIC_ARNS (comma-separated, blanks dropped)."""
        return frozenset(
            arn.strip() for arn in self.allowed_sns_topic_arns.split(",") if arn.strip()
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars so
    the next get_settings() uses the new values.
    """
    return Settings()
