"""Application configuration with environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+pysqlite:///./legalaid.db"

    # Bearer tokens (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 8

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute, 0 disables)
    RATE_LIMIT_API: int = 60

    # Internal scheduled endpoints (cron jobs)
    INTERNAL_SECRET: str = ""

    # Notifications: "log" writes messages to the log, "memory" keeps them in-process
    NOTIFICATION_BACKEND: str = "log"

    # Scheduling
    MIN_APPOINTMENT_MINUTES: int = 15
    REMINDER_WINDOW_HOURS: int = 24

    # Messaging polling contract
    MESSAGE_POLL_INTERVAL_SECONDS: int = 3
    MESSAGE_POLL_LIMIT: int = 200

    # Backups
    BACKUP_DIR: str = "backups"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, built once at application init."""
    return Settings()


settings = get_settings()
