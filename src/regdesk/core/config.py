"""
Application Configuration

All settings are read once from the environment (and an optional .env file)
when the process starts. The resulting Settings object is handed to the
notifier, the admin gate and the registration workflow in the app factory;
request handlers never read the environment themselves.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADMIN_PASSWORD = "change-me-now"


class Settings(BaseSettings):
    """Runtime configuration for the registration API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    python_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = ""

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./data/registrations.sqlite"
    upload_dir: Path = Path("uploads")

    # Admin gate (HTTP Basic)
    admin_username: str = "admin"
    admin_password: str = DEFAULT_ADMIN_PASSWORD

    # Email transport
    email_backend: str = Field(
        default="auto",
        description="One of: auto, resend, smtp, log",
    )
    email_from: str = "Registrations <noreply@regdesk.dev>"
    owner_email: str = "registrations@regdesk.dev"
    resend_api_key: str | None = None
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None

    # Event details used by every email template
    event_name: str = "Bahamas Middle Temple Week 2026"
    event_programme: str = "Advocacy Training Programme"
    event_dates: str = "19-23 January 2026"
    event_venue: str = "British Colonial Hilton"
    event_location: str = "Nassau, New Providence, The Bahamas"
    event_contact_email: str = "bahamasmts@bmts-events.com"
    event_organiser: str = "The Bahamas Middle Temple Society"
    event_committee: str = "Organising Committee"
    event_timezone: str = Field(
        default="America/Nassau",
        description="IANA zone used for dates shown to applicants",
    )

    @property
    def is_development(self) -> bool:
        return self.python_env.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.python_env.lower() == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """Comma-separated CORS_ORIGINS as a list (empty disables cross-origin access)."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def uses_default_admin_password(self) -> bool:
        return self.admin_password == DEFAULT_ADMIN_PASSWORD


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return Settings()


settings = get_settings()
