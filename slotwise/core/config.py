from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    database_ssl: bool = True

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Scheduling
    # Zone used for date keys when an event type does not carry its own
    default_timezone: str = "UTC"
    # Window scanned by the "available dates" query when no month is given
    booking_horizon_days: int = 90
    min_duration_minutes: int = 5
    max_duration_minutes: int = 24 * 60

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
