# ─────────────────────────────────────────────────────────────────
# config.py — Application Settings
#
# All tunables come from environment variables (or a .env file),
# never from source code. API keys in particular must NOT be
# hardcoded — put them in .env:
#
#   FIREBASE_API_KEY=AIza...
#   FIREBASE_DATABASE_URL=https://<project>-default-rtdb.<region>.firebasedatabase.app
#
# Everything else has a sensible default.
# ─────────────────────────────────────────────────────────────────

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration for the device log service.

    Field names map to upper-case environment variables,
    e.g. `poll_interval` ← POLL_INTERVAL.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Firebase web config — only these two are needed for REST access
    firebase_api_key: str = ""
    firebase_database_url: str = ""

    # Backing files for the two in-memory stores
    data_file: str = "data.json"
    users_file: str = "users.json"

    poll_interval: float = 2.0    # seconds between device polls
    log_capacity: int = 1000      # oldest records are dropped past this
    remote_timeout: float = 10.0  # seconds per Firebase HTTP call

    host: str = "0.0.0.0"
    port: int = 3300
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
