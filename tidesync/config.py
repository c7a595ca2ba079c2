"""Application configuration loaded from environment variables."""

from datetime import datetime
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Tidepool (source) ---
    tidepool_email: str
    tidepool_password: str
    tidepool_base_url: str = "https://api.tidepool.org"

    # --- Nightscout (target) ---
    nightscout_url: str
    nightscout_api_secret: str = ""  # plain secret, hashed before sending

    # --- Sync window ---
    sync_since: datetime | None = None  # None = today 00:00
    sync_till: datetime | None = None  # None = open-ended

    # Lower bound of the glucose target range, in the pump's bg units.
    # Tidepool reports a single target value; Nightscout wants a low/high pair.
    target_low: float = 3.7

    # --- HTTP ---
    http_timeout_seconds: float = 30.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
