# Standard library imports
import os
from typing import Final, List, Optional


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the telemetry
    backend and the client-side components (tracker, aggregator, dashboard).
    All settings are loaded from environment variables with sensible defaults.
    """

    def __init__(self) -> None:
        # Database Configuration
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("MONGO_DB_NAME", "helicopter_services")
        self.mongo_events_collection: Final[str] = os.getenv("MONGO_EVENTS_COLLECTION", "events")
        self.mongo_timeout_ms: Final[int] = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

        # "mongo" in production, "memory" for local development without a database
        self.event_store_backend: Final[str] = os.getenv("EVENT_STORE_BACKEND", "mongo").strip().lower()

        # HTTP Configuration
        self.cors_origins: Final[List[str]] = _split_origins(
            os.getenv("CORS_ORIGIN", "http://localhost:3000")
        )

        # Client-side Configuration (tracker, aggregator, dashboard)
        self.events_api_url: Final[str] = os.getenv("EVENTS_API_URL", "http://localhost:5000")
        self.http_timeout_seconds: Final[float] = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
        self.analytics_poll_interval_sec: Final[float] = float(
            os.getenv("ANALYTICS_POLL_INTERVAL_SEC", "10")
        )
        self.analytics_active_window_min: Final[float] = float(
            os.getenv("ANALYTICS_ACTIVE_WINDOW_MIN", "5")
        )
        self.telemetry_cache_dir: Final[str] = os.getenv("TELEMETRY_CACHE_DIR", ".telemetry_cache")

        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
