"""
Configuration management for the newsroom site.
Loads environment variables and provides access to configuration settings.
"""
import logging
import os
from typing import List, Optional
from dotenv import load_dotenv

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_IMAGE_URL = (
    "https://images.unsplash.com/photo-1588681664899-f142ff2dc9b1"
    "?w=600&auto=format&fit=crop"
)


class Config:
    """Configuration settings loaded from environment variables."""

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value by key.

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Read an integer setting, falling back to the default on bad input."""
        raw = os.getenv(key)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Invalid integer for %s: %r, using %d", key, raw, default)
            return default

    @property
    def article_storage_type(self) -> str:
        """Get the article storage backend ('local' or 'tigris')."""
        return os.getenv("ARTICLE_STORAGE_TYPE", "local").lower()

    @property
    def state_dir(self) -> str:
        """Get the directory holding the local article file."""
        return os.getenv("NEWS_STATE_DIR", "state")

    @property
    def seed_sample_data(self) -> bool:
        """Check if sample articles should be written on first run."""
        value = os.getenv("NEWS_SEED_SAMPLE_DATA", "true").lower()
        return value in ["true", "1", "yes"]

    @property
    def default_image_url(self) -> str:
        """Get the placeholder image used when an article has none."""
        return os.getenv("DEFAULT_IMAGE_URL") or DEFAULT_IMAGE_URL

    @property
    def static_dir(self) -> str:
        """Get the directory serving the static frontend."""
        return os.getenv("NEWS_STATIC_DIR", "public")

    @property
    def server_host(self) -> str:
        """Get server host."""
        return os.getenv("SERVER_HOST", "127.0.0.1")

    @property
    def server_port(self) -> int:
        """Get server port."""
        return self._get_int("SERVER_PORT", 3000)

    @property
    def log_level(self) -> str:
        """Get the log level name for the newsroom logger."""
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def cors_origins(self) -> List[str]:
        """Get the origins allowed to call the API from a browser ('*' for any)."""
        raw = os.getenv("CORS_ORIGINS", "*")
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        return origins or ["*"]
