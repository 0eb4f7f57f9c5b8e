"""Configuration module: exports Settings, load_config, and a module-level singleton."""

from src.config.loader import DEFAULT_CONFIG, load_config
from src.config.settings import DEVELOPMENT_FALLBACK_SECRET, Settings

settings = Settings()

__all__ = ["DEFAULT_CONFIG", "DEVELOPMENT_FALLBACK_SECRET", "Settings", "load_config", "settings"]
