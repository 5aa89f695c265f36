"""Environment settings."""

import os
from typing import Optional


class Settings:
    """Exporter settings read from environment variables."""

    @property
    def CONFIG_PATH(self) -> str:
        """Configuration file path (ASTERISK_EXPORTER_CONFIG)."""
        return os.getenv("ASTERISK_EXPORTER_CONFIG") or "config/config.yaml"

    @property
    def LOG_LEVEL(self) -> Optional[str]:
        """Log level override (LOG_LEVEL), None when unset."""
        return os.getenv("LOG_LEVEL") or None
