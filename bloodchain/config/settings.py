"""
Configuration settings for the BloodChain server.

Settings are read from environment variables (prefixed with ``BLOODCHAIN_``)
when a Settings instance is created, falling back to the defaults below.
"""

import os
import logging
from functools import lru_cache
from typing import Any

from bloodchain import __version__


ENV_PREFIX = "BLOODCHAIN_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


class Settings:
    """Server configuration settings"""

    FRAMEWORK_NAME = "bloodchain"
    VERSION = __version__

    # API settings
    API_VERSION = "v1"
    API_PREFIX = "/api/v1"

    # Logging settings
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __init__(self):
        # API settings
        self.API_HOST = _env("API_HOST", "127.0.0.1")
        self.API_PORT = int(_env("API_PORT", "8000"))
        self.CORS_ORIGINS = [
            origin.strip() for origin in _env("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]
        self.MAX_UPLOAD_SIZE = int(_env("MAX_UPLOAD_SIZE", str(1024 * 1024)))  # 1 MiB

        # Storage settings
        self.LOG_CAPACITY = int(_env("LOG_CAPACITY", "1000"))  # Contract event / token tx logs
        self.DEFAULT_LOG_LIMIT = int(_env("DEFAULT_LOG_LIMIT", "50"))

        # Shortage risk settings
        self.AVERAGE_DAILY_CONSUMPTION = float(_env("AVERAGE_DAILY_CONSUMPTION", "1.0"))

        # Logging settings
        self.LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()

    def get_api_config(self) -> dict[str, Any]:
        """Get API configuration"""
        return {
            "version": self.API_VERSION,
            "prefix": self.API_PREFIX,
            "host": self.API_HOST,
            "port": self.API_PORT,
        }

    def get_storage_config(self) -> dict[str, Any]:
        """Get storage configuration"""
        return {
            "log_capacity": self.LOG_CAPACITY,
            "default_log_limit": self.DEFAULT_LOG_LIMIT,
            "average_daily_consumption": self.AVERAGE_DAILY_CONSUMPTION,
        }

    @property
    def is_debug(self) -> bool:
        return self.LOG_LEVEL == "DEBUG"

    def validate_config(self) -> list[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if self.API_PORT <= 0 or self.API_PORT > 65535:
            errors.append("API_PORT must be between 1 and 65535")

        if self.MAX_UPLOAD_SIZE <= 0:
            errors.append("MAX_UPLOAD_SIZE must be positive")

        if self.LOG_CAPACITY <= 0:
            errors.append("LOG_CAPACITY must be positive")

        if not 0 < self.DEFAULT_LOG_LIMIT <= self.LOG_CAPACITY:
            errors.append("DEFAULT_LOG_LIMIT must be between 1 and LOG_CAPACITY")

        if self.AVERAGE_DAILY_CONSUMPTION < 0:
            errors.append("AVERAGE_DAILY_CONSUMPTION must not be negative")

        if logging.getLevelName(self.LOG_LEVEL) == f"Level {self.LOG_LEVEL}":
            errors.append(f"LOG_LEVEL '{self.LOG_LEVEL}' is not a valid logging level")

        return errors


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance"""
    return Settings()
