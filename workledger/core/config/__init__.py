"""Configuration module for the workledger backend.

Usage:
    from workledger.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from workledger.core.config.enums import CycleResetMode, Environment
from workledger.core.config.settings import Settings

__all__ = [
    "Settings",
    "CycleResetMode",
    "Environment",
    "settings",
]

# Singleton settings instance
settings = Settings()
