"""
Core module initialization.
Exports configuration, logging utilities and the error taxonomy.
"""

from delivery_api.core.config import get_settings, Settings, EnvironmentMode, setup_logging
from delivery_api.core.exceptions import (
    DeliveryAPIError,
    ValidationError,
    DailyLimitExceeded,
    NotFound,
    InvalidId,
    PersistenceError,
    ConfigurationError,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "setup_logging",
    "DeliveryAPIError",
    "ValidationError",
    "DailyLimitExceeded",
    "NotFound",
    "InvalidId",
    "PersistenceError",
    "ConfigurationError",
]
