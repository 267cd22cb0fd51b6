"""ListingForms package."""

from listingforms.exceptions import (
    PackageError,
    SettingsError,
    TemplateError,
    TemplateStoreError,
)
from listingforms.logging import configure_logging, get_logger
from listingforms.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("listingforms")

__all__ = [
    "PackageError",
    "Settings",
    "SettingsError",
    "TemplateError",
    "TemplateStoreError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
]
