"""DocAutofill package."""

from docautofill.exceptions import (
    DependencyError,
    DocumentValidationError,
    ExtractionServiceError,
    PackageError,
    SettingsError,
    StorageError,
    StorageQuotaError,
)
from docautofill.logging import configure_logging, get_logger
from docautofill.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("docautofill")

__all__ = [
    "DependencyError",
    "DocumentValidationError",
    "ExtractionServiceError",
    "PackageError",
    "Settings",
    "SettingsError",
    "StorageError",
    "StorageQuotaError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
]
