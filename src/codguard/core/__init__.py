"""Core module - Logging, errors and error monitoring."""

from codguard.core.logger import setup_logger
from codguard.core.errors import (
    CodGuardError,
    OrderImportError,
    SettingsValidationError,
    StoreError,
    UnknownTaskError,
)

__all__ = [
    "setup_logger",
    "CodGuardError",
    "OrderImportError",
    "SettingsValidationError",
    "StoreError",
    "UnknownTaskError",
]
