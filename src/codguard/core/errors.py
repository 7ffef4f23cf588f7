"""Custom exceptions for codguard."""

from typing import List, Optional


class CodGuardError(Exception):
    """Base exception for all codguard errors."""

    pass


class SettingsValidationError(CodGuardError):
    """Raised when shop settings fail validation on write."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid settings: " + "; ".join(self.errors))


class StoreError(CodGuardError):
    """Raised when the key-value store cannot read or persist a value."""

    def __init__(self, operation: str, key: str, reason: str):
        self.operation = operation
        self.key = key
        super().__init__(f"Store {operation} failed for {key}: {reason}")


class OrderImportError(CodGuardError):
    """Raised when a bundled order import is not accepted by the API.

    The queue is left untouched so the batch is retried on the next flush.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UnknownTaskError(CodGuardError):
    """Raised when scheduling a task that has no registered handler."""

    def __init__(self, task_name: str):
        self.task_name = task_name
        super().__init__(f"No handler registered for task: {task_name}")
