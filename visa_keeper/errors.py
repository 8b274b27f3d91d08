from __future__ import annotations

from typing import Any, Optional


class VisaKeeperError(Exception):
    """Base exception for the visa keeper bot."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class PersistenceError(VisaKeeperError):
    """Raised when the record store cannot complete an operation."""

    def __init__(self, message: str = "Record store failure", details: Optional[Any] = None) -> None:
        super().__init__(message, details=details)


__all__ = ["VisaKeeperError", "PersistenceError"]
