"""
Storage layer errors.

Every failure surfaced by the ledger derives from UsageStorageError so
callers can catch the whole family at once.
"""

from typing import Optional


class UsageStorageError(Exception):
    """Base class for all usage ledger storage failures."""


class EncodingError(UsageStorageError):
    """Raised when a usage record cannot be converted to a DynamoDB item."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DecodingError(UsageStorageError):
    """Raised when a DynamoDB item cannot be converted to a usage record."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class StorageWriteError(UsageStorageError):
    """Raised when DynamoDB rejects or fails a PutItem call."""


class StorageQueryError(UsageStorageError):
    """Raised when a single-day Query call fails."""
    def __init__(self, message: str, day_value: Optional[int] = None):
        super().__init__(message)
        self.day_value = day_value
