"""
Storage layer for lease usage records.

Provides the DynamoDB-backed repository, its gateway and record codec.
"""

from .exceptions import (
    DecodingError,
    EncodingError,
    StorageQueryError,
    StorageWriteError,
    UsageStorageError,
)
from .models import QueryPage, UsageRecord
from .repository import UsageRepository, UsageStore, get_repository

__all__ = [
    "DecodingError",
    "EncodingError",
    "QueryPage",
    "StorageQueryError",
    "StorageWriteError",
    "UsageRecord",
    "UsageRepository",
    "UsageStorageError",
    "UsageStore",
    "get_repository",
]
