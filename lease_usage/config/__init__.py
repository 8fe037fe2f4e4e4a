"""
Configuration for the lease usage ledger.
"""

from .loader import StorageConfig, load_storage_config

__all__ = ["StorageConfig", "load_storage_config"]
