"""
Core helpers for the lease usage ledger.

This package contains the date arithmetic shared by the storage layer
and the CLI.
"""
