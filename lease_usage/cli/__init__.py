"""
Command-line interface for the lease usage ledger.
"""
