"""
Lease Usage Ledger.

Date-indexed storage and retrieval of lease usage-cost records in DynamoDB.
"""

__version__ = "0.1.0"
