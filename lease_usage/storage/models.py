"""
Data models for storage layer.

Defines the usage record entity and the shapes exchanged with DynamoDB.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

# A DynamoDB item in low-level wire form: attribute name -> {"S"|"N"|"BOOL": value}
AttributeMap = Dict[str, Dict[str, Any]]

# Opaque continuation token (DynamoDB's LastEvaluatedKey)
Cursor = Dict[str, Any]


@dataclass(frozen=True)
class UsageRecord:
    """Immutable usage cost of one principal on one account for a billing period.

    Records are written once at the close of the period and never modified.
    Removal happens only through DynamoDB TTL on ``time_to_exist``.
    """
    principal_id: str
    account_id: str
    start_date: int
    end_date: int
    cost_amount: float
    cost_currency: str
    time_to_exist: int


@dataclass(frozen=True)
class QueryPage:
    """One page of raw items returned by a single-day query.

    ``next_cursor`` is None when this page is the last one for the day.
    """
    items: List[AttributeMap]
    next_cursor: Optional[Cursor] = None

    @property
    def has_more(self) -> bool:
        """Whether another page can be fetched for the same day."""
        return self.next_cursor is not None
