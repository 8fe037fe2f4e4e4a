"""
Repository pattern for data access.

Handles writing usage records and answering date-window queries on top of
the storage gateway.

The usage table only supports exact-match conditions on StartDate, so a
window of N days is answered with N single-day queries, each followed
through every page DynamoDB returns for it.
"""

import logging
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from ..config.loader import StorageConfig, load_storage_config
from ..core.window import day_values
from .codec import decode_usage_record
from .db import get_client
from .exceptions import DecodingError, StorageQueryError
from .gateway import StorageGateway
from .models import AttributeMap, UsageRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class UsageStore(Protocol):
    """Operations callers rely on; lets tests substitute a double."""

    def put_usage(self, record: UsageRecord) -> None:
        ...

    def get_usage_by_date_range(self, start_date: int, days: int) -> List[UsageRecord]:
        ...


class UsageRepository:
    """Repository for writing and querying lease usage records.

    All calls are sequential and fail fast: the first backend or decoding
    error aborts the operation and no partial result is returned.
    """

    def __init__(self, gateway: StorageGateway):
        """Initialize the repository with a storage gateway.

        Args:
            gateway: Gateway bound to the usage table
        """
        self.gateway = gateway

    def put_usage(self, record: UsageRecord) -> None:
        """Write a usage record, overwriting any item with the same key.

        Raises:
            EncodingError: If the record cannot be encoded
            StorageWriteError: If DynamoDB fails the put
        """
        self.gateway.write(record)
        logger.debug(
            "Stored usage for principal %s on account %s starting %s",
            record.principal_id, record.account_id, record.start_date,
        )

    def get_usage_by_date_range(self, start_date: int, days: int) -> List[UsageRecord]:
        """Get all usage records whose StartDate falls in a window of days.

        Records come back in day order, then DynamoDB page order, then
        item order within each page. Nothing is sorted or deduplicated.

        Args:
            start_date: Epoch second of the first day (day-aligned)
            days: Number of days in the window; zero or less yields []

        Returns:
            List of usage records for the whole window

        Raises:
            StorageQueryError: If any page query fails
            DecodingError: If any returned item is malformed
        """
        pages: List[Tuple[int, int, List[AttributeMap]]] = []
        for day_value in day_values(start_date, days):
            pages.extend(self._fetch_day(day_value))

        usages = self._aggregate(pages)
        logger.info(
            "Fetched %d usage record(s) for %d day(s) from %s across %d page(s)",
            len(usages), max(days, 0), start_date, len(pages),
        )
        return usages

    def get_usage_for_day(self, day_value: int) -> List[UsageRecord]:
        """Get all usage records whose StartDate equals ``day_value``."""
        return self.get_usage_by_date_range(day_value, 1)

    def _fetch_day(self, day_value: int) -> List[Tuple[int, int, List[AttributeMap]]]:
        """Follow a single day's query through every page.

        Returns:
            (day_value, page_number, items) for each page, in page order
        """
        pages: List[Tuple[int, int, List[AttributeMap]]] = []
        cursor = None
        page_number = 0
        while True:
            page_number += 1
            try:
                page = self.gateway.query_day(day_value, cursor)
            except StorageQueryError as e:
                raise StorageQueryError(
                    f"Query for day {day_value} failed on page {page_number}: {e}",
                    day_value=day_value,
                ) from e
            pages.append((day_value, page_number, page.items))
            if not page.has_more:
                return pages
            cursor = page.next_cursor

    def _aggregate(self, pages: List[Tuple[int, int, List[AttributeMap]]]) -> List[UsageRecord]:
        """Decode every collected page, in collection order, into one list."""
        usages: List[UsageRecord] = []
        for day_value, page_number, items in pages:
            for position, item in enumerate(items):
                try:
                    usages.append(decode_usage_record(item))
                except DecodingError as e:
                    raise DecodingError(
                        f"Malformed item {position} on page {page_number} "
                        f"for day {day_value}: {e}",
                        field=e.field,
                    ) from e
        return usages


def summarize_costs(records: List[UsageRecord]) -> Dict[str, float]:
    """Total cost per currency across a list of usage records.

    Args:
        records: Usage records to total

    Returns:
        Mapping of currency code to summed cost amount, in first-seen order
    """
    totals: Dict[str, float] = {}
    for record in records:
        totals[record.cost_currency] = totals.get(record.cost_currency, 0.0) + record.cost_amount
    return totals


# Global repository instance
_default_repository: Optional[UsageRepository] = None


def get_repository(config: Optional[StorageConfig] = None) -> UsageRepository:
    """Get a repository instance.

    This function provides a singleton instance of the UsageRepository,
    built from ``config`` or, when omitted, from the environment.

    Args:
        config: Optional storage configuration

    Returns:
        An instance of UsageRepository
    """
    global _default_repository
    if _default_repository is None:
        config = config or load_storage_config()
        gateway = StorageGateway(
            get_client(config),
            config.table_name,
            index_name=config.index_name,
        )
        _default_repository = UsageRepository(gateway)
    return _default_repository
