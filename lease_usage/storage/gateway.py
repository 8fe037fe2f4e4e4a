"""
Storage gateway.

Thin wrapper around the DynamoDB client: one PutItem per write and one
Query call per page. It knows nothing about date windows.
"""

import logging
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .codec import START_DATE_ATTRIBUTE, encode_usage_record, number_attribute
from .exceptions import StorageQueryError, StorageWriteError
from .models import Cursor, QueryPage, UsageRecord

logger = logging.getLogger(__name__)


class StorageGateway:
    """Issues usage table calls through a shared DynamoDB client.

    The client is borrowed, not owned: the gateway never closes or
    reconfigures it.
    """

    def __init__(self, client, table_name: str, index_name: Optional[str] = None):
        """Bind the gateway to a client and table.

        Args:
            client: boto3 DynamoDB client (shared)
            table_name: Name of the usage table
            index_name: Optional index on StartDate when it is not the
                table's partition key

        Raises:
            ValueError: If table_name is missing/empty
        """
        if not table_name or not table_name.strip():
            raise ValueError("table_name is required and cannot be empty")

        self.client = client
        self.table_name = table_name
        self.index_name = index_name

    def write(self, record: UsageRecord) -> None:
        """Store a usage record, replacing any item with the same key.

        Raises:
            EncodingError: If the record cannot be encoded
            StorageWriteError: If DynamoDB fails the put
        """
        item = encode_usage_record(record)
        try:
            self.client.put_item(TableName=self.table_name, Item=item)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "PutItem failed for account %s at %s: %s",
                record.account_id, record.start_date, e,
            )
            raise StorageWriteError(
                f"Failed to write usage for account {record.account_id} "
                f"starting {record.start_date} to {self.table_name}: {e}"
            ) from e

    def query_day(self, day_value: int, cursor: Optional[Cursor] = None) -> QueryPage:
        """Fetch one page of items whose StartDate equals ``day_value``.

        Args:
            day_value: Epoch second of the day to match exactly
            cursor: Continuation token from the previous page, if any

        Returns:
            The page of raw items and the cursor for the next page
            (None when this page is the last one for the day)

        Raises:
            StorageQueryError: If DynamoDB fails the query
        """
        try:
            response = self.client.query(**self._query_input(day_value, cursor))
        except (ClientError, BotoCoreError) as e:
            logger.error("Query failed for StartDate=%s: %s", day_value, e)
            raise StorageQueryError(
                f"Failed to query {self.table_name} for StartDate={day_value}: {e}",
                day_value=day_value,
            ) from e

        items = response.get("Items", [])
        # DynamoDB omits LastEvaluatedKey on the final page
        next_cursor = response.get("LastEvaluatedKey") or None
        logger.debug(
            "Fetched %d item(s) for StartDate=%s (more=%s)",
            len(items), day_value, next_cursor is not None,
        )
        return QueryPage(items=list(items), next_cursor=next_cursor)

    def _query_input(self, day_value: int, cursor: Optional[Cursor]) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "TableName": self.table_name,
            "KeyConditionExpression": "#sd = :sd",
            "ExpressionAttributeNames": {"#sd": START_DATE_ATTRIBUTE},
            "ExpressionAttributeValues": {":sd": number_attribute(day_value)},
        }
        if self.index_name:
            params["IndexName"] = self.index_name
        if cursor:
            params["ExclusiveStartKey"] = cursor
        return params
