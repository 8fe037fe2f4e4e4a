"""
Shared fixtures for storage tests.

Provides an in-memory stand-in for the DynamoDB client that honours the
Query pagination contract (LastEvaluatedKey / ExclusiveStartKey).
"""

from typing import Any, Dict, List, Optional, Set

import pytest
from botocore.exceptions import ClientError

from lease_usage.storage.gateway import StorageGateway
from lease_usage.storage.models import UsageRecord
from lease_usage.storage.repository import UsageRepository

DAY = 86400
BASE_DAY = 1704067200  # 2024-01-01T00:00:00Z

KEY_ATTRIBUTES = ("StartDate", "PrincipalId")


def client_error(operation: str, code: str = "ProvisionedThroughputExceededException") -> ClientError:
    """Build a botocore ClientError like the ones DynamoDB raises."""
    return ClientError(
        {"Error": {"Code": code, "Message": f"{operation} rejected"}},
        operation,
    )


class FakeDynamoClient:
    """In-memory DynamoDB client supporting put_item and paginated query.

    Items are keyed by (StartDate, PrincipalId) and paged ``page_size``
    at a time. Days listed in ``failing_days`` raise a ClientError.
    """

    def __init__(self, page_size: int = 100):
        self.page_size = page_size
        self.items: List[Dict[str, Any]] = []
        self.failing_days: Set[int] = set()
        self.query_calls: List[Dict[str, Any]] = []

    @staticmethod
    def _key(item: Dict[str, Any]) -> Dict[str, Any]:
        return {name: item[name] for name in KEY_ATTRIBUTES}

    def put_item(self, TableName: str, Item: Dict[str, Any]) -> Dict[str, Any]:
        key = self._key(Item)
        self.items = [existing for existing in self.items if self._key(existing) != key]
        self.items.append(Item)
        return {}

    def query(self, TableName: str, KeyConditionExpression: str,
              ExpressionAttributeNames: Dict[str, str],
              ExpressionAttributeValues: Dict[str, Dict[str, str]],
              ExclusiveStartKey: Optional[Dict[str, Any]] = None,
              IndexName: Optional[str] = None) -> Dict[str, Any]:
        self.query_calls.append({
            "day": int(ExpressionAttributeValues[":sd"]["N"]),
            "cursor": ExclusiveStartKey,
        })
        day = ExpressionAttributeValues[":sd"]["N"]
        if int(day) in self.failing_days:
            raise client_error("Query")

        matching = [item for item in self.items if item["StartDate"]["N"] == day]
        offset = 0
        if ExclusiveStartKey:
            keys = [self._key(item) for item in matching]
            offset = keys.index(ExclusiveStartKey) + 1

        page = matching[offset:offset + self.page_size]
        response: Dict[str, Any] = {"Items": page, "Count": len(page)}
        if offset + self.page_size < len(matching):
            response["LastEvaluatedKey"] = self._key(page[-1])
        return response


def make_record(day: int = BASE_DAY, principal: str = "user-1", **overrides) -> UsageRecord:
    """Build a usage record for a day with sensible defaults."""
    values = dict(
        principal_id=principal,
        account_id="123456789012",
        start_date=day,
        end_date=day + DAY - 1,
        cost_amount=12.5,
        cost_currency="USD",
        time_to_exist=day + 30 * DAY,
    )
    values.update(overrides)
    return UsageRecord(**values)


@pytest.fixture
def fake_client():
    """Empty in-memory DynamoDB client."""
    return FakeDynamoClient()


@pytest.fixture
def repository(fake_client):
    """Repository wired to the in-memory client."""
    return UsageRepository(StorageGateway(fake_client, "Usage"))
