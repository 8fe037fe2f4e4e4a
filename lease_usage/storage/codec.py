"""
Record codec.

Converts UsageRecord entities to and from DynamoDB's low-level attribute
representation. Each value is a single-entry mapping tagged with one of
``S`` (string), ``N`` (number as decimal text) or ``BOOL`` (boolean).
Conversions are explicit per field so malformed items fail loudly instead
of silently defaulting.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Tuple

from .exceptions import DecodingError, EncodingError
from .models import AttributeMap, UsageRecord

STRING = "S"
NUMBER = "N"
BOOLEAN = "BOOL"

ATTRIBUTE_TAGS = (STRING, NUMBER, BOOLEAN)

# (record attribute, persisted attribute name, value kind)
USAGE_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("principal_id", "PrincipalId", "string"),
    ("account_id", "AccountId", "string"),
    ("start_date", "StartDate", "integer"),
    ("end_date", "EndDate", "integer"),
    ("cost_amount", "CostAmount", "float"),
    ("cost_currency", "CostCurrency", "string"),
    ("time_to_exist", "TimeToExist", "integer"),
)

START_DATE_ATTRIBUTE = "StartDate"


def encode_usage_record(record: UsageRecord) -> AttributeMap:
    """Convert a usage record into a DynamoDB item.

    Args:
        record: The usage record to encode

    Returns:
        Attribute map keyed by the persisted field names

    Raises:
        EncodingError: If a field holds a value DynamoDB cannot store
            under the record schema
    """
    item: AttributeMap = {}
    for attr, key, kind in USAGE_FIELDS:
        value = getattr(record, attr)
        if kind == "string":
            item[key] = _encode_string(key, value)
        elif kind == "integer":
            item[key] = _encode_integer(key, value)
        else:
            item[key] = _encode_float(key, value)
    return item


def decode_usage_record(item: AttributeMap) -> UsageRecord:
    """Convert a DynamoDB item into a usage record.

    Attributes outside the record schema are ignored.

    Args:
        item: Attribute map as returned by a Query call

    Returns:
        The decoded usage record

    Raises:
        DecodingError: If a required attribute is missing, carries the
            wrong type tag, or holds an unparsable number
    """
    if not isinstance(item, dict):
        raise DecodingError(f"item must be a mapping, got {type(item).__name__}")

    values: Dict[str, Any] = {}
    for attr, key, kind in USAGE_FIELDS:
        if key not in item:
            raise DecodingError(f"missing required attribute '{key}'", field=key)
        tag, raw = _unwrap(key, item[key])
        if kind == "string":
            if tag != STRING or not isinstance(raw, str):
                raise DecodingError(f"attribute '{key}' must be a string, got {tag}", field=key)
            values[attr] = raw
        elif kind == "integer":
            values[attr] = _decode_integer(key, tag, raw)
        else:
            values[attr] = _decode_float(key, tag, raw)
    return UsageRecord(**values)


def number_attribute(value: int) -> Dict[str, str]:
    """Wrap an integer as a DynamoDB number attribute value."""
    return {NUMBER: str(value)}


def _encode_string(key: str, value: Any) -> Dict[str, str]:
    if not isinstance(value, str):
        raise EncodingError(f"field '{key}' must be a string, got {type(value).__name__}", field=key)
    return {STRING: value}


def _encode_integer(key: str, value: Any) -> Dict[str, str]:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"field '{key}' must be an integer, got {type(value).__name__}", field=key)
    return {NUMBER: str(value)}


def _encode_float(key: str, value: Any) -> Dict[str, str]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise EncodingError(f"field '{key}' must be a number, got {type(value).__name__}", field=key)
    try:
        number = float(value)
    except OverflowError:
        raise EncodingError(f"field '{key}' is out of float range", field=key)
    if not math.isfinite(number):
        raise EncodingError(f"field '{key}' must be finite, got {value!r}", field=key)
    return {NUMBER: repr(number)}


def _unwrap(key: str, attribute: Any) -> Tuple[str, Any]:
    """Return the (tag, value) pair of a tagged attribute value."""
    if not isinstance(attribute, dict) or len(attribute) != 1:
        raise DecodingError(f"attribute '{key}' is not a tagged value", field=key)
    tag, raw = next(iter(attribute.items()))
    if tag not in ATTRIBUTE_TAGS:
        raise DecodingError(f"attribute '{key}' has unsupported type '{tag}'", field=key)
    return tag, raw


def _parse_number(key: str, tag: str, raw: Any) -> Decimal:
    if tag != NUMBER or not isinstance(raw, str):
        raise DecodingError(f"attribute '{key}' must be a number, got {tag}", field=key)
    try:
        number = Decimal(raw)
    except InvalidOperation:
        raise DecodingError(f"attribute '{key}' holds an invalid number: {raw!r}", field=key)
    if not number.is_finite():
        raise DecodingError(f"attribute '{key}' holds a non-finite number: {raw!r}", field=key)
    return number


def _decode_integer(key: str, tag: str, raw: Any) -> int:
    number = _parse_number(key, tag, raw)
    if number != number.to_integral_value():
        raise DecodingError(f"attribute '{key}' must be an integer, got {raw!r}", field=key)
    return int(number)


def _decode_float(key: str, tag: str, raw: Any) -> float:
    _parse_number(key, tag, raw)
    value = float(raw)
    if not math.isfinite(value):
        raise DecodingError(f"attribute '{key}' is out of float range: {raw!r}", field=key)
    return value
