"""Filter Parser — decodes the `filters` query-string encoding into typed Filter records.

Encoding: `name=operator:value&name=operator:value`, URL-encoded, repeated keys
allowed. Lists (between, in, containsAny, containsAll, inDates) are comma-separated.

Invariants:
    - Pure function: no IO, no DB
    - Output order follows the query-string order
    - Operator and value are split at the FIRST colon (values may contain ':')
    - Unknown field names and unknown operators are logged and skipped
    - Malformed values for known fields raise InvalidFilterError
    - `between` values are ordered: start <= end (numbers and dates)
"""

import logging
from datetime import date
from urllib.parse import parse_qsl

from assetquery.core.asset_fields import (
    CUSTOM_FIELD_FILTER_TYPES, custom_field_name, get_filterable_field,
    is_custom_field,
)
from assetquery.core.errors import InvalidFilterError
from assetquery.core.filter_types import (
    LIST_OPERATORS, AssetStatus, CustomFieldType, Filter, FilterFieldType,
    FilterOperator, FilterValue,
)

logger = logging.getLogger(__name__)

_OPERATORS = {op.value: op for op in FilterOperator}
_STATUSES = {s.value for s in AssetStatus}


def parse_filters(
    filters_string: str,
    custom_field_types: dict[str, CustomFieldType] | None = None,
) -> list[Filter]:
    """Parse a filters query string into Filter records.

    custom_field_types maps custom field names (without the cf_ prefix) to
    their type; cf_ filters for names missing from it are skipped.
    """
    filters: list[Filter] = []
    for key, raw in parse_qsl(filters_string or "", keep_blank_values=True):
        field_type = get_filter_field_type(key, custom_field_types)
        if field_type is None:
            logger.warning(
                f"Unknown filter field: {key}", extra={"filter_name": key},
            )
            continue

        operator_str, _, value_str = raw.partition(":")
        operator = _OPERATORS.get(operator_str)
        if operator is None:
            logger.warning(
                f"Unknown filter operator '{operator_str}' for {key}",
                extra={"filter_name": key},
            )
            continue

        filters.append(Filter(
            name=key,
            type=field_type,
            operator=operator,
            value=parse_filter_value(key, field_type, operator, value_str),
        ))
    return filters


def references_custom_fields(filters_string: str | None) -> bool:
    """True if any decoded filter key names a cf_ custom field."""
    return any(
        is_custom_field(key)
        for key, _ in parse_qsl(filters_string or "", keep_blank_values=True)
    )


def get_filter_field_type(
    field_name: str,
    custom_field_types: dict[str, CustomFieldType] | None = None,
) -> FilterFieldType | None:
    """Resolve the FilterFieldType for a field name, None if unknown."""
    if is_custom_field(field_name):
        cf_type = (custom_field_types or {}).get(custom_field_name(field_name))
        if cf_type is None:
            return None
        return CUSTOM_FIELD_FILTER_TYPES[cf_type]
    field = get_filterable_field(field_name)
    return field.type if field else None


def parse_filter_value(
    field_name: str,
    field_type: FilterFieldType,
    operator: FilterOperator,
    value: str,
) -> FilterValue:
    """Coerce the raw value string according to field type and operator."""
    if field_type == FilterFieldType.BOOLEAN:
        return value.strip().lower() == "true"

    if field_type == FilterFieldType.ARRAY or operator in LIST_OPERATORS:
        items = _split_list(value)
        if field_type == FilterFieldType.NUMBER:
            items = [_to_number(field_name, item) for item in items]
        elif field_type == FilterFieldType.DATE:
            items = [_to_iso_date(field_name, item) for item in items]
        elif field_name == "status":
            for item in items:
                _check_status(item)
        if operator == FilterOperator.BETWEEN and field_type in (
            FilterFieldType.NUMBER, FilterFieldType.DATE,
        ):
            _check_range(field_name, items)
        return items

    value = value.strip()
    if field_type == FilterFieldType.NUMBER:
        return _to_number(field_name, value)
    if field_type == FilterFieldType.DATE:
        return _to_iso_date(field_name, value)
    if field_name == "status":
        _check_status(value)
    return value


# ─── Helpers ────────────────────────────────────────────────────

def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _to_number(field_name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise InvalidFilterError(
            f"'{value}' is not a number", field_name,
        ) from None


def _to_iso_date(field_name: str, value: str) -> str:
    try:
        date.fromisoformat(value[:10])
    except ValueError:
        raise InvalidFilterError(
            f"'{value}' is not an ISO date (yyyy-mm-dd)", field_name,
        ) from None
    return value


def _check_status(value: str) -> None:
    if value not in _STATUSES:
        raise InvalidFilterError(f"Unknown asset status '{value}'", "status")


def _check_range(field_name: str, items: list) -> None:
    if len(items) != 2:
        raise InvalidFilterError(
            "between requires exactly two comma-separated values", field_name,
        )
    start, end = items
    if isinstance(start, str):
        start, end = date.fromisoformat(start[:10]), date.fromisoformat(end[:10])
        if start > end:
            raise InvalidFilterError(
                "Start date must be before or equal to end date", field_name,
            )
    elif start > end:
        raise InvalidFilterError(
            "Start value must be less than or equal to end value", field_name,
        )
