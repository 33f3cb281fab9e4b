"""Sort Compiler — maps sort keys to ORDER BY parts and custom-field SELECT expressions.

Sort keys arrive as `name:direction[:fieldType]`, e.g. `name:asc`,
`cf_Serial Number:desc:TEXT`.

Invariants:
    - Pure function: no IO, no DB
    - ORDER BY parts keep the input order
    - Unknown sort fields are logged and ignored, never raise
    - Direction is always rendered as `asc` or `desc`
    - Custom-field aliases are quoted identifiers of word characters only,
      unique within one call; the field name and type are bound values
"""

import logging
import re
from dataclasses import dataclass, field

from assetquery.core.asset_fields import CUSTOM_FIELD_PREFIX, custom_field_name, is_custom_field
from assetquery.core.filter_types import CustomFieldSorting, CustomFieldType
from assetquery.core.query_params import QueryParams

logger = logging.getLogger(__name__)

DIRECT_ASSET_FIELDS: dict[str, str] = {
    "id": "assetId",
    "name": "assetTitle",
    "valuation": "assetValue",
    "status": "assetStatus",
    "description": "assetDescription",
    "createdAt": "assetCreatedAt",
    "updatedAt": "assetUpdatedAt",
    "availableToBook": "assetAvailableToBook",
}

RELATION_SORT_EXPRESSIONS: dict[str, str] = {
    "kit": '"kitName"',
    "category": '"categoryName"',
    "location": '"locationName"',
    "custody": "custody->>'name'",
}

_DIRECTIONS = {"asc", "desc"}
_CUSTOM_FIELD_TYPES = {t.value: t for t in CustomFieldType}


@dataclass
class SortingOptions:
    order_by_clause: str = ""
    custom_field_sortings: list[CustomFieldSorting] = field(default_factory=list)


def parse_sorting_options(sort_by: list[str]) -> SortingOptions:
    """Translate sort keys into an ORDER BY clause plus custom-field sortings."""
    order_by_parts: list[str] = []
    custom_field_sortings: list[CustomFieldSorting] = []
    used_aliases: set[str] = set()

    for entry in sort_by:
        name, direction, field_type = _split_sort_entry(entry)

        if name in DIRECT_ASSET_FIELDS:
            order_by_parts.append(f'"{DIRECT_ASSET_FIELDS[name]}" {direction}')
        elif name in RELATION_SORT_EXPRESSIONS:
            order_by_parts.append(f"{RELATION_SORT_EXPRESSIONS[name]} {direction}")
        elif is_custom_field(name):
            cf_name = custom_field_name(name)
            alias = _unique_alias(cf_name, used_aliases)
            custom_field_sortings.append(CustomFieldSorting(
                name=cf_name,
                value_key="raw",
                alias=alias,
                field_type=_CUSTOM_FIELD_TYPES.get(field_type, CustomFieldType.TEXT),
            ))
            order_by_parts.append(f'"{alias}" {direction}')
        else:
            logger.warning(f"Unknown sort field: {name}", extra={"sort_field": name})

    order_by_clause = (
        f"ORDER BY {', '.join(order_by_parts)}" if order_by_parts else ""
    )
    return SortingOptions(order_by_clause, custom_field_sortings)


def generate_custom_field_select(
    custom_field_sortings: list[CustomFieldSorting], params: QueryParams,
) -> str:
    """Extra SELECT columns exposing each sorted custom field's value as text.

    Returns "" when there is nothing to sort by; otherwise a string starting
    with ", " ready to append after the main select list.
    """
    if not custom_field_sortings:
        return ""

    columns = [
        f"""(
      SELECT
        CASE {params.add(cf.field_type.value)}
          WHEN 'DATE' THEN
            (acfv.value->>'valueDate')::timestamp::text
          WHEN 'NUMBER' THEN
            (acfv.value->>'raw')::numeric::text
          WHEN 'BOOLEAN' THEN
            (acfv.value->>'valueBoolean')::boolean::text
          ELSE
            acfv.value->>'raw'
        END
      FROM public."AssetCustomFieldValue" acfv
      JOIN public."CustomField" cf ON acfv."customFieldId" = cf.id
      WHERE acfv."assetId" = a.id AND cf.name = {params.add(cf.name)}
      LIMIT 1
    )"""
        + f' AS "{cf.alias}"'
        for cf in custom_field_sortings
    ]
    return ", " + ", ".join(columns)


def _split_sort_entry(entry: str) -> tuple[str, str, str | None]:
    name, _, rest = entry.partition(":")
    direction, _, field_type = rest.partition(":")
    direction = direction.strip().lower()
    if direction not in _DIRECTIONS:
        logger.warning(
            f"Invalid sort direction '{direction}' for {name}, using asc",
            extra={"sort_field": name},
        )
        direction = "asc"
    return name, direction, field_type.strip().upper() or None


def _unique_alias(cf_name: str, used: set[str]) -> str:
    base = CUSTOM_FIELD_PREFIX + re.sub(r"\W+", "_", cf_name.strip())
    alias = base
    suffix = 2
    while alias in used:
        alias = f"{base}_{suffix}"
        suffix += 1
    used.add(alias)
    return alias
