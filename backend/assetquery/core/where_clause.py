"""Where-Clause Compiler — folds Filter records into a parameterized SQL predicate.

Invariants:
    - Pure function: no IO, no DB; values only ever reach SQL through QueryParams
    - Output always starts with the organization scope: WHERE a."organizationId" = :p_1
    - Filters are ANDed in input order
    - A filter whose operator/value shape the type does not support leaves the
      clause unchanged (logged as a warning), never raises
    - Column names come from the FILTERABLE_FIELDS registry, never from input
    - Placeholders are registered only for predicates that are emitted

Design Decisions:
    - Date values are bound as `date` objects behind CAST(:p AS date)
    - Relation enums (category, location, kit) treat their sentinel as IS NULL,
      and `isNot` keeps assets without the relation
    - Custom fields compile to EXISTS over AssetCustomFieldValue; `isNot`
      compiles to NOT EXISTS of the `is` predicate
"""

import logging
import re
from datetime import date
from typing import Callable

from assetquery.core.asset_fields import (
    custom_field_name, get_filterable_field, is_custom_field,
)
from assetquery.core.filter_types import (
    Filter, FilterFieldType, FilterOperator, FilterValue,
)
from assetquery.core.query_params import LIKE_ESCAPE, QueryParams, contains_pattern

logger = logging.getLogger(__name__)

# tsquery operators and grouping characters a search word must not carry
_TSQUERY_SPECIAL = re.compile(r"[&|!():*<>'\\\"]")

_COMPARISONS: dict[FilterOperator, str] = {
    FilterOperator.IS: "=",
    FilterOperator.IS_NOT: "!=",
    FilterOperator.GT: ">",
    FilterOperator.LT: "<",
    FilterOperator.GTE: ">=",
    FilterOperator.LTE: "<=",
    FilterOperator.BEFORE: "<",
    FilterOperator.AFTER: ">",
}

Predicate = str | None


def generate_where_clause(
    organization_id: str,
    search: str | None,
    filters: list[Filter],
    params: QueryParams,
    language: str = "english",
) -> str:
    """Build the WHERE clause for the advanced asset index."""
    where = f'WHERE a."organizationId" = {params.add(organization_id)}'

    search_query = build_search_query(search)
    if search_query:
        where += (
            f" AND (to_tsvector('{language}', a.\"title\" || ' ' || "
            f"COALESCE(a.\"description\", '')) @@ "
            f"to_tsquery('{language}', {params.add(search_query)}))"
        )

    for f in filters:
        predicate = compile_filter(f, params)
        if predicate is None:
            logger.warning(
                f"Ignoring filter {f.name} ({f.type.value} {f.operator.value})",
                extra={"filter_name": f.name},
            )
            continue
        where += f" AND {predicate}"

    return where


def build_search_query(search: str | None) -> str | None:
    """Turn free text into a prefix-matching tsquery: `word:* | word | ...`."""
    if not search:
        return None
    words = [_TSQUERY_SPECIAL.sub("", w) for w in search.strip().split()]
    words = [w for w in words if w]
    if not words:
        return None
    return " | ".join(f"{w}:* | {w}" for w in words)


def compile_filter(f: Filter, params: QueryParams) -> Predicate:
    """Compile one filter to a predicate, None when it cannot apply."""
    if is_custom_field(f.name):
        return add_custom_field_filter(f, params)

    field = get_filterable_field(f.name)
    if field is None:
        return None
    if f.name == "custody":
        return add_custody_filter(f.operator, f.value, field.null_sentinel, params)
    if f.name == "tags":
        return add_tags_filter(f.operator, f.value, field.null_sentinel, params)
    if field.null_sentinel:
        return add_relation_filter(
            f'a."{field.column}"', f.operator, f.value, field.null_sentinel, params,
        )

    compiler = _TYPE_COMPILERS.get(f.type)
    if compiler is None:
        return None
    return compiler(f'a."{field.column}"', f.operator, f.value, params)


# ─── Per-type compilers ─────────────────────────────────────────

def add_string_filter(
    column: str, operator: FilterOperator, value: FilterValue, params: QueryParams,
) -> Predicate:
    if isinstance(value, list):
        return None
    if operator in (FilterOperator.IS, FilterOperator.IS_NOT):
        return f"{column} {_COMPARISONS[operator]} {params.add(value)}"
    if operator == FilterOperator.CONTAINS:
        return f"{column} ILIKE {params.add(contains_pattern(value))} {LIKE_ESCAPE}"
    return None


def add_enum_filter(
    column: str, operator: FilterOperator, value: FilterValue, params: QueryParams,
) -> Predicate:
    if operator in (FilterOperator.IS, FilterOperator.IS_NOT):
        if isinstance(value, list):
            return None
        return f"{column} {_COMPARISONS[operator]} {params.add(value)}"
    if operator in (FilterOperator.IN, FilterOperator.CONTAINS_ANY):
        if not isinstance(value, list) or not value:
            return None
        return f"{column} IN {params.add_list(value)}"
    return None


def add_text_filter(
    column: str, operator: FilterOperator, value: FilterValue, params: QueryParams,
) -> Predicate:
    if operator == FilterOperator.CONTAINS and not isinstance(value, list):
        return f"{column} ILIKE {params.add(contains_pattern(value))} {LIKE_ESCAPE}"
    return None


def add_number_filter(
    column: str, operator: FilterOperator, value: FilterValue, params: QueryParams,
) -> Predicate:
    if operator == FilterOperator.BETWEEN:
        if not isinstance(value, list) or len(value) != 2:
            return None
        return f"{column} BETWEEN {params.add(value[0])} AND {params.add(value[1])}"
    if operator in _COMPARISONS and operator not in (
        FilterOperator.BEFORE, FilterOperator.AFTER,
    ):
        if isinstance(value, list):
            return None
        return f"{column} {_COMPARISONS[operator]} {params.add(value)}"
    return None


def add_boolean_filter(
    column: str, operator: FilterOperator, value: FilterValue, params: QueryParams,
) -> Predicate:
    """Boolean filters are always equality; the operator is not consulted."""
    if not isinstance(value, bool):
        return None
    return f"{column} = {params.add(value)}"


def add_date_filter(
    column: str, operator: FilterOperator, value: FilterValue, params: QueryParams,
) -> Predicate:
    dates = _to_dates(value)
    if not dates:
        return None
    if operator in (FilterOperator.IS, FilterOperator.IS_NOT):
        if isinstance(value, list):
            return None
        return (
            f"DATE({column}) {_COMPARISONS[operator]} "
            f"CAST({params.add(dates[0])} AS date)"
        )
    if operator in (FilterOperator.BEFORE, FilterOperator.AFTER):
        if isinstance(value, list):
            return None
        return (
            f"{column} {_COMPARISONS[operator]} "
            f"CAST({params.add(dates[0])} AS date)"
        )
    if operator == FilterOperator.BETWEEN:
        if not isinstance(value, list) or len(dates) != 2:
            return None
        return (
            f"{column} BETWEEN CAST({params.add(dates[0])} AS date) "
            f"AND CAST({params.add(dates[1])} AS date)"
        )
    if operator == FilterOperator.IN_DATES:
        if not isinstance(value, list):
            return None
        return f"DATE({column}) IN {params.add_list(dates)}"
    return None


_TYPE_COMPILERS: dict[FilterFieldType, Callable[..., Predicate]] = {
    FilterFieldType.STRING: add_string_filter,
    FilterFieldType.ENUM: add_enum_filter,
    FilterFieldType.TEXT: add_text_filter,
    FilterFieldType.NUMBER: add_number_filter,
    FilterFieldType.BOOLEAN: add_boolean_filter,
    FilterFieldType.DATE: add_date_filter,
}


# ─── Relation compilers ─────────────────────────────────────────

def add_relation_filter(
    column: str,
    operator: FilterOperator,
    value: FilterValue,
    sentinel: str,
    params: QueryParams,
) -> Predicate:
    """Foreign-key enum (category, location, kit) with a 'has none' sentinel."""
    if operator == FilterOperator.IS and not isinstance(value, list):
        if value == sentinel:
            return f"{column} IS NULL"
        return f"{column} = {params.add(value)}"
    if operator == FilterOperator.IS_NOT and not isinstance(value, list):
        if value == sentinel:
            return f"{column} IS NOT NULL"
        return f"({column} != {params.add(value)} OR {column} IS NULL)"
    if operator in (FilterOperator.IN, FilterOperator.CONTAINS_ANY):
        if not isinstance(value, list) or not value:
            return None
        ids = [v for v in value if v != sentinel]
        parts = []
        if ids:
            parts.append(f"{column} IN {params.add_list(ids)}")
        if sentinel in value:
            parts.append(f"{column} IS NULL")
        return f"({' OR '.join(parts)})"
    return None


_CUSTODY_EXISTS = (
    'EXISTS (SELECT 1 FROM public."Custody" fcu '
    'WHERE fcu."assetId" = a.id{condition})'
)


def add_custody_filter(
    operator: FilterOperator, value: FilterValue, sentinel: str, params: QueryParams,
) -> Predicate:
    """Custody by team member id, or `without-custody`."""
    values = value if isinstance(value, list) else [value]
    if not values:
        return None
    if operator in (FilterOperator.IS, FilterOperator.IS_NOT) and len(values) == 1:
        if values[0] == sentinel:
            exists = _CUSTODY_EXISTS.format(condition="")
            return f"NOT {exists}" if operator == FilterOperator.IS else exists
        exists = _CUSTODY_EXISTS.format(
            condition=f' AND fcu."teamMemberId" = {params.add(values[0])}',
        )
        return exists if operator == FilterOperator.IS else f"NOT {exists}"
    if operator in (FilterOperator.IN, FilterOperator.CONTAINS_ANY):
        ids = [v for v in values if v != sentinel]
        parts = []
        if ids:
            parts.append(_CUSTODY_EXISTS.format(
                condition=f' AND fcu."teamMemberId" IN {params.add_list(ids)}',
            ))
        if sentinel in values:
            parts.append(f"NOT {_CUSTODY_EXISTS.format(condition='')}")
        return f"({' OR '.join(parts)})"
    return None


_TAG_LINKS = 'SELECT {select} FROM public."_AssetToTag" fat WHERE fat."A" = a.id{condition}'


def add_tags_filter(
    operator: FilterOperator, value: FilterValue, sentinel: str, params: QueryParams,
) -> Predicate:
    """Tag ids: containsAll needs every id linked, containsAny at least one."""
    if not isinstance(value, list) or not value:
        return None
    ids = [v for v in value if v != sentinel]
    untagged = f"NOT EXISTS ({_TAG_LINKS.format(select='1', condition='')})"

    if operator == FilterOperator.CONTAINS_ALL:
        if not ids:
            return untagged
        distinct_ids = list(dict.fromkeys(ids))
        linked = _TAG_LINKS.format(
            select='COUNT(DISTINCT fat."B")',
            condition=f' AND fat."B" IN {params.add_list(distinct_ids)}',
        )
        return f"({linked}) = {params.add(len(distinct_ids))}"
    if operator == FilterOperator.CONTAINS_ANY:
        parts = []
        if ids:
            parts.append("EXISTS ({})".format(_TAG_LINKS.format(
                select="1", condition=f' AND fat."B" IN {params.add_list(ids)}',
            )))
        if sentinel in value:
            parts.append(untagged)
        return f"({' OR '.join(parts)})"
    return None


# ─── Custom fields ──────────────────────────────────────────────

_CUSTOM_FIELD_VALUE_EXPR: dict[FilterFieldType, str] = {
    FilterFieldType.STRING: "fcfv.value->>'raw'",
    FilterFieldType.TEXT: "fcfv.value->>'raw'",
    FilterFieldType.ENUM: "fcfv.value->>'raw'",
    FilterFieldType.NUMBER: "CAST(fcfv.value->>'raw' AS double precision)",
    FilterFieldType.BOOLEAN: "CAST(fcfv.value->>'valueBoolean' AS boolean)",
    FilterFieldType.DATE: "CAST(fcfv.value->>'valueDate' AS timestamp)",
}


def add_custom_field_filter(f: Filter, params: QueryParams) -> Predicate:
    """EXISTS over the asset's value for the named custom field."""
    negate = f.operator == FilterOperator.IS_NOT
    operator = FilterOperator.IS if negate else f.operator
    compiler = _TYPE_COMPILERS.get(f.type)
    if compiler is None:
        return None
    predicate = compiler(_CUSTOM_FIELD_VALUE_EXPR[f.type], operator, f.value, params)
    if predicate is None:
        return None
    exists = (
        'EXISTS (SELECT 1 FROM public."AssetCustomFieldValue" fcfv '
        'JOIN public."CustomField" fcf ON fcfv."customFieldId" = fcf.id '
        f'WHERE fcfv."assetId" = a.id AND fcf.name = {params.add(custom_field_name(f.name))} '
        f"AND {predicate})"
    )
    return f"NOT {exists}" if negate else exists


def _to_dates(value: FilterValue) -> list[date] | None:
    """ISO strings (or a list of them) as dates; None if any is malformed."""
    values = value if isinstance(value, list) else [value]
    try:
        return [date.fromisoformat(str(v)[:10]) for v in values]
    except ValueError:
        return None
