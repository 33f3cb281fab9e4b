"""Asset Fields — registry of filterable asset fields and their backing columns.

Invariants:
    - Only names in FILTERABLE_FIELDS (or the cf_ prefix) ever reach SQL text
    - column is the physical column on the "Asset" table (aliased `a`), or None
      for relation filters compiled through link tables
    - null_sentinel values are compared as IS NULL / "has no link", never bound

Design Decisions:
    - `name` filters the `title` column and `valuation` the `value` column
      (public field names differ from the physical schema)
"""

from dataclasses import dataclass

from assetquery.core.filter_types import CustomFieldType, FilterFieldType

CUSTOM_FIELD_PREFIX = "cf_"


@dataclass(frozen=True)
class FilterableField:
    name: str
    type: FilterFieldType
    column: str | None
    null_sentinel: str | None = None


FILTERABLE_FIELDS: dict[str, FilterableField] = {
    f.name: f
    for f in (
        FilterableField("id", FilterFieldType.STRING, "id"),
        FilterableField("name", FilterFieldType.STRING, "title"),
        FilterableField("status", FilterFieldType.ENUM, "status"),
        FilterableField("description", FilterFieldType.TEXT, "description"),
        FilterableField("valuation", FilterFieldType.NUMBER, "value"),
        FilterableField("availableToBook", FilterFieldType.BOOLEAN, "availableToBook"),
        FilterableField("createdAt", FilterFieldType.DATE, "createdAt"),
        FilterableField("updatedAt", FilterFieldType.DATE, "updatedAt"),
        FilterableField("category", FilterFieldType.ENUM, "categoryId", "uncategorized"),
        FilterableField("location", FilterFieldType.ENUM, "locationId", "without-location"),
        FilterableField("kit", FilterFieldType.ENUM, "kitId", "without-kit"),
        FilterableField("custody", FilterFieldType.ENUM, None, "without-custody"),
        FilterableField("tags", FilterFieldType.ARRAY, None, "untagged"),
    )
}

CUSTOM_FIELD_FILTER_TYPES: dict[CustomFieldType, FilterFieldType] = {
    CustomFieldType.TEXT: FilterFieldType.STRING,
    CustomFieldType.MULTILINE_TEXT: FilterFieldType.TEXT,
    CustomFieldType.OPTION: FilterFieldType.ENUM,
    CustomFieldType.BOOLEAN: FilterFieldType.BOOLEAN,
    CustomFieldType.DATE: FilterFieldType.DATE,
    CustomFieldType.NUMBER: FilterFieldType.NUMBER,
    CustomFieldType.AMOUNT: FilterFieldType.NUMBER,
}


def is_custom_field(name: str) -> bool:
    return name.startswith(CUSTOM_FIELD_PREFIX) and len(name) > len(CUSTOM_FIELD_PREFIX)


def custom_field_name(name: str) -> str:
    """Strip the cf_ prefix: `cf_Serial Number` -> `Serial Number`."""
    return name[len(CUSTOM_FIELD_PREFIX):]


def get_filterable_field(name: str) -> FilterableField | None:
    return FILTERABLE_FIELDS.get(name)
