"""Filter Types — the advanced filter grammar shared by parser, compilers and API.

Invariants:
    - Every valid field type, operator, asset status and custom field type is an Enum member
    - OPERATORS_BY_TYPE is the operator catalogue offered per field type; the
      where-clause compiler emits a predicate for every listed pair
    - OPERATOR_LABELS covers every FilterOperator (symbol + human label)

Design Decisions:
    - str Enums: operator and type values round-trip through query strings and JSON unchanged
    - Filter is a frozen dataclass: compilers only read it
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class FilterFieldType(str, Enum):
    """How a filterable field's values are compared."""
    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"
    ARRAY = "array"


class FilterOperator(str, Enum):
    """Operators a user can pick in the advanced filter builder."""
    IS = "is"
    IS_NOT = "isNot"
    CONTAINS = "contains"
    BEFORE = "before"
    AFTER = "after"
    BETWEEN = "between"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    IN = "in"
    CONTAINS_ALL = "containsAll"
    CONTAINS_ANY = "containsAny"
    IN_DATES = "inDates"


class AssetStatus(str, Enum):
    """Asset lifecycle states — maps to the `status` column."""
    AVAILABLE = "AVAILABLE"
    IN_CUSTODY = "IN_CUSTODY"
    CHECKED_OUT = "CHECKED_OUT"


class CustomFieldType(str, Enum):
    """Custom field kinds — maps to `CustomField.type`."""
    TEXT = "TEXT"
    MULTILINE_TEXT = "MULTILINE_TEXT"
    OPTION = "OPTION"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    NUMBER = "NUMBER"
    AMOUNT = "AMOUNT"


FilterValue = Union[str, float, bool, list[str], list[float]]


@dataclass(frozen=True)
class Filter:
    """One decoded filter selection."""
    name: str
    type: FilterFieldType
    operator: FilterOperator
    value: FilterValue


@dataclass(frozen=True)
class CustomFieldSorting:
    """A custom-field sort key that needs its own SELECT expression."""
    name: str
    value_key: str
    alias: str
    field_type: CustomFieldType


@dataclass(frozen=True)
class OperatorLabel:
    symbol: str
    text: str


# ─── Operator presentation ───────────────────────────────────────

OPERATOR_LABELS: dict[FilterOperator, OperatorLabel] = {
    FilterOperator.IS: OperatorLabel("=", "is"),
    FilterOperator.IS_NOT: OperatorLabel("≠", "Is not"),
    FilterOperator.CONTAINS: OperatorLabel("∋", "Contains"),
    FilterOperator.BEFORE: OperatorLabel("<", "Before"),
    FilterOperator.AFTER: OperatorLabel(">", "After"),
    FilterOperator.BETWEEN: OperatorLabel("<>", "Between"),
    FilterOperator.GT: OperatorLabel(">", "Greater than"),
    FilterOperator.LT: OperatorLabel("<", "Lower than"),
    FilterOperator.GTE: OperatorLabel(">=", "Greater or equal"),
    FilterOperator.LTE: OperatorLabel("<=", "Lower or equal"),
    FilterOperator.IN: OperatorLabel("∈", "Contains"),
    FilterOperator.CONTAINS_ALL: OperatorLabel("⊇", "Contains all"),
    FilterOperator.CONTAINS_ANY: OperatorLabel("⊃", "Contains any"),
    FilterOperator.IN_DATES: OperatorLabel("∈", "In dates"),
}

OPERATORS_BY_TYPE: dict[FilterFieldType, tuple[FilterOperator, ...]] = {
    FilterFieldType.STRING: (
        FilterOperator.IS, FilterOperator.IS_NOT, FilterOperator.CONTAINS,
    ),
    FilterFieldType.TEXT: (FilterOperator.CONTAINS,),
    FilterFieldType.NUMBER: (
        FilterOperator.IS, FilterOperator.IS_NOT,
        FilterOperator.GT, FilterOperator.LT,
        FilterOperator.GTE, FilterOperator.LTE,
        FilterOperator.BETWEEN,
    ),
    FilterFieldType.BOOLEAN: (FilterOperator.IS,),
    FilterFieldType.DATE: (
        FilterOperator.IS, FilterOperator.IS_NOT,
        FilterOperator.BEFORE, FilterOperator.AFTER,
        FilterOperator.BETWEEN, FilterOperator.IN_DATES,
    ),
    FilterFieldType.ENUM: (
        FilterOperator.IS, FilterOperator.IS_NOT,
        FilterOperator.IN, FilterOperator.CONTAINS_ANY,
    ),
    FilterFieldType.ARRAY: (
        FilterOperator.CONTAINS_ALL, FilterOperator.CONTAINS_ANY,
    ),
}

# Operators whose value is a comma-separated list
LIST_OPERATORS = frozenset({
    FilterOperator.BETWEEN, FilterOperator.IN,
    FilterOperator.CONTAINS_ALL, FilterOperator.CONTAINS_ANY,
    FilterOperator.IN_DATES,
})
