"""Query Params — collects bound values while SQL fragments are assembled as text.

Invariants:
    - Values never appear in SQL text; every value gets a unique :p_N placeholder
    - List values are registered as expanding bind parameters (`IN :p_N`)
    - Placeholders are numbered in the order values were added
    - A placeholder is never followed directly by `::`; casts use CAST(... AS ...)
    - "contains" patterns escape `\`, `%` and `_`, so user text never acts
      as a LIKE wildcard

Design Decisions:
    - Fragments stay plain strings so static templates and compiled predicates
      concatenate freely; binding happens once, in bind()
"""

from typing import Any

from sqlalchemy import TextClause, bindparam, text
from sqlalchemy.sql.elements import BindParameter


class QueryParams:
    """Hands out named placeholders and binds the collected values onto text()."""

    def __init__(self, prefix: str = "p"):
        self._prefix = prefix
        self._values: dict[str, Any] = {}
        self._expanding: set[str] = set()

    def add(self, value: Any) -> str:
        """Register a scalar value, return its placeholder (e.g. ':p_1')."""
        name = f"{self._prefix}_{len(self._values) + 1}"
        self._values[name] = value
        return f":{name}"

    def add_list(self, values: list) -> str:
        """Register a list for `IN :p_N` expansion, return its placeholder."""
        placeholder = self.add(list(values))
        self._expanding.add(placeholder[1:])
        return placeholder

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    def bindparams(self) -> list[BindParameter]:
        return [
            bindparam(name, value, expanding=name in self._expanding)
            for name, value in self._values.items()
        ]

    def bind(self, sql: str) -> TextClause:
        """Build the executable statement for a fully assembled SQL string."""
        return text(sql).bindparams(*self.bindparams())

    def __len__(self) -> int:
        return len(self._values)


# Follows an ILIKE placeholder bound to contains_pattern()
LIKE_ESCAPE = "ESCAPE '\\'"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so `value` matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(value: str) -> str:
    """`%value%` with the value's own wildcards escaped."""
    return f"%{escape_like(value)}%"
