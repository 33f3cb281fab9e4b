"""Asset Index Schemas — Pydantic models for the asset listing API boundary.

Invariants:
    - JSON field names are camelCase (organizationId, totalCount, perPage, ...)
    - Python attributes are snake_case; both accepted on input
    - Asset entries pass through as the JSON objects built in SQL
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AssetIndexResponse(_CamelModel):
    """One page of the advanced asset index."""
    assets: list[dict[str, Any]]
    total_count: int = Field(ge=0)
    page: int = Field(ge=1)
    per_page: int = Field(ge=1)
    total_pages: int = Field(ge=0)


class AssetSelectionRequest(_CamelModel):
    """Select-all request: the simple-mode search params of the current view."""
    organization_id: str = Field(min_length=1, max_length=100)
    current_search_params: str | None = Field(None, max_length=10_000)

    @field_validator("current_search_params")
    @classmethod
    def strip_leading_question_mark(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().lstrip("?")
        return v or None


class AssetSelectionResponse(_CamelModel):
    asset_ids: list[str]
    count: int = Field(ge=0)


class OperatorDescription(_CamelModel):
    operator: str
    symbol: str
    label: str


class FilterOperatorsResponse(_CamelModel):
    """Operator labels and the operators each filter field type accepts."""
    operators: list[OperatorDescription]
    operators_by_type: dict[str, list[str]]
    fields: dict[str, str]


class LocationRefModel(_CamelModel):
    id: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=200)


class LocationNoteRequest(_CamelModel):
    """Who moved which asset from where to where."""
    current_location: LocationRefModel | None = None
    new_location: LocationRefModel | None = None
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    asset_name: str = Field(min_length=1, max_length=500)
    is_removing: bool = False


class LocationNoteResponse(_CamelModel):
    content: str
