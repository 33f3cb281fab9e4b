"""Asset Index Service — runs the compiled asset index and selection queries.

Invariants:
    - Every statement is built by core/ compilers and bound through QueryParams
    - Custom field types are loaded only when a decoded filter key is a cf_ field
    - per_page defaults to settings.default_per_page and never exceeds max_per_page
    - An empty page returns assets == [] with the real total_count
    - AssetQueryErrors leaving the service carry the organization id in their context

Design Decisions:
    - Thin imperative shell: parsing and SQL assembly stay pure in core/
    - One service instance per request (holds the request's AsyncSession)
"""

import json
import logging
import math
from contextlib import contextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from assetquery.config import Settings
from assetquery.core.asset_fields import FILTERABLE_FIELDS
from assetquery.core.asset_query_fragments import (
    build_asset_ids_query, build_asset_index_query,
)
from assetquery.core.errors import AssetQueryError, InvalidPaginationError
from assetquery.core.filter_parser import parse_filters, references_custom_fields
from assetquery.core.filter_types import (
    OPERATOR_LABELS, OPERATORS_BY_TYPE, CustomFieldType,
)
from assetquery.core.location_notes import LocationRef, get_location_update_note_content
from assetquery.core.query_params import QueryParams
from assetquery.core.simple_filters import get_assets_where
from assetquery.core.sorting import generate_custom_field_select, parse_sorting_options
from assetquery.core.where_clause import generate_where_clause

logger = logging.getLogger(__name__)

_CUSTOM_FIELD_TYPES_SQL = (
    'SELECT cf.name, cf.type FROM public."CustomField" cf '
    'WHERE cf."organizationId" = :organization_id AND cf.active = true'
)


@contextmanager
def _organization_context(organization_id: str):
    """Tag errors raised inside the block with the organization they concern."""
    try:
        yield
    except AssetQueryError as e:
        e.context.organization_id = organization_id
        raise


class AssetIndexService:
    """Advanced asset listing and bulk selection for one organization."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    async def fetch_page(
        self,
        organization_id: str,
        search: str | None,
        filters: str | None,
        sort_by: list[str],
        page: int = 1,
        per_page: int | None = None,
    ) -> dict:
        """Filter, sort and paginate the organization's assets."""
        with _organization_context(organization_id):
            per_page = per_page or self.settings.default_per_page
            if per_page > self.settings.max_per_page:
                raise InvalidPaginationError(
                    f"perPage must be <= {self.settings.max_per_page}, got {per_page}",
                )

            custom_field_types = None
            if references_custom_fields(filters):
                custom_field_types = await self.load_custom_field_types(organization_id)

            parsed = parse_filters(filters or "", custom_field_types)
            sorting = parse_sorting_options(sort_by)

            params = QueryParams()
            custom_field_select = generate_custom_field_select(
                sorting.custom_field_sortings, params,
            )
            where = generate_where_clause(
                organization_id, search, parsed, params,
                language=self.settings.search_language,
            )
            statement = build_asset_index_query(
                where, sorting.order_by_clause, custom_field_select,
                page, per_page, params,
            )

            result = await self.db.execute(statement)
            row = result.mappings().one()

        total_count = row["total_count"] or 0
        assets = _decode_json(row["assets"]) or []

        logger.info(
            f"Asset index page {page} ({len(assets)}/{total_count})",
            extra={"organization_id": organization_id, "total_count": total_count},
        )
        return {
            "assets": assets,
            "total_count": total_count,
            "page": page,
            "per_page": per_page,
            "total_pages": math.ceil(total_count / per_page),
        }

    async def fetch_selected_ids(
        self, organization_id: str, current_search_params: str | None,
    ) -> list[str]:
        """Ids of every asset matching the simple-mode search params."""
        with _organization_context(organization_id):
            params = QueryParams()
            where = get_assets_where(organization_id, current_search_params, params)
            result = await self.db.execute(build_asset_ids_query(where, params))
            return [str(asset_id) for asset_id in result.scalars().all()]

    async def load_custom_field_types(
        self, organization_id: str,
    ) -> dict[str, CustomFieldType]:
        """Active custom field names mapped to their type."""
        result = await self.db.execute(
            text(_CUSTOM_FIELD_TYPES_SQL), {"organization_id": organization_id},
        )
        types: dict[str, CustomFieldType] = {}
        for name, field_type in result.all():
            try:
                types[name] = CustomFieldType(field_type)
            except ValueError:
                logger.warning(
                    f"Custom field {name} has unsupported type {field_type}",
                    extra={"organization_id": organization_id},
                )
        return types


def describe_filter_operators() -> dict:
    """Operator labels plus the operators each field type honours."""
    return {
        "operators": [
            {"operator": op.value, "symbol": label.symbol, "label": label.text}
            for op, label in OPERATOR_LABELS.items()
        ],
        "operators_by_type": {
            field_type.value: [op.value for op in ops]
            for field_type, ops in OPERATORS_BY_TYPE.items()
        },
        "fields": {
            name: field.type.value for name, field in FILTERABLE_FIELDS.items()
        },
    }


def compose_location_note(
    current_location: dict | None,
    new_location: dict | None,
    first_name: str,
    last_name: str,
    asset_name: str,
    is_removing: bool = False,
) -> str:
    """Markdown activity note for an asset's location change."""
    return get_location_update_note_content(
        LocationRef(**current_location) if current_location else None,
        LocationRef(**new_location) if new_location else None,
        first_name, last_name, asset_name, is_removing,
    )


def _decode_json(value: Any) -> Any:
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value
