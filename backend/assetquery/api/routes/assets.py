"""Asset Index Routes — advanced listing, bulk selection, filter grammar metadata and location notes.

Invariants:
    - Routes never build SQL (delegate to AssetIndexService)
    - Query parameter names match the front end: s, filters, sortBy, page, perPage
    - Malformed filter values surface as InvalidFilterError (400) via the global handler
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from assetquery.config import Settings, get_settings
from assetquery.infrastructure.database import get_db
from assetquery.schemas.asset_index import (
    AssetIndexResponse, AssetSelectionRequest, AssetSelectionResponse,
    FilterOperatorsResponse, LocationNoteRequest, LocationNoteResponse,
)
from assetquery.services.asset_index import (
    AssetIndexService, compose_location_note, describe_filter_operators,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/assets", tags=["assets"])


def get_asset_index_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AssetIndexService:
    return AssetIndexService(db, settings)


@router.get("", response_model=AssetIndexResponse)
async def list_assets(
    organization_id: str = Query(..., alias="organizationId", min_length=1),
    search: str | None = Query(None, alias="s", max_length=500),
    filters: str | None = Query(None, max_length=10_000),
    sort_by: list[str] = Query([], alias="sortBy"),
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, alias="perPage", ge=1),
    service: AssetIndexService = Depends(get_asset_index_service),
):
    """Filtered, sorted, paginated asset index."""
    return await service.fetch_page(
        organization_id, search, filters, sort_by, page, per_page,
    )


@router.post("/selection", response_model=AssetSelectionResponse)
async def select_assets(
    body: AssetSelectionRequest,
    service: AssetIndexService = Depends(get_asset_index_service),
):
    """Ids of all assets matching the current simple-mode view."""
    asset_ids = await service.fetch_selected_ids(
        body.organization_id, body.current_search_params,
    )
    return {"asset_ids": asset_ids, "count": len(asset_ids)}


@router.get("/filter-operators", response_model=FilterOperatorsResponse)
async def filter_operators():
    """Operator labels and which operators each field type accepts."""
    return describe_filter_operators()


@router.post("/location-note", response_model=LocationNoteResponse)
async def location_note(body: LocationNoteRequest):
    """Markdown note describing an asset's location being set, changed or removed."""
    content = compose_location_note(
        body.current_location.model_dump() if body.current_location else None,
        body.new_location.model_dump() if body.new_location else None,
        body.first_name, body.last_name, body.asset_name, body.is_removing,
    )
    return {"content": content}
