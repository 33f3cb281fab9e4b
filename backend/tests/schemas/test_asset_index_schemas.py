"""Asset index schemas — camelCase boundary and selection request cleanup.

Invariants:
    - Responses serialize with camelCase aliases
    - Requests accept camelCase and snake_case
    - currentSearchParams loses a leading "?" and blank values become None
"""

import pytest
from pydantic import ValidationError

from assetquery.schemas.asset_index import (
    AssetIndexResponse,
    AssetSelectionRequest,
    AssetSelectionResponse,
)


def test_index_response_serializes_camel_case():
    resp = AssetIndexResponse(
        assets=[], total_count=0, page=1, per_page=20, total_pages=0,
    )
    assert resp.model_dump(by_alias=True) == {
        "assets": [], "totalCount": 0, "page": 1, "perPage": 20, "totalPages": 0,
    }


def test_index_response_rejects_negative_count():
    with pytest.raises(ValidationError):
        AssetIndexResponse(
            assets=[], total_count=-1, page=1, per_page=20, total_pages=0,
        )


def test_selection_request_accepts_camel_case():
    req = AssetSelectionRequest.model_validate({
        "organizationId": "org-1", "currentSearchParams": "?s=drill",
    })
    assert req.organization_id == "org-1"
    assert req.current_search_params == "s=drill"


def test_selection_request_accepts_snake_case():
    req = AssetSelectionRequest(organization_id="org-1", current_search_params="tag=t1")
    assert req.current_search_params == "tag=t1"


@pytest.mark.parametrize("raw", ["", "  ", "?"])
def test_selection_request_blank_params_become_none(raw):
    req = AssetSelectionRequest(organization_id="org-1", current_search_params=raw)
    assert req.current_search_params is None


def test_selection_request_requires_organization():
    with pytest.raises(ValidationError):
        AssetSelectionRequest(organization_id="")


def test_selection_response_alias():
    resp = AssetSelectionResponse(asset_ids=["a1"], count=1)
    assert resp.model_dump(by_alias=True) == {"assetIds": ["a1"], "count": 1}
