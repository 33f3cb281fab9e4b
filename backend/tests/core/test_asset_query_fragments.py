"""Asset Query Fragments — the paginated index statement.

Tests cover:
    - Limit/offset computed from 1-based pages
    - Default ORDER BY when no sort is given
    - Custom ORDER BY drives the sortRank window
    - Invalid pagination raises InvalidPaginationError
    - Selection query over the same WHERE clause
"""

import pytest

from assetquery.core.asset_query_fragments import (
    DEFAULT_ORDER_BY, build_asset_ids_query, build_asset_index_query,
)
from assetquery.core.errors import InvalidPaginationError
from assetquery.core.query_params import QueryParams

WHERE = 'WHERE a."organizationId" = :p_1'


def _params():
    params = QueryParams()
    params.add("org-1")
    return params


def test_limit_and_offset_from_page():
    params = _params()
    statement = build_asset_index_query(WHERE, "", "", 3, 25, params)
    sql = str(statement)
    assert "LIMIT :p_2 OFFSET :p_3" in sql
    assert statement.compile().params == {"p_1": "org-1", "p_2": 25, "p_3": 50}


def test_first_page_has_zero_offset():
    params = _params()
    build_asset_index_query(WHERE, "", "", 1, 10, params)
    assert params.values["p_3"] == 0


def test_default_order_is_newest_first():
    sql = str(build_asset_index_query(WHERE, "", "", 1, 20, _params()))
    assert f"ROW_NUMBER() OVER ({DEFAULT_ORDER_BY})" in sql


def test_custom_order_by_drives_sort_rank():
    sql = str(build_asset_index_query(
        WHERE, 'ORDER BY "assetTitle" asc', "", 1, 20, _params(),
    ))
    assert 'ROW_NUMBER() OVER (ORDER BY "assetTitle" asc) AS "sortRank"' in sql
    assert 'ORDER BY aq."sortRank"' in sql


def test_statement_embeds_where_and_custom_field_select():
    select = ', (SELECT 1) AS "cf_Weight"'
    sql = str(build_asset_index_query(WHERE, "", select, 1, 20, _params()))
    assert WHERE in sql
    assert select in sql
    assert "total_count" in sql
    assert "AS assets" in sql


@pytest.mark.parametrize("page,per_page", [(0, 20), (-1, 20), (1, 0)])
def test_invalid_pagination_raises(page, per_page):
    with pytest.raises(InvalidPaginationError) as exc:
        build_asset_index_query(WHERE, "", "", page, per_page, _params())
    assert exc.value.http_status == 400


def test_invalid_pagination_adds_no_params():
    params = _params()
    with pytest.raises(InvalidPaginationError):
        build_asset_index_query(WHERE, "", "", 0, 20, params)
    assert len(params) == 1


def test_ids_query_uses_where_clause():
    statement = build_asset_ids_query(WHERE, _params())
    assert str(statement) == (
        'SELECT a.id FROM public."Asset" a ' + WHERE + ' ORDER BY a."createdAt" ASC'
    )
    assert statement.compile().params == {"p_1": "org-1"}
