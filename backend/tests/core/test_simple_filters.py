"""Simple Filters — WHERE clause for the basic search params (bulk selection).

Tests cover:
    - Organization scope with no search params
    - Title search, status and ALL
    - Category/location ids with their "none" sentinels
    - Tags and untagged
    - Team member custody and without-custody
    - Facets are ANDed as separate groups
"""

import pytest

from assetquery.core.errors import InvalidFilterError
from assetquery.core.query_params import QueryParams
from assetquery.core.simple_filters import get_assets_where, get_params_values

ORG = 'WHERE a."organizationId" = :p_1'


def _where(qs):
    params = QueryParams()
    return get_assets_where("org-1", qs, params), params.values


def test_params_values_defaults():
    assert get_params_values("") == {
        "search": None,
        "status": None,
        "categories_ids": [],
        "tags_ids": [],
        "location_ids": [],
        "team_member_ids": [],
    }


def test_params_values_reads_repeated_keys():
    v = get_params_values("category=c1&category=c2&tag=t1&status=ALL")
    assert v["categories_ids"] == ["c1", "c2"]
    assert v["tags_ids"] == ["t1"]
    assert v["status"] is None


def test_no_search_params_is_org_scope_only():
    assert _where(None) == (ORG, {"p_1": "org-1"})
    assert _where("") == (ORG, {"p_1": "org-1"})


def test_search_matches_title_case_insensitively():
    where, values = _where("s=%20Drill%20")
    assert where == ORG + " AND a.title ILIKE :p_2 ESCAPE '\\'"
    assert values["p_2"] == "%drill%"


def test_search_underscore_is_literal():
    _, values = _where("s=a_b")
    assert values["p_2"] == "%a\\_b%"


def test_search_percent_is_literal():
    _, values = _where("s=100%25")
    assert values["p_2"] == "%100\\%%"


def test_status():
    where, values = _where("status=CHECKED_OUT")
    assert where == ORG + " AND a.status = :p_2"
    assert values["p_2"] == "CHECKED_OUT"


def test_status_all_adds_nothing():
    where, _ = _where("status=ALL")
    assert where == ORG


def test_unknown_status_raises():
    with pytest.raises(InvalidFilterError):
        _where("status=LOST")


def test_categories_with_uncategorized():
    where, values = _where("category=c1&category=uncategorized")
    assert where == (
        ORG + ' AND (a."categoryId" IN :p_2 OR a."categoryId" IS NULL)'
    )
    assert values["p_2"] == ["c1"]


def test_only_without_location():
    where, values = _where("location=without-location")
    assert where == ORG + ' AND (a."locationId" IS NULL)'
    assert values == {"p_1": "org-1"}


def test_tags_and_untagged():
    where, values = _where("tag=t1&tag=untagged")
    assert where == ORG + (
        ' AND (EXISTS (SELECT 1 FROM public."_AssetToTag" sat '
        'WHERE sat."A" = a.id AND sat."B" IN :p_2) OR '
        'NOT EXISTS (SELECT 1 FROM public."_AssetToTag" sat WHERE sat."A" = a.id))'
    )
    assert values["p_2"] == ["t1"]


def test_team_member_checks_custody_and_bookings():
    where, values = _where("teamMember=tm1")
    assert where.count("EXISTS") == 4
    assert 'scu."teamMemberId" IN :p_2' in where
    assert 'stm."userId" IN :p_3' in where
    assert 'sb."custodianTeamMemberId" IN :p_4' in where
    assert 'sb."custodianUserId" IN :p_5' in where
    assert all(values[f"p_{n}"] == ["tm1"] for n in range(2, 6))


def test_without_custody():
    where, _ = _where("teamMember=without-custody")
    assert where == ORG + (
        ' AND (NOT EXISTS (SELECT 1 FROM public."Custody" scu WHERE scu."assetId" = a.id))'
    )


def test_facets_are_separate_groups():
    where, _ = _where("category=c1&location=l1")
    assert where == (
        ORG + ' AND (a."categoryId" IN :p_2) AND (a."locationId" IN :p_3)'
    )
