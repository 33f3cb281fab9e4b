"""Simple Filters — WHERE clause for the basic asset index search params.

Used when an action applies to "all assets matching the current view"
(bulk selection). Reads the simple-mode query string, not the advanced
`filters` grammar:

    s           title contains (case-insensitive, `%` and `_` literal)
    status      AssetStatus, or ALL for no status filter
    category    category ids, `uncategorized` for assets without one
    tag         tag ids, `untagged` for assets without tags
    location    location ids, `without-location`
    teamMember  team member or user ids (custody or booking custodian),
                `without-custody`

Invariants:
    - Pure function: no IO, no DB
    - Always scoped to the organization
    - Each facet compiles to one parenthesized group; groups are ANDed
    - Sentinels never reach bound values
"""

from urllib.parse import parse_qs

from assetquery.core.errors import InvalidFilterError
from assetquery.core.filter_types import AssetStatus
from assetquery.core.query_params import LIKE_ESCAPE, QueryParams, contains_pattern

UNCATEGORIZED = "uncategorized"
UNTAGGED = "untagged"
WITHOUT_LOCATION = "without-location"
WITHOUT_CUSTODY = "without-custody"

_STATUSES = {s.value for s in AssetStatus}


def get_params_values(current_search_params: str | None) -> dict:
    """Extract the simple-mode facets from a query string."""
    values = parse_qs(current_search_params or "", keep_blank_values=False)
    search = (values.get("s") or [None])[0]
    status = (values.get("status") or [None])[0]
    return {
        "search": search,
        "status": None if status == "ALL" else status,
        "categories_ids": values.get("category", []),
        "tags_ids": values.get("tag", []),
        "location_ids": values.get("location", []),
        "team_member_ids": values.get("teamMember", []),
    }


def get_assets_where(
    organization_id: str,
    current_search_params: str | None,
    params: QueryParams,
) -> str:
    """WHERE clause selecting the assets visible under the given search params."""
    where = f'WHERE a."organizationId" = {params.add(organization_id)}'
    if not current_search_params:
        return where

    v = get_params_values(current_search_params)
    conditions: list[str] = []

    if v["search"]:
        pattern = contains_pattern(v["search"].lower().strip())
        conditions.append(f"a.title ILIKE {params.add(pattern)} {LIKE_ESCAPE}")

    if v["status"]:
        if v["status"] not in _STATUSES:
            raise InvalidFilterError(f"Unknown asset status '{v['status']}'", "status")
        conditions.append(f"a.status = {params.add(v['status'])}")

    if v["categories_ids"]:
        conditions.append(_nullable_fk_group(
            'a."categoryId"', v["categories_ids"], UNCATEGORIZED, params,
        ))

    if v["location_ids"]:
        conditions.append(_nullable_fk_group(
            'a."locationId"', v["location_ids"], WITHOUT_LOCATION, params,
        ))

    if v["tags_ids"]:
        conditions.append(_tags_group(v["tags_ids"], params))

    if v["team_member_ids"]:
        conditions.append(_team_members_group(v["team_member_ids"], params))

    for condition in conditions:
        where += f" AND {condition}"
    return where


def _nullable_fk_group(
    column: str, ids: list[str], sentinel: str, params: QueryParams,
) -> str:
    real_ids = [i for i in ids if i != sentinel]
    parts = []
    if real_ids:
        parts.append(f"{column} IN {params.add_list(real_ids)}")
    if sentinel in ids:
        parts.append(f"{column} IS NULL")
    return f"({' OR '.join(parts)})"


def _tags_group(ids: list[str], params: QueryParams) -> str:
    real_ids = [i for i in ids if i != UNTAGGED]
    parts = []
    if real_ids:
        parts.append(
            'EXISTS (SELECT 1 FROM public."_AssetToTag" sat '
            f'WHERE sat."A" = a.id AND sat."B" IN {params.add_list(real_ids)})'
        )
    if UNTAGGED in ids:
        parts.append(
            'NOT EXISTS (SELECT 1 FROM public."_AssetToTag" sat WHERE sat."A" = a.id)'
        )
    return f"({' OR '.join(parts)})"


def _team_members_group(ids: list[str], params: QueryParams) -> str:
    real_ids = [i for i in ids if i != WITHOUT_CUSTODY]
    parts = []
    if real_ids:
        parts += [
            'EXISTS (SELECT 1 FROM public."Custody" scu '
            f'WHERE scu."assetId" = a.id AND scu."teamMemberId" IN {params.add_list(real_ids)})',
            'EXISTS (SELECT 1 FROM public."Custody" scu '
            'JOIN public."TeamMember" stm ON scu."teamMemberId" = stm.id '
            f'WHERE scu."assetId" = a.id AND stm."userId" IN {params.add_list(real_ids)})',
            'EXISTS (SELECT 1 FROM public."Booking" sb '
            'JOIN public."_AssetToBooking" satb ON sb.id = satb."B" '
            f'WHERE satb."A" = a.id AND sb."custodianTeamMemberId" IN {params.add_list(real_ids)})',
            'EXISTS (SELECT 1 FROM public."Booking" sb '
            'JOIN public."_AssetToBooking" satb ON sb.id = satb."B" '
            f'WHERE satb."A" = a.id AND sb."custodianUserId" IN {params.add_list(real_ids)})',
        ]
    if WITHOUT_CUSTODY in ids:
        parts.append(
            'NOT EXISTS (SELECT 1 FROM public."Custody" scu WHERE scu."assetId" = a.id)'
        )
    return f"({' OR '.join(parts)})"
