"""Asset Query Fragments — static SQL templates and the paginated index statement.

Invariants:
    - Fragments reference the asset table as `a` and never contain placeholders
    - build_asset_index_query() binds every value through QueryParams
    - Pages are 1-based; total_count counts all matching assets, not the page
    - Page order equals the ORDER BY clause, default newest first

Design Decisions:
    - One round trip: the CTE yields total count and the aggregated page
    - sortRank (ROW_NUMBER over the same ORDER BY) keeps json_agg in page order
"""

from sqlalchemy import TextClause

from assetquery.core.errors import InvalidPaginationError
from assetquery.core.query_params import QueryParams

DEFAULT_ORDER_BY = 'ORDER BY "assetCreatedAt" desc'

ASSET_QUERY_FRAGMENT = """
  SELECT
    a.id AS "assetId",
    a.title AS "assetTitle",
    a.description AS "assetDescription",
    a."createdAt" AS "assetCreatedAt",
    a."updatedAt" AS "assetUpdatedAt",
    a."userId" AS "assetUserId",
    a."mainImage" AS "assetMainImage",
    a."mainImageExpiration" AS "assetMainImageExpiration",
    a."locationId" AS "assetLocationId",
    a."organizationId" AS "assetOrganizationId",
    a.status AS "assetStatus",
    a.value AS "assetValue",
    a."availableToBook" AS "assetAvailableToBook",
    a."kitId" AS "assetKitId",
    a."categoryId" AS "assetCategoryId",
    k.id AS "kitId",
    k.name AS "kitName",
    c.id AS "categoryId",
    c.name AS "categoryName",
    c.color AS "categoryColor",
    l.name AS "locationName",
    json_agg(DISTINCT jsonb_build_object('id', t.id, 'name', t.name))
      FILTER (WHERE t.id IS NOT NULL) AS tags,
    CASE
      WHEN cu.id IS NOT NULL THEN
        jsonb_build_object(
          'name', tm.name,
          'custodian', jsonb_build_object(
            'name', tm.name,
            'user', CASE
              WHEN u.id IS NOT NULL THEN
                jsonb_build_object(
                  'firstName', u."firstName",
                  'lastName', u."lastName",
                  'profilePicture', u."profilePicture",
                  'email', u.email
                )
              ELSE NULL
            END
          )
        )
      WHEN b.id IS NOT NULL THEN
        jsonb_build_object(
          'name', COALESCE(CONCAT(bu."firstName", ' ', bu."lastName"), btm.name),
          'custodian', jsonb_build_object(
            'name', COALESCE(CONCAT(bu."firstName", ' ', bu."lastName"), btm.name),
            'user', CASE
              WHEN bu.id IS NOT NULL THEN
                jsonb_build_object(
                  'firstName', bu."firstName",
                  'lastName', bu."lastName",
                  'profilePicture', bu."profilePicture",
                  'email', bu.email
                )
              ELSE NULL
            END
          )
        )
      ELSE NULL
    END AS custody,
    (
      SELECT jsonb_agg(
        jsonb_build_object(
          'id', acfv.id,
          'value', acfv.value,
          'customField', jsonb_build_object(
            'id', cf.id,
            'name', cf.name,
            'helpText', cf."helpText",
            'required', cf.required,
            'type', cf.type,
            'options', cf.options,
            'categories', (
              SELECT jsonb_agg(jsonb_build_object('id', cat.id, 'name', cat.name))
              FROM public."_CategoryToCustomField" ccf
              JOIN public."Category" cat ON ccf."A" = cat.id
              WHERE ccf."B" = cf.id
            )
          )
        )
      )
      FROM public."AssetCustomFieldValue" acfv
      JOIN public."CustomField" cf ON acfv."customFieldId" = cf.id
      WHERE acfv."assetId" = a.id AND cf.active = true
    ) AS "customFields"
"""

ASSET_QUERY_JOINS = """
  FROM public."Asset" a
  LEFT JOIN public."Kit" k ON a."kitId" = k.id
  LEFT JOIN public."Category" c ON a."categoryId" = c.id
  LEFT JOIN public."Location" l ON a."locationId" = l.id
  LEFT JOIN public."_AssetToTag" att ON a.id = att."A"
  LEFT JOIN public."Tag" t ON att."B" = t.id
  LEFT JOIN public."Custody" cu ON cu."assetId" = a.id
  LEFT JOIN public."TeamMember" tm ON cu."teamMemberId" = tm.id
  LEFT JOIN public."User" u ON tm."userId" = u.id
  LEFT JOIN LATERAL (
    SELECT b.*
    FROM public."Booking" b
    JOIN public."_AssetToBooking" atb ON b.id = atb."B" AND a.id = atb."A"
    WHERE b.status IN ('ONGOING', 'OVERDUE')
    LIMIT 1
  ) b ON TRUE
  LEFT JOIN public."User" bu ON b."custodianUserId" = bu.id
  LEFT JOIN public."TeamMember" btm ON b."custodianTeamMemberId" = btm.id
"""

ASSET_QUERY_GROUP_BY = """
  GROUP BY a.id, k.id, k.name, c.id, c.name, c.color, l.name,
    cu.id, tm.name, u.id, u."firstName", u."lastName", u."profilePicture", u.email,
    b.id, bu.id, bu."firstName", bu."lastName", bu."profilePicture", bu.email,
    btm.name
"""

ASSET_RETURN_FRAGMENT = """
  json_agg(
    jsonb_build_object(
      'id', aq."assetId",
      'title', aq."assetTitle",
      'description', aq."assetDescription",
      'createdAt', aq."assetCreatedAt",
      'updatedAt', aq."assetUpdatedAt",
      'userId', aq."assetUserId",
      'mainImage', aq."assetMainImage",
      'mainImageExpiration', aq."assetMainImageExpiration",
      'categoryId', aq."assetCategoryId",
      'locationId', aq."assetLocationId",
      'organizationId', aq."assetOrganizationId",
      'status', aq."assetStatus",
      'valuation', aq."assetValue",
      'availableToBook', aq."assetAvailableToBook",
      'kitId', aq."assetKitId",
      'kit', CASE WHEN aq."kitId" IS NOT NULL THEN jsonb_build_object('id', aq."kitId", 'name', aq."kitName") ELSE NULL END,
      'category', CASE WHEN aq."categoryId" IS NOT NULL THEN jsonb_build_object('id', aq."categoryId", 'name', aq."categoryName", 'color', aq."categoryColor") ELSE NULL END,
      'tags', COALESCE(aq.tags, '[]'::json),
      'location', jsonb_build_object('name', aq."locationName"),
      'custody', aq.custody,
      'customFields', COALESCE(aq."customFields", '[]'::jsonb)
    )
    ORDER BY aq."sortRank"
  ) AS assets
"""


def build_asset_index_query(
    where_clause: str,
    order_by_clause: str,
    custom_field_select: str,
    page: int,
    per_page: int,
    params: QueryParams,
) -> TextClause:
    """Assemble the paginated asset index statement.

    The result has a single row: `total_count` and `assets` (JSON array of
    the page, NULL when the page is empty).
    """
    if page < 1:
        raise InvalidPaginationError(f"page must be >= 1, got {page}")
    if per_page < 1:
        raise InvalidPaginationError(f"perPage must be >= 1, got {per_page}")

    order_by = order_by_clause or DEFAULT_ORDER_BY
    limit = params.add(per_page)
    offset = params.add((page - 1) * per_page)

    sql = f"""
WITH asset_query AS (
{ASSET_QUERY_FRAGMENT}
  {custom_field_select}
{ASSET_QUERY_JOINS}
  {where_clause}
{ASSET_QUERY_GROUP_BY}
),
sorted_asset_query AS (
  SELECT asset_query.*, ROW_NUMBER() OVER ({order_by}) AS "sortRank"
  FROM asset_query
  ORDER BY "sortRank"
  LIMIT {limit} OFFSET {offset}
),
count_query AS (
  SELECT COUNT(*)::integer AS total_count FROM asset_query
)
SELECT
  (SELECT total_count FROM count_query) AS total_count,
{ASSET_RETURN_FRAGMENT}
FROM sorted_asset_query aq
"""
    return params.bind(sql)


def build_asset_ids_query(where_clause: str, params: QueryParams) -> TextClause:
    """Ids of every asset matching a WHERE clause over `a`, oldest first."""
    sql = (
        f'SELECT a.id FROM public."Asset" a {where_clause} '
        'ORDER BY a."createdAt" ASC'
    )
    return params.bind(sql)
