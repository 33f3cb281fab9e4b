"""Asset Routes — HTTP contract of the asset index API.

Tests cover:
    - GET /api/v1/assets returns a camelCase page envelope
    - Query parameter aliases (organizationId, s, sortBy, perPage)
    - Malformed filters -> 400 INVALID_FILTER; bad pagination -> 400
    - Missing organizationId -> 400 VALIDATION_ERROR naming the field
    - Database failures -> 503
    - POST /selection, GET /filter-operators and POST /location-note
"""

from assetquery.core.errors import DatabaseError

ASSETS = [{"id": "a1", "title": "Drill", "tags": []}]


async def test_list_assets(client, fake_db):
    fake_db.queue_page(ASSETS, 1)

    res = await client.get("/api/v1/assets", params={"organizationId": "org-1"})

    assert res.status_code == 200
    assert res.json() == {
        "assets": ASSETS,
        "totalCount": 1,
        "page": 1,
        "perPage": 20,
        "totalPages": 1,
    }


async def test_list_assets_passes_query_params(client, fake_db):
    fake_db.queue_page([], 0)

    res = await client.get("/api/v1/assets", params=[
        ("organizationId", "org-1"),
        ("s", "drill"),
        ("filters", "valuation=gte:10"),
        ("sortBy", "name:asc"),
        ("sortBy", "createdAt:desc"),
        ("page", "2"),
        ("perPage", "5"),
    ])

    assert res.status_code == 200
    assert res.json()["page"] == 2
    assert res.json()["perPage"] == 5
    [(statement, _)] = fake_db.executed
    sql = str(statement)
    assert 'a."value" >= :p_3' in sql
    assert 'ORDER BY "assetTitle" asc, "assetCreatedAt" desc' in sql
    assert statement.compile().params["p_5"] == 5


async def test_malformed_filter_is_400(client, fake_db):
    res = await client.get("/api/v1/assets", params={
        "organizationId": "org-1", "filters": "createdAt=after:tomorrow",
    })

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "INVALID_FILTER"
    assert error["context"]["filter_name"] == "createdAt"
    assert error["context"]["organization_id"] == "org-1"
    assert fake_db.executed == []


async def test_unknown_filter_field_is_ignored(client, fake_db):
    fake_db.queue_page([], 0)

    res = await client.get("/api/v1/assets", params={
        "organizationId": "org-1", "filters": "color=is:red",
    })

    assert res.status_code == 200


async def test_missing_organization_is_400(client):
    res = await client.get("/api/v1/assets")

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "organizationId"


async def test_page_zero_is_400(client):
    res = await client.get("/api/v1/assets", params={
        "organizationId": "org-1", "page": "0",
    })

    assert res.status_code == 400


async def test_per_page_above_max_is_400(client):
    res = await client.get("/api/v1/assets", params={
        "organizationId": "org-1", "perPage": "1000",
    })

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_PAGINATION"


async def test_database_error_is_503(client, fake_db):
    fake_db.error = DatabaseError("Connection or operational error", "execute")

    res = await client.get("/api/v1/assets", params={"organizationId": "org-1"})

    assert res.status_code == 503
    assert res.json()["error"]["code"] == "DATABASE_ERROR"


async def test_select_assets(client, fake_db):
    fake_db.queue_rows([("a1",), ("a2",)])

    res = await client.post("/api/v1/assets/selection", json={
        "organizationId": "org-1",
        "currentSearchParams": "?status=AVAILABLE&category=uncategorized",
    })

    assert res.status_code == 200
    assert res.json() == {"assetIds": ["a1", "a2"], "count": 2}
    [(statement, _)] = fake_db.executed
    sql = str(statement)
    assert "a.status = :p_2" in sql
    assert 'a."categoryId" IS NULL' in sql


async def test_select_assets_without_search_params(client, fake_db):
    fake_db.queue_rows([])

    res = await client.post("/api/v1/assets/selection", json={
        "organizationId": "org-1",
    })

    assert res.status_code == 200
    assert res.json() == {"assetIds": [], "count": 0}


async def test_select_assets_requires_organization(client):
    res = await client.post("/api/v1/assets/selection", json={})

    assert res.status_code == 400


async def test_filter_operators(client):
    res = await client.get("/api/v1/assets/filter-operators")

    assert res.status_code == 200
    body = res.json()
    assert body["operatorsByType"]["array"] == ["containsAll", "containsAny"]
    assert {"operator": "isNot", "symbol": "≠", "label": "Is not"} in body["operators"]
    assert body["fields"]["createdAt"] == "date"


async def test_location_note_set(client):
    res = await client.post("/api/v1/assets/location-note", json={
        "newLocation": {"id": "loc-2", "name": "Office"},
        "firstName": "Ada",
        "lastName": "Lovelace",
        "assetName": "Drill",
    })

    assert res.status_code == 200
    assert res.json() == {
        "content": "**Ada Lovelace** set the location of **Drill** to "
                   "**[Office](/locations/loc-2)**",
    }


async def test_location_note_remove(client):
    res = await client.post("/api/v1/assets/location-note", json={
        "currentLocation": {"id": "loc-1", "name": "Warehouse"},
        "newLocation": {"id": "loc-2", "name": "Office"},
        "firstName": "Ada",
        "lastName": "Lovelace",
        "assetName": "Drill",
        "isRemoving": True,
    })

    assert res.status_code == 200
    assert res.json()["content"] == (
        "**Ada Lovelace** removed **Drill** from location "
        "**[Warehouse](/locations/loc-1)**"
    )


async def test_location_note_requires_asset_name(client):
    res = await client.post("/api/v1/assets/location-note", json={
        "firstName": "Ada", "lastName": "Lovelace",
    })

    assert res.status_code == 400
