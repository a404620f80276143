import pytest


MEAL = {
    "date": "2025-05-02",
    "meal_type": "breakfast",
    "notes": "at home",
    "items": [
        {"name": "Oatmeal", "quantity": "1 bowl"},
        {"name": "Milk", "quantity": 200, "notes": "oat milk?"},
        {"name": "Banana"},
    ],
}


@pytest.mark.asyncio
async def test_create_meal_and_fetch_items_in_order(client):
    resp = await client.post("/api/meals", json=MEAL)
    assert resp.status_code == 200, resp.text
    meal_id = resp.json()["id"]

    one = await client.get(f"/api/meals/{meal_id}")
    assert one.status_code == 200
    payload = one.json()
    assert payload["date"] == "2025-05-02"
    assert payload["meal_type"] == "breakfast"
    assert payload["is_suspicious"] is False
    assert [i["name"] for i in payload["items"]] == ["Oatmeal", "Milk", "Banana"]
    assert payload["items"][1]["quantity"] == "200"

    listing = await client.get("/api/meals", params={"startDate": "2025-05-01", "endDate": "2025-05-03"})
    assert listing.status_code == 200
    assert [m["id"] for m in listing.json()] == [meal_id]


@pytest.mark.asyncio
async def test_blank_item_names_are_skipped(client):
    body = dict(MEAL, items=[{"name": "  "}, {"name": "Toast"}, {"name": ""}])
    resp = await client.post("/api/meals", json=body)
    assert resp.status_code == 200, resp.text

    items = (await client.get(f"/api/meals/{resp.json()['id']}")).json()["items"]
    assert [i["name"] for i in items] == ["Toast"]


@pytest.mark.asyncio
async def test_meal_without_usable_items_is_rejected(client):
    for items in ([], [{"name": "   "}]):
        resp = await client.post("/api/meals", json=dict(MEAL, items=items))
        assert resp.status_code == 400
        assert "error" in resp.json()

    assert (await client.get("/api/meals")).json() == []


@pytest.mark.asyncio
async def test_missing_fields_return_400(client):
    resp = await client.post("/api/meals", json={"meal_type": "lunch", "items": [{"name": "Rice"}]})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Validation failed"
    assert "date" in body["details"]

    resp = await client.post("/api/meals", json=dict(MEAL, meal_type="brunch"))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_food_names_resolve_case_insensitively(client, db_session):
    from sqlmodel import select
    from handlog.models.foods import FoodItem

    await client.post("/api/meals", json=dict(MEAL, items=[{"name": "Eggs"}]))
    await client.post("/api/meals", json=dict(MEAL, date="2025-05-03", items=[{"name": "eggs"}]))

    foods = db_session.exec(select(FoodItem)).all()
    assert [(f.name, f.name_key) for f in foods] == [("Eggs", "eggs")]


@pytest.mark.asyncio
async def test_meal_listing_order_and_range_validation(client):
    await client.post("/api/meals", json=dict(MEAL, date="2025-05-01", meal_type="lunch"))
    await client.post("/api/meals", json=dict(MEAL, date="2025-05-02", meal_type="lunch"))
    await client.post("/api/meals", json=dict(MEAL, date="2025-05-02", meal_type="breakfast"))

    meals = (await client.get("/api/meals")).json()
    assert [(m["date"], m["meal_type"]) for m in meals] == [
        ("2025-05-02", "breakfast"),
        ("2025-05-02", "lunch"),
        ("2025-05-01", "lunch"),
    ]

    bad = await client.get("/api/meals", params={"startDate": "2025-05-03", "endDate": "2025-05-01"})
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_unknown_meal_is_404(client):
    resp = await client.get("/api/meals/999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Meal not found"}


@pytest.mark.asyncio
async def test_null_item_name_is_skipped(client):
    body = dict(MEAL, items=[{"name": None, "quantity": "1"}, {"name": "Toast"}, {"quantity": "2"}])
    resp = await client.post("/api/meals", json=body)
    assert resp.status_code == 200, resp.text

    items = (await client.get(f"/api/meals/{resp.json()['id']}")).json()["items"]
    assert [i["name"] for i in items] == ["Toast"]


@pytest.mark.asyncio
async def test_failed_item_insert_rolls_back_whole_meal(client, db_session, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from sqlmodel import select
    from handlog.models.foods import FoodItem
    from handlog.services import meals as meal_service

    real_get_or_create = meal_service.get_or_create_food
    calls = []

    def _fail_on_second(session, name):
        calls.append(name)
        if len(calls) == 2:
            raise OperationalError("INSERT INTO food_items", {}, Exception("disk I/O error"))
        return real_get_or_create(session, name)

    monkeypatch.setattr(meal_service, "get_or_create_food", _fail_on_second)

    resp = await client.post("/api/meals", json=MEAL)
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Failed to add meal"
    assert "disk I/O error" in body["details"]
    assert calls == ["Oatmeal", "Milk"]

    assert (await client.get("/api/meals")).json() == []
    assert db_session.exec(select(FoodItem)).all() == []


@pytest.mark.asyncio
async def test_created_at_is_serialized(client):
    resp = await client.post("/api/meals", json=MEAL)
    assert resp.status_code == 200, resp.text

    payload = (await client.get(f"/api/meals/{resp.json()['id']}")).json()
    assert payload["created_at"]
    assert payload["marked_at"] is None
