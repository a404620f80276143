from datetime import date, timedelta

import pytest


@pytest.mark.asyncio
async def test_statistics_report_shape(client):
    today = date.today()
    yesterday = today - timedelta(days=1)

    meal = await client.post(
        "/api/meals",
        json={
            "date": yesterday.isoformat(),
            "meal_type": "dinner",
            "items": [{"name": "Shrimp"}, {"name": "Rice"}],
        },
    )
    await client.post(f"/api/meals/{meal.json()['id']}/suspicious", json={"reason": "swelling"})
    await client.post(
        "/api/hand-conditions",
        json={"date": today.isoformat(), "time": "09:00", "rating": 8},
    )

    resp = await client.get("/api/statistics")
    assert resp.status_code == 200
    report = resp.json()

    assert report["generated_for"] == today.isoformat()
    assert report["totals"] == {
        "total_meals": 1,
        "total_hand_conditions": 1,
        "suspicious_meals": 1,
        "suspicious_foods": 2,
    }
    assert report["average_condition"]["last_7_days"] == 8.0
    assert report["condition_trend"] == [{"date": today.isoformat(), "avg_rating": 8.0, "entries": 1}]
    assert report["food_combinations"] == [{"foods": ["Rice", "Shrimp"], "occurrences": 1}]
    assert [s["meal_type"] for s in report["meal_type_breakdown"]] == [
        "breakfast", "lunch", "dinner", "snack",
    ]
    assert report["recovery"]["instances"] == 1
    assert report["recovery"]["average_days"] == 1.0


@pytest.mark.asyncio
async def test_statistics_on_empty_database(client):
    report = (await client.get("/api/statistics")).json()
    assert report["totals"]["total_meals"] == 0
    assert report["average_condition"] == {
        "last_7_days": 0.0,
        "last_14_days": 0.0,
        "last_30_days": 0.0,
        "last_60_days": 0.0,
    }
    assert report["recovery"]["average_days"] is None
