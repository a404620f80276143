from datetime import date

import pytest
from pydantic import ValidationError

from handlog.schemas import HandConditionCreate, MealCreate


def test_hand_condition_accepts_legacy_shapes():
    a = HandConditionCreate.model_validate(
        {"date": "2025-02-01", "time_of_day": "08:15", "condition_rating": 6}
    )
    b = HandConditionCreate.model_validate({"date": "2025-02-01", "time": "08:15", "rating": 6})
    c = HandConditionCreate.model_validate({"datetime": "2025-02-01T08:15:00", "condition_rating": 6})
    for payload in (a, b, c):
        assert payload.day == date(2025, 2, 1)
        assert payload.time_of_day.strftime("%H:%M") == "08:15"
        assert payload.condition_rating == 6


@pytest.mark.parametrize("rating", [0, 11])
def test_hand_condition_rejects_out_of_range_rating(rating):
    with pytest.raises(ValidationError):
        HandConditionCreate.model_validate({"date": "2025-02-01", "time": "08:00", "rating": rating})


def test_hand_condition_requires_time():
    with pytest.raises(ValidationError):
        HandConditionCreate.model_validate({"date": "2025-02-01", "rating": 5})


def test_meal_quantity_accepts_numbers():
    meal = MealCreate.model_validate(
        {"date": "2025-02-01", "meal_type": "lunch", "items": [{"name": "Rice", "quantity": 2}]}
    )
    assert meal.items[0].quantity == "2"
