"""Fill the configured database with random meals, flags and ratings."""
from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from sqlmodel import Session

from handlog.core.database import engine, init_db
from handlog.models.meals import MealType
from handlog.schemas import HandConditionCreate, MealCreate, MealItemIn
from handlog.services.hand_conditions import create_hand_condition
from handlog.services.meals import create_meal, mark_suspicious


@dataclass(frozen=True)
class MealSeed:
    meal_type: MealType
    foods: Sequence[str]


MEALS: list[MealSeed] = [
    MealSeed(MealType.breakfast, ("Oatmeal", "Milk", "Banana")),
    MealSeed(MealType.breakfast, ("Eggs", "Toast", "Butter")),
    MealSeed(MealType.breakfast, ("Yogurt", "Strawberries")),
    MealSeed(MealType.lunch, ("Chicken Breast", "Rice", "Salad")),
    MealSeed(MealType.lunch, ("Tomato Soup", "Bread")),
    MealSeed(MealType.lunch, ("Tuna", "Pasta", "Tomato")),
    MealSeed(MealType.dinner, ("Salmon", "Potatoes", "Broccoli")),
    MealSeed(MealType.dinner, ("Pizza", "Cheese", "Tomato")),
    MealSeed(MealType.dinner, ("Shrimp", "Noodles", "Peanuts")),
    MealSeed(MealType.snack, ("Almonds",)),
    MealSeed(MealType.snack, ("Chocolate", "Milk")),
]

# Foods that push the simulated skin rating down on the following days
TRIGGERS = {"Milk", "Peanuts", "Shrimp", "Tomato"}


def seed(days: int = 60, flag_probability: float = 0.5, rng_seed: int | None = None) -> None:
    rng = random.Random(rng_seed)
    init_db()
    today = date.today()
    flare = 0

    with Session(engine) as session:
        for offset in range(days, -1, -1):
            day = today - timedelta(days=offset)
            triggered = False
            for meal_seed in rng.sample(MEALS, rng.randint(2, 4)):
                meal = create_meal(session, MealCreate(
                    day=day,
                    meal_type=meal_seed.meal_type,
                    items=[MealItemIn(name=name, quantity="1 serving") for name in meal_seed.foods],
                ))
                hits = TRIGGERS.intersection(meal_seed.foods)
                if hits:
                    triggered = True
                    if rng.random() < flag_probability:
                        mark_suspicious(session, meal.id, f"contains {', '.join(sorted(hits))}")

            flare = 3 if triggered else max(0, flare - 1)
            rating = max(1, min(10, 8 - flare * 2 + rng.randint(-1, 1)))
            create_hand_condition(session, HandConditionCreate(
                day=day,
                time_of_day=f"{rng.choice([8, 13, 20]):02d}:00",
                condition_rating=rating,
            ))

    print(f"Seeded {days + 1} days of demo data.")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--days", type=int, default=60)
    parser.add_argument("--flag-probability", type=float, default=0.5)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()
    seed(args.days, args.flag_probability, args.seed)


if __name__ == "__main__":
    main()
