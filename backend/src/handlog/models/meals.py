# backend/src/handlog/models/meals.py
from typing import Optional, List
from datetime import date, datetime
from enum import Enum
from sqlmodel import SQLModel, Field, Relationship

from ..utils.dates import utc_now

class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"

class Meal(SQLModel, table=True):
    __tablename__ = "meals"

    id: Optional[int] = Field(default=None, primary_key=True)
    day: date = Field(index=True)
    meal_type: MealType = Field(index=True)
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now, index=True)

    items: List["MealItem"] = Relationship(
        back_populates="meal",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "MealItem.id"}
    )

class MealItem(SQLModel, table=True):
    __tablename__ = "meal_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    meal_id: int = Field(foreign_key="meals.id", index=True)
    food_item_id: int = Field(foreign_key="food_items.id", index=True)
    quantity: Optional[str] = None
    notes: Optional[str] = None

    meal: Meal = Relationship(back_populates="items")

class SuspiciousMeal(SQLModel, table=True):
    __tablename__ = "suspicious_meals"

    # PK auf meal_id => hoechstens eine Markierung pro Meal
    meal_id: int = Field(foreign_key="meals.id", primary_key=True)
    reason: Optional[str] = None
    marked_at: datetime = Field(default_factory=utc_now)
