from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .models.meals import MealType


# ---------- Requests ----------

class MealItemIn(BaseModel):
    # leere oder fehlende Namen werden beim Speichern uebersprungen
    name: Optional[str] = None
    quantity: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_as_text(cls, v: Union[str, int, float, None]):
        # Mengen kommen je nach Client als Zahl oder Freitext ("2 Scheiben")
        if v is None or isinstance(v, str):
            return v
        return str(v)


class MealCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    meal_type: MealType
    items: List[MealItemIn] = Field(min_length=1)
    notes: Optional[str] = None


class SuspiciousMark(BaseModel):
    reason: Optional[str] = None


class SuspiciousReasonUpdate(BaseModel):
    reason: str


class HandConditionCreate(BaseModel):
    """
    Accepts every payload shape the clients have used so far:
    ``{date, time_of_day, condition_rating}``, ``{date, time, rating}``
    and ``{datetime, condition_rating}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    day: Optional[date] = Field(default=None, validation_alias=AliasChoices("date", "day"))
    time_of_day: Optional[time] = Field(default=None, validation_alias=AliasChoices("time_of_day", "time"))
    taken_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("datetime", "taken_at"))
    condition_rating: Optional[int] = Field(
        default=None,
        ge=1,
        le=10,
        validation_alias=AliasChoices("condition_rating", "rating"),
    )
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _resolve_timestamp(self) -> "HandConditionCreate":
        if self.taken_at is not None:
            if self.day is None:
                self.day = self.taken_at.date()
            if self.time_of_day is None:
                self.time_of_day = self.taken_at.time()
        missing = [
            name
            for name, value in (
                ("date", self.day),
                ("time_of_day", self.time_of_day),
                ("condition_rating", self.condition_rating),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"missing required field(s): {', '.join(missing)}")
        return self


# ---------- Responses ----------

class CreatedResponse(BaseModel):
    id: int
    message: str


class MessageResponse(BaseModel):
    message: str


class FoodSuggestion(BaseModel):
    id: int
    name: str
    is_suspicious: bool


class MealItemOut(BaseModel):
    name: str
    quantity: Optional[str] = None
    notes: Optional[str] = None
    is_suspicious: bool = False


class MealOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    day: date = Field(alias="date")
    meal_type: MealType
    notes: Optional[str] = None
    created_at: datetime
    items: List[MealItemOut]
    is_suspicious: bool = False
    suspicious_reason: Optional[str] = None
    marked_at: Optional[datetime] = None


class HandConditionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    day: date = Field(alias="date")
    time_of_day: str
    condition_rating: int
    notes: Optional[str] = None
    created_at: datetime


# ---------- Statistics ----------

class Totals(BaseModel):
    total_meals: int = 0
    total_hand_conditions: int = 0
    suspicious_meals: int = 0
    suspicious_foods: int = 0


class ConditionAverages(BaseModel):
    last_7_days: float = 0.0
    last_14_days: float = 0.0
    last_30_days: float = 0.0
    last_60_days: float = 0.0


class FoodFrequency(BaseModel):
    name: str
    frequency: int


class DailyCondition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    avg_rating: float
    entries: int


class DailyMeals(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    meals_count: int
    suspicious_count: int


class WeeklyMeals(BaseModel):
    week_start: date
    meals_count: int
    suspicious_count: int


class WeeklyCondition(BaseModel):
    week_start: date
    avg_rating: float
    entries: int


class MealTypeStat(BaseModel):
    meal_type: MealType
    count: int
    suspicious_count: int
    suspicious_percentage: float


class FoodCombination(BaseModel):
    foods: List[str]
    occurrences: int


class WeekdayPattern(BaseModel):
    weekday: str
    avg_rating: float
    entries: int


class RecoveryStats(BaseModel):
    average_days: Optional[float] = None
    instances: int = 0
    threshold: int
    window_days: int
    method: str = "first_good_day_after_each_flagged_date"


class StatisticsReport(BaseModel):
    generated_for: date
    totals: Totals
    average_condition: ConditionAverages
    top_suspicious_foods: List[FoodFrequency]
    condition_trend: List[DailyCondition]
    daily_meals: List[DailyMeals]
    weekly_trends: List[WeeklyMeals]
    weekly_condition: List[WeeklyCondition]
    meal_type_breakdown: List[MealTypeStat]
    food_combinations: List[FoodCombination]
    day_of_week: List[WeekdayPattern]
    recovery: RecoveryStats
