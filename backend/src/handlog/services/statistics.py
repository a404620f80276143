"""
Read-only statistics over meals, flags and hand-condition ratings.

Each report is a separate function taking ``(session, today)`` so it can be
tested on its own; ``build_report`` composes them into one response. All
windows are trailing and inclusive: ``today - N days <= day <= today``.
Series are sparse: days or weeks without data are omitted, never zero-filled.
"""
from __future__ import annotations

from collections import Counter, OrderedDict, defaultdict
from datetime import date
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy import func
from sqlmodel import Session, select

from ..models.foods import FoodItem
from ..models.hand_conditions import HandCondition
from ..models.meals import Meal, MealItem, MealType, SuspiciousMeal
from ..schemas import (
    ConditionAverages,
    DailyCondition,
    DailyMeals,
    FoodCombination,
    FoodFrequency,
    MealTypeStat,
    RecoveryStats,
    StatisticsReport,
    Totals,
    WeekdayPattern,
    WeeklyCondition,
    WeeklyMeals,
)
from ..utils.dates import WEEKDAY_NAMES, week_start, window_start

AVERAGE_WINDOWS = (7, 14, 30, 60)
TREND_DAYS = 14
WEEKLY_DAYS = 28
WEEKDAY_DAYS = 60
RECOVERY_DAYS = 30
GOOD_DAY_RATING = 7
TOP_FOODS = 10
TOP_COMBINATIONS = 10


def _avg(total, count: int, ndigits: int = 2) -> float:
    return round(float(total) / count, ndigits) if count else 0.0


def _as_date(value) -> Optional[date]:
    # SQLite hands back ISO strings for aggregates over DATE columns
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


# ---------- Grouped base queries ----------

def _condition_by_day(session: Session, start: date, end: date) -> List[Tuple[date, int, int]]:
    """(day, rating sum, entry count) per calendar day, ascending."""
    rows = session.exec(
        select(
            HandCondition.day,
            func.sum(HandCondition.condition_rating),
            func.count(HandCondition.id),
        )
        .where(HandCondition.day >= start, HandCondition.day <= end)
        .group_by(HandCondition.day)
        .order_by(HandCondition.day.asc())
    ).all()
    return [(_as_date(d), int(total or 0), int(n or 0)) for d, total, n in rows]


def _meals_by_day(session: Session, start: date, end: date) -> List[Tuple[date, int, int]]:
    """(day, meal count, flagged meal count) per calendar day, ascending."""
    rows = session.exec(
        select(
            Meal.day,
            func.count(Meal.id),
            func.count(SuspiciousMeal.meal_id),
        )
        .select_from(Meal)
        .join(SuspiciousMeal, SuspiciousMeal.meal_id == Meal.id, isouter=True)
        .where(Meal.day >= start, Meal.day <= end)
        .group_by(Meal.day)
        .order_by(Meal.day.asc())
    ).all()
    return [(_as_date(d), int(n or 0), int(flagged or 0)) for d, n, flagged in rows]


# ---------- Reports ----------

def totals(session: Session) -> Totals:
    return Totals(
        total_meals=session.exec(select(func.count(Meal.id))).one(),
        total_hand_conditions=session.exec(select(func.count(HandCondition.id))).one(),
        suspicious_meals=session.exec(select(func.count(SuspiciousMeal.meal_id))).one(),
        suspicious_foods=session.exec(
            select(func.count(FoodItem.id)).where(FoodItem.is_suspicious.is_(True))
        ).one(),
    )


def average_condition(session: Session, today: date) -> ConditionAverages:
    values: Dict[str, float] = {}
    for days in AVERAGE_WINDOWS:
        avg = session.exec(
            select(func.avg(HandCondition.condition_rating))
            .where(HandCondition.day >= window_start(today, days), HandCondition.day <= today)
        ).one()
        values[f"last_{days}_days"] = round(float(avg), 2) if avg is not None else 0.0
    return ConditionAverages(**values)


def top_suspicious_foods(session: Session, limit: int = TOP_FOODS) -> List[FoodFrequency]:
    """Foods ranked by the number of flagged meals they appear in."""
    frequency = func.count(MealItem.meal_id.distinct())
    rows = session.exec(
        select(FoodItem.name, frequency)
        .select_from(MealItem)
        .join(SuspiciousMeal, SuspiciousMeal.meal_id == MealItem.meal_id)
        .join(FoodItem, FoodItem.id == MealItem.food_item_id)
        .group_by(FoodItem.id, FoodItem.name)
        .order_by(frequency.desc(), FoodItem.name.asc(), FoodItem.id.asc())
        .limit(limit)
    ).all()
    return [FoodFrequency(name=name, frequency=int(n)) for name, n in rows]


def condition_trend(session: Session, today: date, days: int = TREND_DAYS) -> List[DailyCondition]:
    return [
        DailyCondition(day=d, avg_rating=_avg(total, n), entries=n)
        for d, total, n in _condition_by_day(session, window_start(today, days), today)
    ]


def daily_meals(session: Session, today: date, days: int = TREND_DAYS) -> List[DailyMeals]:
    return [
        DailyMeals(day=d, meals_count=n, suspicious_count=flagged)
        for d, n, flagged in _meals_by_day(session, window_start(today, days), today)
    ]


def weekly_trends(session: Session, today: date, days: int = WEEKLY_DAYS) -> List[WeeklyMeals]:
    weeks: Dict[date, List[int]] = OrderedDict()
    for d, n, flagged in _meals_by_day(session, window_start(today, days), today):
        bucket = weeks.setdefault(week_start(d), [0, 0])
        bucket[0] += n
        bucket[1] += flagged
    return [
        WeeklyMeals(week_start=w, meals_count=n, suspicious_count=flagged)
        for w, (n, flagged) in weeks.items()
    ]


def weekly_condition(session: Session, today: date, days: int = WEEKLY_DAYS) -> List[WeeklyCondition]:
    weeks: Dict[date, List[int]] = OrderedDict()
    for d, total, n in _condition_by_day(session, window_start(today, days), today):
        bucket = weeks.setdefault(week_start(d), [0, 0])
        bucket[0] += total
        bucket[1] += n
    return [
        WeeklyCondition(week_start=w, avg_rating=_avg(total, n), entries=n)
        for w, (total, n) in weeks.items()
    ]


def meal_type_breakdown(session: Session) -> List[MealTypeStat]:
    rows = session.exec(
        select(
            Meal.meal_type,
            func.count(Meal.id),
            func.count(SuspiciousMeal.meal_id),
        )
        .select_from(Meal)
        .join(SuspiciousMeal, SuspiciousMeal.meal_id == Meal.id, isouter=True)
        .group_by(Meal.meal_type)
    ).all()
    counts = {MealType(mt): (int(n), int(flagged)) for mt, n, flagged in rows}

    stats: List[MealTypeStat] = []
    for mt in MealType:
        n, flagged = counts.get(mt, (0, 0))
        stats.append(MealTypeStat(
            meal_type=mt,
            count=n,
            suspicious_count=flagged,
            suspicious_percentage=round(flagged / n * 100, 1) if n else 0.0,
        ))
    return stats


def food_combinations(session: Session, limit: int = TOP_COMBINATIONS) -> List[FoodCombination]:
    """Exact food sets shared by flagged meals with at least two distinct foods."""
    rows = session.exec(
        select(MealItem.meal_id, FoodItem.name)
        .join(SuspiciousMeal, SuspiciousMeal.meal_id == MealItem.meal_id)
        .join(FoodItem, FoodItem.id == MealItem.food_item_id)
        .distinct()
    ).all()

    foods_by_meal: Dict[int, Set[str]] = defaultdict(set)
    for meal_id, name in rows:
        foods_by_meal[meal_id].add(name)

    combos: Counter = Counter(
        tuple(sorted(names, key=lambda n: (n.lower(), n)))
        for names in foods_by_meal.values()
        if len(names) >= 2
    )
    ranked = sorted(combos.items(), key=lambda kv: (-kv[1], [n.lower() for n in kv[0]]))
    return [FoodCombination(foods=list(combo), occurrences=n) for combo, n in ranked[:limit]]


def day_of_week(session: Session, today: date, days: int = WEEKDAY_DAYS) -> List[WeekdayPattern]:
    sums = [0] * 7
    counts = [0] * 7
    for d, total, n in _condition_by_day(session, window_start(today, days), today):
        sums[d.weekday()] += total
        counts[d.weekday()] += n
    return [
        WeekdayPattern(weekday=WEEKDAY_NAMES[i], avg_rating=_avg(sums[i], counts[i]), entries=counts[i])
        for i in range(7)
        if counts[i]
    ]


def recovery(
    session: Session,
    today: date,
    days: int = RECOVERY_DAYS,
    threshold: int = GOOD_DAY_RATING,
) -> RecoveryStats:
    """
    Average gap between a flagged-meal date and the next good day.

    This is a rough heuristic, not a causal measure. Each distinct flagged
    date in the window is paired with the earliest *later* date that has a
    rating >= ``threshold``. Several flagged dates before the same good day
    each count once; several flagged meals on one date count once; a relapse
    after the good day is ignored. Flagged dates without a later good day are
    left out of the average.
    """
    next_good_day = (
        select(func.min(HandCondition.day))
        .where(HandCondition.day > Meal.day, HandCondition.condition_rating >= threshold)
        .correlate(Meal)
        .scalar_subquery()
    )
    rows = session.exec(
        select(Meal.day, next_good_day)
        .join(SuspiciousMeal, SuspiciousMeal.meal_id == Meal.id)
        .where(Meal.day >= window_start(today, days), Meal.day <= today)
        .distinct()
    ).all()

    gaps = [
        (_as_date(good) - _as_date(flagged)).days
        for flagged, good in rows
        if good is not None
    ]
    return RecoveryStats(
        average_days=round(sum(gaps) / len(gaps), 1) if gaps else None,
        instances=len(gaps),
        threshold=threshold,
        window_days=days,
    )


def build_report(session: Session, today: Optional[date] = None) -> StatisticsReport:
    today = today or date.today()
    return StatisticsReport(
        generated_for=today,
        totals=totals(session),
        average_condition=average_condition(session, today),
        top_suspicious_foods=top_suspicious_foods(session),
        condition_trend=condition_trend(session, today),
        daily_meals=daily_meals(session, today),
        weekly_trends=weekly_trends(session, today),
        weekly_condition=weekly_condition(session, today),
        meal_type_breakdown=meal_type_breakdown(session),
        food_combinations=food_combinations(session),
        day_of_week=day_of_week(session, today),
        recovery=recovery(session, today),
    )
