"""
Meal writes and reads.

Every write runs in one transaction: it is committed as a whole or rolled
back as a whole, so no meal without its items and no flag without the
matching food-item flags is ever visible to other requests.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.exceptions import DatabaseError, NotFoundError, ValidationError
from ..models.foods import FoodItem
from ..models.meals import Meal, MealItem, SuspiciousMeal
from ..schemas import MealCreate, MealItemOut, MealOut
from ..utils.dates import utc_now
from ..utils.validators import clean_text, food_key

logger = logging.getLogger(__name__)


# ---------- Food items ----------

def get_or_create_food(session: Session, name: str) -> FoodItem:
    """Resolve a food by its case-insensitive name, inserting it on first use."""
    key = food_key(name)
    food = session.exec(select(FoodItem).where(FoodItem.name_key == key)).first()
    if food:
        return food
    food = FoodItem(name=" ".join(name.split()), name_key=key)
    session.add(food)
    session.flush()  # food.id
    return food


def recompute_food_suspicion(session: Session, food_ids: Iterable[int]) -> Dict[int, bool]:
    """
    Re-derive ``is_suspicious`` for the given foods.

    A food stays suspicious as long as at least one meal containing it is
    still flagged. Must run after the flag change has been flushed.
    """
    result: Dict[int, bool] = {}
    for food_id in set(food_ids):
        still_flagged = session.exec(
            select(MealItem.id)
            .join(SuspiciousMeal, SuspiciousMeal.meal_id == MealItem.meal_id)
            .where(MealItem.food_item_id == food_id)
            .limit(1)
        ).first() is not None
        food = session.get(FoodItem, food_id)
        if food is not None and food.is_suspicious != still_flagged:
            food.is_suspicious = still_flagged
            session.add(food)
        result[food_id] = still_flagged
    return result


def _food_ids_for_meal(session: Session, meal_id: int) -> Set[int]:
    rows = session.exec(select(MealItem.food_item_id).where(MealItem.meal_id == meal_id)).all()
    return set(rows)


def _require_meal(session: Session, meal_id: int) -> Meal:
    meal = session.get(Meal, meal_id)
    if not meal:
        raise NotFoundError("Meal not found")
    return meal


# ---------- Writes ----------

def create_meal(session: Session, payload: MealCreate) -> Meal:
    items = [it for it in payload.items if (it.name or "").strip()]
    if not items:
        raise ValidationError("At least one food item with a name is required")

    try:
        meal = Meal(day=payload.day, meal_type=payload.meal_type, notes=clean_text(payload.notes))
        session.add(meal)
        session.flush()  # meal.id

        for it in items:
            food = get_or_create_food(session, it.name)
            session.add(MealItem(
                meal_id=meal.id,
                food_item_id=food.id,
                quantity=clean_text(it.quantity),
                notes=clean_text(it.notes),
            ))

        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Failed to save meal for %s", payload.day, exc_info=True)
        raise DatabaseError("Failed to add meal", str(exc)) from exc

    session.refresh(meal)
    logger.info("Meal %s saved with %d item(s)", meal.id, len(items))
    return meal


def mark_suspicious(session: Session, meal_id: int, reason: Optional[str] = None) -> SuspiciousMeal:
    _require_meal(session, meal_id)
    try:
        flag = session.get(SuspiciousMeal, meal_id)
        if flag is None:
            flag = SuspiciousMeal(meal_id=meal_id, reason=clean_text(reason))
        else:
            # re-mark without a reason keeps the previous one
            if clean_text(reason):
                flag.reason = clean_text(reason)
            flag.marked_at = utc_now()
        session.add(flag)

        # flagging only ever adds suspicion
        food_ids = _food_ids_for_meal(session, meal_id)
        if food_ids:
            foods = session.exec(select(FoodItem).where(FoodItem.id.in_(sorted(food_ids)))).all()
            for food in foods:
                food.is_suspicious = True
                session.add(food)

        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Failed to mark meal %s as suspicious", meal_id, exc_info=True)
        raise DatabaseError("Failed to mark meal as suspicious", str(exc)) from exc

    session.refresh(flag)
    logger.info("Meal %s marked as suspicious", meal_id)
    return flag


def unmark_suspicious(session: Session, meal_id: int) -> Dict[int, bool]:
    _require_meal(session, meal_id)
    flag = session.get(SuspiciousMeal, meal_id)
    if flag is None:
        raise NotFoundError("Meal is not marked as suspicious")

    try:
        session.delete(flag)
        session.flush()
        changed = recompute_food_suspicion(session, _food_ids_for_meal(session, meal_id))
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Failed to unmark meal %s", meal_id, exc_info=True)
        raise DatabaseError("Failed to unmark meal", str(exc)) from exc

    logger.info("Meal %s unmarked; foods still suspicious: %s", meal_id,
                sorted(fid for fid, flagged in changed.items() if flagged))
    return changed


def update_suspicious_reason(session: Session, meal_id: int, reason: str) -> SuspiciousMeal:
    reason = clean_text(reason)
    if not reason:
        raise ValidationError("Reason must not be empty")

    _require_meal(session, meal_id)
    flag = session.get(SuspiciousMeal, meal_id)
    if flag is None:
        raise NotFoundError("Meal is not marked as suspicious")

    try:
        flag.reason = reason
        session.add(flag)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Failed to update reason for meal %s", meal_id, exc_info=True)
        raise DatabaseError("Failed to update reason", str(exc)) from exc

    session.refresh(flag)
    return flag


# ---------- Reads ----------

def _meals_out(session: Session, rows) -> List[MealOut]:
    meal_ids = [meal.id for meal, _ in rows]
    items_by_meal: Dict[int, List[MealItemOut]] = defaultdict(list)
    if meal_ids:
        item_rows = session.exec(
            select(MealItem.meal_id, FoodItem.name, MealItem.quantity, MealItem.notes, FoodItem.is_suspicious)
            .join(FoodItem, FoodItem.id == MealItem.food_item_id)
            .where(MealItem.meal_id.in_(meal_ids))
            .order_by(MealItem.meal_id.asc(), MealItem.id.asc())
        ).all()
        for meal_id, name, quantity, notes, suspicious in item_rows:
            items_by_meal[meal_id].append(MealItemOut(
                name=name, quantity=quantity, notes=notes, is_suspicious=bool(suspicious)
            ))

    return [
        MealOut(
            id=meal.id,
            day=meal.day,
            meal_type=meal.meal_type,
            notes=meal.notes,
            created_at=meal.created_at,
            items=items_by_meal.get(meal.id, []),
            is_suspicious=flag is not None,
            suspicious_reason=flag.reason if flag is not None else None,
            marked_at=flag.marked_at if flag is not None else None,
        )
        for meal, flag in rows
    ]


def list_meals(session: Session, start: Optional[date] = None, end: Optional[date] = None) -> List[MealOut]:
    if start and end and start > end:
        raise ValidationError("startDate must not be after endDate")

    stmt = select(Meal, SuspiciousMeal).join(
        SuspiciousMeal, SuspiciousMeal.meal_id == Meal.id, isouter=True
    )
    if start:
        stmt = stmt.where(Meal.day >= start)
    if end:
        stmt = stmt.where(Meal.day <= end)
    stmt = stmt.order_by(Meal.day.desc(), Meal.meal_type.asc(), Meal.id.asc())

    return _meals_out(session, session.exec(stmt).all())


def get_meal(session: Session, meal_id: int) -> MealOut:
    meal = _require_meal(session, meal_id)
    return _meals_out(session, [(meal, session.get(SuspiciousMeal, meal_id))])[0]
