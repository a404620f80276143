# backend/src/handlog/routers/meals.py
from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlmodel import Session

from ..core.database import get_session
from ..schemas import (
    CreatedResponse,
    MealCreate,
    MealOut,
    MessageResponse,
    SuspiciousMark,
    SuspiciousReasonUpdate,
)
from ..services import meals as meal_service

router = APIRouter(prefix="/api/meals", tags=["meals"])


@router.get("", response_model=List[MealOut], summary="Meals im Zeitraum inkl. Items")
def list_meals(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    session: Session = Depends(get_session),
):
    return meal_service.list_meals(session, start_date, end_date)


@router.post("", response_model=CreatedResponse, summary="Meal mit allen Items atomar speichern")
def create_meal(payload: MealCreate, session: Session = Depends(get_session)):
    meal = meal_service.create_meal(session, payload)
    return CreatedResponse(id=meal.id, message="Meal added successfully")


@router.get("/{meal_id}", response_model=MealOut)
def get_meal(meal_id: int, session: Session = Depends(get_session)):
    return meal_service.get_meal(session, meal_id)


@router.post("/{meal_id}/suspicious", response_model=MessageResponse, summary="Meal als verdaechtig markieren")
def mark_suspicious(
    meal_id: int,
    payload: Optional[SuspiciousMark] = Body(default=None),
    session: Session = Depends(get_session),
):
    meal_service.mark_suspicious(session, meal_id, payload.reason if payload else None)
    return MessageResponse(message="Meal marked as suspicious")


@router.delete("/{meal_id}/suspicious", response_model=MessageResponse, summary="Markierung entfernen")
def unmark_suspicious(meal_id: int, session: Session = Depends(get_session)):
    meal_service.unmark_suspicious(session, meal_id)
    return MessageResponse(message="Meal unmarked as suspicious")


@router.put("/{meal_id}/suspicious", response_model=MessageResponse, summary="Begruendung aendern")
def update_reason(
    meal_id: int,
    payload: SuspiciousReasonUpdate,
    session: Session = Depends(get_session),
):
    meal_service.update_suspicious_reason(session, meal_id, payload.reason)
    return MessageResponse(message="Reason updated")
