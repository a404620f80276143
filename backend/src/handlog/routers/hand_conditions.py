from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ..core.database import get_session
from ..schemas import CreatedResponse, HandConditionCreate, HandConditionOut
from ..services import hand_conditions as hand_service

router = APIRouter(prefix="/api/hand-conditions", tags=["hand-conditions"])


@router.get("", response_model=List[HandConditionOut])
def list_hand_conditions(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    session: Session = Depends(get_session),
):
    return hand_service.list_hand_conditions(session, start_date, end_date)


@router.post("", response_model=CreatedResponse)
def create_hand_condition(payload: HandConditionCreate, session: Session = Depends(get_session)):
    record = hand_service.create_hand_condition(session, payload)
    return CreatedResponse(id=record.id, message="Hand condition recorded")
