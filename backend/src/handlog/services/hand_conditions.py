from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.exceptions import DatabaseError, ValidationError
from ..models.hand_conditions import HandCondition
from ..schemas import HandConditionCreate, HandConditionOut
from ..utils.validators import clean_text, is_valid_rating

logger = logging.getLogger(__name__)


def create_hand_condition(session: Session, payload: HandConditionCreate) -> HandCondition:
    if not is_valid_rating(payload.condition_rating):
        raise ValidationError("condition_rating must be an integer between 1 and 10")

    record = HandCondition(
        day=payload.day,
        time_of_day=payload.time_of_day.strftime("%H:%M"),
        condition_rating=payload.condition_rating,
        notes=clean_text(payload.notes),
    )
    try:
        session.add(record)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Failed to record hand condition for %s", payload.day, exc_info=True)
        raise DatabaseError("Failed to record hand condition", str(exc)) from exc

    session.refresh(record)
    logger.info("Hand condition %s recorded (rating %s)", record.id, record.condition_rating)
    return record


def list_hand_conditions(
    session: Session,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[HandConditionOut]:
    if start and end and start > end:
        raise ValidationError("startDate must not be after endDate")

    stmt = select(HandCondition)
    if start:
        stmt = stmt.where(HandCondition.day >= start)
    if end:
        stmt = stmt.where(HandCondition.day <= end)
    stmt = stmt.order_by(
        HandCondition.day.desc(), HandCondition.time_of_day.desc(), HandCondition.id.desc()
    )
    return [
        HandConditionOut(
            id=r.id,
            day=r.day,
            time_of_day=r.time_of_day,
            condition_rating=r.condition_rating,
            notes=r.notes,
            created_at=r.created_at,
        )
        for r in session.exec(stmt).all()
    ]
