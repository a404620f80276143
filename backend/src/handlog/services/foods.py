from __future__ import annotations

from typing import List

from sqlalchemy import func
from sqlmodel import Session, select

from ..models.foods import FoodItem
from ..schemas import FoodSuggestion

DEFAULT_SUGGESTIONS = 10
MAX_SUGGESTIONS = 20


def suggest_foods(session: Session, query: str = "", limit: int = DEFAULT_SUGGESTIONS) -> List[FoodSuggestion]:
    """Case-insensitive substring search; suspicious foods are listed first."""
    limit = max(1, min(limit, MAX_SUGGESTIONS))
    stmt = select(FoodItem)
    q = " ".join((query or "").split()).lower()
    if q:
        # % und _ im Suchtext woertlich nehmen
        pattern = q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        stmt = stmt.where(func.lower(FoodItem.name).like(f"%{pattern}%", escape="\\"))
    stmt = stmt.order_by(FoodItem.is_suspicious.desc(), FoodItem.name.asc(), FoodItem.id.asc()).limit(limit)
    return [
        FoodSuggestion(id=food.id, name=food.name, is_suspicious=bool(food.is_suspicious))
        for food in session.exec(stmt).all()
    ]
