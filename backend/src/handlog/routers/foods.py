from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ..core.database import get_session
from ..schemas import FoodSuggestion
from ..services.foods import DEFAULT_SUGGESTIONS, MAX_SUGGESTIONS, suggest_foods

router = APIRouter(prefix="/api", tags=["foods"])

@router.get("/food-suggestions", response_model=List[FoodSuggestion], summary="Foods suchen (case-insensitive, verdaechtige zuerst)")
def food_suggestions(
    query: Optional[str] = Query(default="", min_length=0),
    limit: int = Query(default=DEFAULT_SUGGESTIONS, ge=1, le=MAX_SUGGESTIONS),
    session: Session = Depends(get_session),
):
    return suggest_foods(session, query or "", limit)
