from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..core.database import get_session
from ..schemas import StatisticsReport
from ..services.statistics import build_report

router = APIRouter(prefix="/api", tags=["statistics"])


@router.get("/statistics", response_model=StatisticsReport, summary="Aggregierte Auswertung (Trends, Rankings, Muster)")
def statistics(session: Session = Depends(get_session)):
    return build_report(session)
