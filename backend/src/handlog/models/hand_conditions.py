from datetime import date, datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from ..utils.dates import utc_now

class HandCondition(SQLModel, table=True):
    __tablename__ = "hand_conditions"

    id: Optional[int] = Field(default=None, primary_key=True)
    day: date = Field(index=True)
    time_of_day: str = Field(description="Uhrzeit als 'HH:MM'")
    # 1..10, geprueft bei der Eingabe, nicht in der DB
    condition_rating: int
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, index=True)
