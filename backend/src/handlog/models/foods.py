from typing import Optional
from sqlmodel import SQLModel, Field

class FoodItem(SQLModel, table=True):
    __tablename__ = "food_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    # Anzeigename in der zuerst erfassten Schreibweise
    name: str = Field(index=True)
    # Identitaet: getrimmt + lower-case, daher case-insensitiv eindeutig
    name_key: str = Field(index=True, unique=True)
    is_suspicious: bool = Field(default=False, index=True)
