# backend/src/handlog/utils/validators.py
from typing import Optional

RATING_MIN = 1
RATING_MAX = 10

def clean_text(value: Optional[str]) -> Optional[str]:
    """Trimmt Freitext; leere Strings werden zu None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None

def food_key(name: str) -> str:
    """Vergleichsschluessel fuer Food-Namen (case-insensitiv, Whitespace normalisiert)."""
    return " ".join((name or "").split()).lower()

def is_valid_rating(x) -> bool:
    return isinstance(x, int) and not isinstance(x, bool) and RATING_MIN <= x <= RATING_MAX
