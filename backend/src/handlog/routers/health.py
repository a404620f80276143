from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ..core import database

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health():
    """Liveness check; 503 wenn die Datenbank nicht erreichbar ist."""
    if not database.check_db_connection():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "unavailable"},
        )
    return {"status": "healthy", "database": "ok"}
