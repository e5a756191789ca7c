from fastapi import APIRouter, Depends
from sqlalchemy import text

from zee_ordering.config import Settings, get_settings
from zee_ordering.db import engine
from zee_ordering.utils.logger import get_logger

router = APIRouter()
log = get_logger("api.health")


@router.get("/health", tags=["health"])
def health(settings: Settings = Depends(get_settings)):
    db_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            db_ok = True
    except Exception as e:
        log.warning("Database health check failed: %s", e)

    return {
        "status": "ok" if db_ok else "degraded",
        "db": db_ok,
        "sheets_configured": settings.sheets_configured,
        "smtp_configured": settings.smtp_configured,
    }
