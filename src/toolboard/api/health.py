"""Health check endpoints.

GET / is the plain-text liveness probe the hosting platform pings.
GET /api/health also checks that the database answers.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from sqlalchemy import text

from toolboard import __version__
from toolboard.db.engine import engine

router = APIRouter()

LIVENESS_MESSAGE = "Toolboard backend is running"


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def liveness():
    return LIVENESS_MESSAGE


@router.get("/api/health")
async def health_check():
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
