"""API route aggregation.

All routers registered here get mounted in main.py. The health router
sits at the root (GET / and /api/health); everything else lives under
/api. Resource routers declare the session guard on each route because
the handlers need the resolved identity, not just the check.
"""

from fastapi import APIRouter

from toolboard.api.auth import router as auth_router
from toolboard.api.health import router as health_router
from toolboard.api.overrides import router as overrides_router
from toolboard.api.tools import router as tools_router

api_router = APIRouter(prefix="/api")

# Open routes, no auth required (POST /auth/google); /auth/me guards itself
api_router.include_router(auth_router, tags=["auth"])

# Protected routes, require a valid session token
api_router.include_router(tools_router, tags=["tools"])
api_router.include_router(overrides_router, tags=["tool-overrides"])

__all__ = ["api_router", "health_router"]
