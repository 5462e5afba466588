"""Auth API — Google sign-in and the current user.

- POST /auth/google → Google ID token → local user + session token
- GET /auth/me → the signed-in user's stored profile
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from toolboard.auth.dependencies import CurrentIdentity, get_current_user
from toolboard.auth.google import GoogleIdentityVerifier, get_identity_verifier
from toolboard.auth.jwt import create_session_token
from toolboard.db.engine import get_db
from toolboard.errors import NotFoundError
from toolboard.schemas.auth import GoogleLoginRequest, LoginResponse, UserSummary
from toolboard.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.post("/google", response_model=LoginResponse)
async def google_login(
    body: Optional[GoogleLoginRequest] = None,
    verifier: GoogleIdentityVerifier = Depends(get_identity_verifier),
    svc: UserService = Depends(_svc),
):
    """Exchange a Google ID token for a session token.

    The token is verified before anything touches the database, so a bad
    token never creates or updates a user.
    """
    identity = await verifier.verify(body.token if body else None)
    user = await svc.upsert_from_google(identity)
    token = create_session_token(user.id, user.email)
    logger.info("auth.login_succeeded", user_id=user.id)
    return LoginResponse(token=token, user=UserSummary.model_validate(user))


@router.get("/me", response_model=UserSummary)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Get the current authenticated user's info."""
    user = await svc.get_user(identity.user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
