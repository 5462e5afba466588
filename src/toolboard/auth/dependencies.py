"""FastAPI auth dependencies — the session guard.

Used as Depends() on protected routes. The rules:
- no Authorization header, or not "Bearer <token>" → 401
- token present but bad signature, malformed, or expired → 403
- otherwise the decoded identity is handed to the route
"""

from typing import Optional

import structlog
from fastapi import Header

from toolboard.auth.jwt import TokenError, verify_session_token
from toolboard.errors import AuthenticationError

logger = structlog.get_logger()


class CurrentIdentity:
    """The authenticated user making the request.

    All resource queries are scoped by `user_id`.
    """

    def __init__(self, user_id: int, email: Optional[str] = None):
        self.user_id = user_id
        self.email = email

    def __repr__(self) -> str:
        return f"CurrentIdentity(user_id={self.user_id!r}, email={self.email!r})"


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    authorization: Optional[str] = Header(None),
) -> CurrentIdentity:
    """Resolve the Bearer session token to an identity (required)."""
    token = _bearer_token(authorization)
    if token is None:
        raise AuthenticationError("Authentication required")

    try:
        payload = verify_session_token(token)
    except TokenError as e:
        logger.info("auth.session_rejected", reason=str(e))
        raise AuthenticationError("Invalid or expired token", status_code=403)

    return CurrentIdentity(user_id=payload["sub"], email=payload.get("email"))
