"""Session token creation and verification.

The session token is an HS256 JWT signed with JWT_SECRET. It carries
the numeric user id (as the string `sub` claim) and the email, and
expires after SESSION_TOKEN_EXPIRE_DAYS (7 by default). There is no
refresh token: once it expires the user signs in with Google again.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from toolboard.config import settings


class TokenError(Exception):
    """Raised when token verification fails."""


def create_session_token(
    user_id: int,
    email: str,
    expires_days: Optional[int] = None,
) -> str:
    """Create a signed session token for a user."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(
        days=expires_days if expires_days is not None else settings.session_token_expire_days
    )
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": expires,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session_token(token: str) -> dict:
    """Verify and decode a session token.

    Returns the payload dict with `sub` converted back to an int user id.
    Raises TokenError on failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")

    try:
        payload["sub"] = int(payload["sub"])
    except (TypeError, ValueError):
        raise TokenError("Invalid token: subject is not a user id")
    return payload
