"""Google ID token verification.

The browser signs in with Google and posts the resulting ID token. We
check it the way any OIDC relying party does: fetch the signing key from
Google's JWKS endpoint, verify the RS256 signature, the audience (our
client id), the expiry, and the issuer.

PyJWKClient does blocking HTTP and caches keys, so one verifier instance
is shared and the lookup runs in a worker thread.
"""

import asyncio
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import jwt
import structlog
from jwt import PyJWKClient
from jwt.exceptions import PyJWKClientError

from toolboard.config import settings
from toolboard.errors import AuthenticationError

logger = structlog.get_logger()

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


@dataclass(frozen=True)
class GoogleIdentity:
    """The verified subset of a Google ID token we care about."""

    subject: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


def identity_from_claims(claims: dict) -> GoogleIdentity:
    """Check the issuer and required claims of decoded token claims.

    The reason for a rejection is logged, never returned to the caller.
    """
    if claims.get("iss") not in GOOGLE_ISSUERS:
        logger.info("google.token_rejected", reason="issuer", issuer=claims.get("iss"))
        raise AuthenticationError()
    if not claims.get("sub"):
        logger.info("google.token_rejected", reason="no_subject")
        raise AuthenticationError()
    if not claims.get("email"):
        logger.info("google.token_rejected", reason="no_email")
        raise AuthenticationError()
    return GoogleIdentity(
        subject=str(claims["sub"]),
        email=claims["email"],
        name=claims.get("name"),
        picture=claims.get("picture"),
    )


class GoogleIdentityVerifier:
    """Verifies Google ID tokens against the published signing keys."""

    def __init__(self, client_id: str, certs_url: str):
        self.client_id = client_id
        self.certs_url = certs_url
        self._jwk_client = PyJWKClient(certs_url)

    def _decode(self, token: str) -> dict:
        signing_key = self._jwk_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=self.client_id,
            options={"verify_exp": True},
        )

    async def verify(self, token: Optional[str]) -> GoogleIdentity:
        """Verify `token` and return the identity it asserts.

        Raises AuthenticationError for a bad token or when Google's keys
        can't be fetched. No retry.
        """
        if not token:
            logger.info("google.token_rejected", reason="empty")
            raise AuthenticationError()
        try:
            claims = await asyncio.to_thread(self._decode, token)
        except PyJWKClientError as e:
            logger.warning("google.keys_unavailable", error=str(e))
            raise AuthenticationError()
        except jwt.InvalidTokenError as e:
            logger.info("google.token_rejected", error=str(e))
            raise AuthenticationError()
        return identity_from_claims(claims)


@lru_cache
def get_identity_verifier() -> GoogleIdentityVerifier:
    """FastAPI dependency — the process-wide verifier."""
    return GoogleIdentityVerifier(
        client_id=settings.google_client_id,
        certs_url=settings.google_certs_url,
    )
