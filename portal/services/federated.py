"""
Google Sign-In verification.

Checks the ID token's signature, issuer, expiry and audience (our OAuth
client id) with google-auth before any claim is trusted. Callers only
ever see FederatedAuthFailed; the reason is logged, not returned.
"""

import functools
import logging

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from portal.core.config import get_settings
from portal.core.errors import FederatedAuthFailed
from portal.schemas.schemas import FederatedClaims

settings = get_settings()
logger = logging.getLogger(__name__)

# Shared transport: one requests session for every certificate fetch
_google_request = google_requests.Request()


class GoogleIdentityVerifier:

    def __init__(self, client_id: str = None, timeout: float = None):
        self.client_id = client_id if client_id is not None else settings.google_client_id
        self.timeout = timeout if timeout is not None else settings.google_verify_timeout_seconds

    def verify(self, token: str) -> FederatedClaims:
        """
        Verify a Google ID token and extract email, name and picture.

        Blocking: fetches Google's signing certificates over HTTP.
        """
        if not self.client_id:
            logger.error("GOOGLE_CLIENT_ID is not configured; rejecting Google login")
            raise FederatedAuthFailed()
        if not token:
            raise FederatedAuthFailed()

        # Certificate fetch uses our timeout instead of the transport default
        request = functools.partial(_google_request, timeout=self.timeout)
        try:
            payload = google_id_token.verify_oauth2_token(token, request, audience=self.client_id)
        except (ValueError, google_exceptions.GoogleAuthError) as exc:
            logger.info("Google ID token rejected: %s", exc)
            raise FederatedAuthFailed() from exc

        email = payload.get("email")
        if not email:
            logger.info("Google ID token carries no email claim")
            raise FederatedAuthFailed()

        return FederatedClaims(
            email=email,
            name=payload.get("name") or email.split("@")[0],
            picture=payload.get("picture") or "",
        )


def get_identity_verifier() -> GoogleIdentityVerifier:
    """Get Google ID token verifier instance."""
    return GoogleIdentityVerifier()
