"""
Google / Firebase ID token verification.

Tokens are RS256 JWTs signed with keys published as a JWKS. PyJWT's
PyJWKClient fetches and caches the key set and picks the signing key by
`kid`, so decode and key lookup happen in one step here.
"""
import logging
from typing import Iterable, Optional

import jwt  # PyJWT

from app.core.config import Settings
from app.core.errors import IdentityError

logger = logging.getLogger(__name__)

GOOGLE_JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")
FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)


class GoogleTokenVerifier:
    def __init__(
        self,
        audience: Optional[str],
        jwks_url: str = GOOGLE_JWKS_URL,
        issuers: Iterable[str] = GOOGLE_ISSUERS,
        jwks_client: Optional[jwt.PyJWKClient] = None,
    ):
        self.audience = audience or None
        self.jwks_url = jwks_url
        self.issuers = tuple(issuers)
        self._jwks_client = jwks_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleTokenVerifier":
        """Firebase project id wins over a plain Google OAuth client id."""
        if settings.firebase_project_id:
            project = settings.firebase_project_id
            return cls(
                audience=project,
                jwks_url=FIREBASE_JWKS_URL,
                issuers=(f"https://securetoken.google.com/{project}",),
            )
        return cls(audience=settings.google_client_id)

    @property
    def jwks_client(self) -> jwt.PyJWKClient:
        if self._jwks_client is None:
            self._jwks_client = jwt.PyJWKClient(self.jwks_url)
        return self._jwks_client

    def verify(self, token: str) -> str:
        """Return the verified email address carried by the token."""
        if not self.audience:
            raise IdentityError("Google sign-in is not configured")
        if not token:
            raise IdentityError("Missing identity token")

        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(token)
            payload = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.audience,
                options={"require": ["exp", "iat", "iss", "aud"]},
            )
        except jwt.PyJWTError as e:
            logger.warning("[AUTH] Identity token verification failed: %s", e)
            raise IdentityError("Invalid identity token") from e

        if payload.get("iss") not in self.issuers:
            logger.warning("[AUTH] Identity token has unexpected issuer: %s", payload.get("iss"))
            raise IdentityError("Invalid token issuer")

        email = payload.get("email")
        if not email:
            raise IdentityError("Token missing email claim")
        if payload.get("email_verified") is not True:
            logger.warning("[AUTH] Identity token email not verified: %s", email)
            raise IdentityError("Email not verified")
        logger.info("[AUTH] Verified identity token for %s", email)
        return email
