"""Caller Verification — turns request credentials into a verified Identity.

Invariants:
    - A missing bearer token is always UnauthorizedError, in every mode
    - verify() never returns an Identity with an empty owner_id
    - Verifiers are stateless after construction; one instance serves all requests

Design Decisions:
    - HeaderCallerVerifier mirrors the development contract of the mobile app:
      a bearer token must be present and X-User-Id names the caller
    - JwtCallerVerifier decodes HS*/RS* tokens with python-jose; identity is "sub",
      falling back to a "user_id" claim
"""

import logging

from jose import jwt, JWTError

from closetmap.config import Settings
from closetmap.core.collaborator_protocols import CallerCredentials, CallerVerifier
from closetmap.core.domain_types import AuthMode, Identity, OwnerId
from closetmap.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)

MAX_OWNER_ID_LENGTH = 128


def _require_token(credentials: CallerCredentials) -> str:
    token = (credentials.bearer_token or "").strip()
    if not token:
        raise UnauthorizedError("No token provided")
    return token


def _to_identity(raw_owner: object) -> Identity:
    if not isinstance(raw_owner, str) or not raw_owner.strip():
        raise UnauthorizedError("User ID required")
    owner = raw_owner.strip()
    if len(owner) > MAX_OWNER_ID_LENGTH:
        raise UnauthorizedError("User ID too long")
    return Identity(owner_id=OwnerId(owner))


class HeaderCallerVerifier:
    """Development verifier: trusts X-User-Id once a bearer token is present."""

    def verify(self, credentials: CallerCredentials) -> Identity:
        _require_token(credentials)
        return _to_identity(credentials.claimed_user_id)


class JwtCallerVerifier:
    """Verifies signed JWT bearer tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        audience: str | None = None,
        issuer: str | None = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience
        self.issuer = issuer

    def verify(self, credentials: CallerCredentials) -> Identity:
        token = _require_token(credentials)
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise UnauthorizedError("Invalid or expired token")
        return _to_identity(claims.get("sub") or claims.get("user_id"))


def build_verifier(settings: Settings) -> CallerVerifier:
    """Select the verifier named by settings.auth_mode."""
    if settings.auth_mode == AuthMode.JWT:
        return JwtCallerVerifier(
            settings.jwt_secret,
            settings.jwt_algorithm,
            settings.jwt_audience,
            settings.jwt_issuer,
        )
    logger.warning("Header-based caller verification enabled (development mode)")
    return HeaderCallerVerifier()
