"""Caller Verification — header and JWT verifiers.

Tests:
    - Missing bearer token is rejected in both modes
    - Header mode requires a non-empty X-User-Id
    - JWT mode reads "sub", falls back to "user_id", rejects bad signatures
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from closetmap.config import Settings
from closetmap.core.collaborator_protocols import CallerCredentials
from closetmap.core.domain_types import AuthMode
from closetmap.core.errors import UnauthorizedError
from closetmap.infrastructure.identity import (
    HeaderCallerVerifier, JwtCallerVerifier, build_verifier,
)

SECRET = "test-secret"


def _token(claims: dict, secret: str = SECRET) -> str:
    return jwt.encode(claims, secret, algorithm="HS256")


# -- header mode ---------------------------------------------------------------

def test_header_mode_returns_claimed_user():
    identity = HeaderCallerVerifier().verify(CallerCredentials("tok", " alice "))
    assert identity.owner_id == "alice"


@pytest.mark.parametrize("token, user", [
    (None, "alice"),
    ("  ", "alice"),
    ("tok", None),
    ("tok", "   "),
    ("tok", "x" * 129),
])
def test_header_mode_rejections(token, user):
    with pytest.raises(UnauthorizedError):
        HeaderCallerVerifier().verify(CallerCredentials(token, user))


# -- jwt mode ------------------------------------------------------------------

def test_jwt_sub_claim():
    verifier = JwtCallerVerifier(SECRET)
    assert verifier.verify(CallerCredentials(_token({"sub": "bob"}))).owner_id == "bob"


def test_jwt_user_id_fallback():
    verifier = JwtCallerVerifier(SECRET)
    identity = verifier.verify(CallerCredentials(_token({"user_id": "carol"})))
    assert identity.owner_id == "carol"


def test_jwt_ignores_claimed_header():
    verifier = JwtCallerVerifier(SECRET)
    identity = verifier.verify(CallerCredentials(_token({"sub": "bob"}), "mallory"))
    assert identity.owner_id == "bob"


def test_jwt_wrong_secret_rejected():
    with pytest.raises(UnauthorizedError):
        JwtCallerVerifier(SECRET).verify(
            CallerCredentials(_token({"sub": "bob"}, secret="other")),
        )


def test_jwt_expired_rejected():
    expired = datetime.now(timezone.utc) - timedelta(minutes=5)
    with pytest.raises(UnauthorizedError):
        JwtCallerVerifier(SECRET).verify(
            CallerCredentials(_token({"sub": "bob", "exp": expired})),
        )


def test_jwt_without_subject_rejected():
    with pytest.raises(UnauthorizedError):
        JwtCallerVerifier(SECRET).verify(CallerCredentials(_token({"role": "x"})))


def test_jwt_audience_checked_when_configured():
    verifier = JwtCallerVerifier(SECRET, audience="closetmap")
    good = _token({"sub": "bob", "aud": "closetmap"})
    bad = _token({"sub": "bob", "aud": "elsewhere"})
    assert verifier.verify(CallerCredentials(good)).owner_id == "bob"
    with pytest.raises(UnauthorizedError):
        verifier.verify(CallerCredentials(bad))


def test_build_verifier_follows_auth_mode():
    assert isinstance(
        build_verifier(Settings(auth_mode=AuthMode.JWT, _env_file=None)),
        JwtCallerVerifier,
    )
    assert isinstance(
        build_verifier(Settings(auth_mode=AuthMode.HEADER, _env_file=None)),
        HeaderCallerVerifier,
    )
