"""Session gate: credential check and signed session tokens."""

from __future__ import annotations

import datetime
import hmac
import logging

import jwt
from pydantic import BaseModel

from src.config import Settings
from src.errors import AuthError
from src.models.schemas import UserInfo

logger = logging.getLogger(__name__)

ROLE = "asha_worker"


class TokenClaims(BaseModel):
    username: str
    role: str
    iat: datetime.datetime
    exp: datetime.datetime


def _matches(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def authenticate(username: object, password: object, settings: Settings) -> UserInfo:
    """Check a login attempt against the configured credential pair.

    Raises AuthError (MissingCredentials / InvalidCredentials). The failure
    message never says which of the two fields was wrong.
    """
    if not (isinstance(username, str) and username and isinstance(password, str) and password):
        raise AuthError(
            "MissingCredentials", "Username and password are required", status_code=400
        )

    # Evaluate both comparisons so timing does not depend on which field differs.
    username_ok = _matches(username, settings.auth_username)
    password_ok = _matches(password, settings.auth_password)
    if not (username_ok and password_ok):
        logger.info("Login failed for %r", username)
        raise AuthError("InvalidCredentials", "Invalid credentials", status_code=401)

    logger.info("Login successful for %r", username)
    return UserInfo(username=username, role=ROLE)


def issue_token(
    user: UserInfo, settings: Settings, now: datetime.datetime | None = None
) -> str:
    issued_at = now or datetime.datetime.now(datetime.UTC)
    payload = {
        "username": user.username,
        "role": user.role,
        "iat": issued_at,
        "exp": issued_at + datetime.timedelta(hours=settings.token_ttl_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str | None, settings: Settings) -> TokenClaims:
    """Decode a presented session token.

    Expired and forged tokens are reported identically as InvalidToken.
    """
    if not token:
        raise AuthError("MissingToken", "Access token required", status_code=401)
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat", "username", "role"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
        raise AuthError("InvalidToken", "Invalid or expired token", status_code=403)
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected invalid token: %s", e)
        raise AuthError("InvalidToken", "Invalid or expired token", status_code=403)
    return TokenClaims(
        username=payload["username"],
        role=payload["role"],
        iat=datetime.datetime.fromtimestamp(payload["iat"], datetime.UTC),
        exp=datetime.datetime.fromtimestamp(payload["exp"], datetime.UTC),
    )
