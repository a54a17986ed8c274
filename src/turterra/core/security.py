"""Bearer token helpers.

Tokens are minted by the hosted auth provider; this service only verifies them
and reads the ``sub`` claim, which is the viewer's profile id.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from turterra.core.errors import Unauthorized
from turterra.core.settings import settings


def create_access_token(subject: str, expires_minutes: int = 60) -> str:
    """Create a signed token for ``subject``.

    Used by tests and local tooling; production tokens come from the auth
    provider with the same signing key.
    """
    to_encode: dict[str, object] = {
        "sub": subject,
        "exp": datetime.now(UTC) + timedelta(minutes=expires_minutes),
    }
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str:
    """Return the ``sub`` claim of a valid token.

    Raises:
        Unauthorized: If the token is malformed, expired or has no subject.
    """
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as err:
        raise Unauthorized("Could not validate credentials") from err

    subject = payload.get("sub")
    if not subject:
        raise Unauthorized("Could not validate credentials")
    return str(subject)
