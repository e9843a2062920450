"""JWT token utilities for session claims."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import ValidationError

from claim.config import AuthSettings
from claim.domain.value import SessionClaims


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(claims: SessionClaims, settings: AuthSettings) -> str:
    """Create a JWT carrying session claims.

    Args:
        claims: Session claims to embed
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expiry_days)

    payload = {
        **claims.model_dump(),
        "sub": claims.external_id,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> SessionClaims:
    """Verify and decode a session JWT.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Session claims if valid

    Raises:
        JWTError: If token is invalid, expired or carries malformed claims
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")

    payload.pop("sub", None)
    payload.pop("exp", None)
    try:
        return SessionClaims(**payload)
    except ValidationError:
        raise JWTError("Malformed token claims")
