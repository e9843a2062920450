"""Cookie transport for the anonymous token and the session token.

Production (cross-site frontend):
    - samesite="none" required for cross-site requests
    - secure=True required when samesite="none"
Development (same-origin):
    - samesite="lax"
    - secure=False to allow HTTP
"""

from typing import Literal

from fastapi import Response

from claim.config import Settings

_DAY = 24 * 60 * 60


def _policy(settings: Settings) -> tuple[bool, Literal["none", "lax"]]:
    if settings.is_production:
        return True, "none"
    return False, "lax"


def set_anonymous_cookie(response: Response, public_id: str, settings: Settings) -> None:
    """Persist the anonymous token client-side."""
    secure, samesite = _policy(settings)
    response.set_cookie(
        key=settings.anonymous.cookie_name,
        value=public_id,
        httponly=True,
        secure=secure,
        samesite=samesite,
        path="/",
        max_age=settings.anonymous.cookie_max_age_days * _DAY,
    )


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Persist the signed session token client-side."""
    secure, samesite = _policy(settings)
    response.set_cookie(
        key=settings.auth.session_cookie,
        value=token,
        httponly=True,
        secure=secure,
        samesite=samesite,
        path="/",
        max_age=settings.auth.jwt_expiry_days * _DAY,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    # Same path as when it was created
    response.delete_cookie(key=settings.auth.session_cookie, path="/")
