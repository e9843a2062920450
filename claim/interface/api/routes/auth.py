"""Authentication routes.

The OAuth exchange itself happens upstream; the identity provider posts the
verified identity here and the API turns it into a session cookie. Merging
that identity into the user store is done by the linking flow.
"""

import logging
import secrets

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from claim.application.usecase.identity import LinkAccountUseCase
from claim.application.usecase.identity.link_account import LinkAccountRequest
from claim.config import Settings
from claim.domain.service import SessionService
from claim.domain.value import SessionClaims
from claim.interface.api.cookies import clear_session_cookie, set_session_cookie
from claim.interface.api.identity import CurrentUserResponse, apply_link

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class VerifiedIdentityRequest(BaseModel):
    """Identity asserted by the upstream provider after a successful OAuth exchange."""

    external_id: str = Field(min_length=1, max_length=255)
    email: str | None = None
    profile_name: str | None = None
    avatar_image: str | None = None


class SessionResponse(BaseModel):
    """Session creation response."""

    authenticated: bool
    linked: bool


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


@router.post("/session", response_model=SessionResponse)
async def create_session(
    identity: VerifiedIdentityRequest,
    response: Response,
    settings: FromDishka[Settings],
    session_service: FromDishka[SessionService],
    x_upstream_secret: str | None = Header(default=None),
) -> SessionResponse:
    """Start a verified session for an external identity.

    Only the trusted upstream identity provider may call this. The session
    starts unlinked; the next ``GET /users/me`` or ``POST /auth/link`` merges
    it into the visitor's record.

    Raises:
        HTTPException: 401 if the upstream secret is missing or wrong
    """
    if x_upstream_secret is None or not secrets.compare_digest(
        x_upstream_secret.encode(), settings.auth.upstream_secret.encode()
    ):
        logger.warning("Rejected session creation with invalid upstream secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid upstream credentials",
        )

    claims = SessionClaims(
        external_id=identity.external_id,
        email=identity.email,
        profile_name=identity.profile_name,
        avatar_image=identity.avatar_image,
        linked=False,
    )
    set_session_cookie(response, session_service.issue(claims), settings)
    logger.info(f"Session started for external identity {identity.external_id}")

    return SessionResponse(authenticated=True, linked=False)


@router.post("/link", response_model=CurrentUserResponse)
async def link_account(
    request: Request,
    response: Response,
    settings: FromDishka[Settings],
    session_service: FromDishka[SessionService],
    link_account_use_case: FromDishka[LinkAccountUseCase],
) -> CurrentUserResponse:
    """Merge the verified session into the visitor's anonymous identity.

    Safe to call repeatedly: an already linked session is returned as is.

    Raises:
        HTTPException: 401 if there is no valid session
    """
    claims = session_service.read(request.cookies.get(settings.auth.session_cookie))
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        linked = await link_account_use_case.execute(
            LinkAccountRequest(
                anonymous_token=request.cookies.get(settings.anonymous.cookie_name),
                claims=claims,
            )
        )
    except Exception as e:
        logger.exception(f"Account linking failed: {e}")
        return CurrentUserResponse(degraded=True)

    apply_link(response, linked, settings)
    return CurrentUserResponse(user=linked.user, verified=True)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    settings: FromDishka[Settings],
) -> LogoutResponse:
    """Clear the session cookie. The anonymous cookie is kept."""
    clear_session_cookie(response, settings)
    return LogoutResponse(success=True, message="Successfully logged out")
