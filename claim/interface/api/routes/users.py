"""User routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Request, Response, status

from claim.application.usecase.identity import (
    LinkAccountUseCase,
    ProvisionAnonymousUserUseCase,
    ResolveCurrentUserUseCase,
)
from claim.application.usecase.identity.link_account import LinkAccountRequest
from claim.application.usecase.identity.provision_anonymous_user import (
    ProvisionAnonymousUserRequest,
    ProvisionAnonymousUserResponse,
)
from claim.application.usecase.identity.resolve_current_user import (
    ResolveCurrentUserRequest,
)
from claim.application.usecase.user import GetUserProfileUseCase
from claim.application.usecase.user.get_user_profile import (
    GetUserProfileRequest,
    GetUserProfileResponse,
)
from claim.config import Settings
from claim.domain.error import NotFoundError, ProvisioningExhaustedError
from claim.domain.service import SessionService
from claim.interface.api.cookies import set_anonymous_cookie
from claim.interface.api.identity import CurrentUserResponse, apply_link
from claim.persistence.error import PersistenceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    request: Request,
    response: Response,
    settings: FromDishka[Settings],
    session_service: FromDishka[SessionService],
    link_account_use_case: FromDishka[LinkAccountUseCase],
    resolve_current_user_use_case: FromDishka[ResolveCurrentUserUseCase],
) -> CurrentUserResponse:
    """Resolve the current visitor, linking and provisioning as needed.

    A verified session that has not been merged yet is linked first and the
    session cookie is refreshed. A visitor with no usable evidence gets a new
    anonymous identity and cookie. Errors never block the page: the response
    is marked degraded and the visitor stays anonymous.

    Examples:
        First visit:
        {
            "user": {"public_id": "V1StGXR8_Z5jdHi6B-myT", "is_anonymous": true, ...},
            "verified": false,
            "degraded": false
        }
    """
    anonymous_token = request.cookies.get(settings.anonymous.cookie_name)
    claims = session_service.read(request.cookies.get(settings.auth.session_cookie))
    degraded = False

    if claims is not None and not claims.linked:
        try:
            linked = await link_account_use_case.execute(
                LinkAccountRequest(anonymous_token=anonymous_token, claims=claims)
            )
        except Exception as e:
            logger.exception(f"Account linking failed, continuing anonymously: {e}")
            degraded = True
        else:
            apply_link(response, linked, settings)
            return CurrentUserResponse(user=linked.user, verified=True)

    try:
        resolved = await resolve_current_user_use_case.execute(
            ResolveCurrentUserRequest(anonymous_token=anonymous_token, claims=claims)
        )
    except Exception as e:
        logger.exception(f"Could not resolve current user: {e}")
        return CurrentUserResponse(degraded=True)

    if resolved.issued_token:
        set_anonymous_cookie(response, resolved.issued_token, settings)

    return CurrentUserResponse(
        user=resolved.user, verified=resolved.verified, degraded=degraded
    )


@router.post(
    "/anonymous",
    response_model=ProvisionAnonymousUserResponse,
    response_model_exclude={"issued_token"},
)
async def create_anonymous_user(
    request: Request,
    response: Response,
    settings: FromDishka[Settings],
    provision_use_case: FromDishka[ProvisionAnonymousUserUseCase],
) -> ProvisionAnonymousUserResponse:
    """Start an anonymous identity and set its cookie.

    A visitor who already has a valid anonymous cookie gets the same
    identity back.

    Raises:
        HTTPException: 503 if the store could not provision a user
    """
    try:
        provisioned = await provision_use_case.execute(
            ProvisionAnonymousUserRequest(
                anonymous_token=request.cookies.get(settings.anonymous.cookie_name)
            )
        )
    except (ProvisioningExhaustedError, PersistenceError) as e:
        logger.error(f"Anonymous provisioning failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not create anonymous user, try again later",
        )

    if provisioned.issued_token:
        set_anonymous_cookie(response, provisioned.issued_token, settings)
    return provisioned


@router.get("/{public_id}", response_model=GetUserProfileResponse)
async def get_user_profile(
    public_id: str,
    get_user_profile_use_case: FromDishka[GetUserProfileUseCase],
) -> GetUserProfileResponse:
    """Get a user's public profile by public ID.

    Raises:
        HTTPException: If user not found
    """
    try:
        return await get_user_profile_use_case.execute(
            GetUserProfileRequest(public_id=public_id)
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User '{public_id}' not found",
        )
