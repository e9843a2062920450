"""Resolve current user use case."""

import logfire
from pydantic import BaseModel

from claim.application.usecase.base import BaseUseCase
from claim.application.usecase.identity.common import UserInfo, to_user_info
from claim.domain.service import IdentityResolver, ProvisioningService
from claim.domain.value import IdentityEvidence, SessionClaims


class ResolveCurrentUserRequest(BaseModel):
    """Resolve current user request."""

    anonymous_token: str | None = None
    claims: SessionClaims | None = None
    provision_if_absent: bool = True


class ResolveCurrentUserResponse(BaseModel):
    """Resolve current user response."""

    user: UserInfo | None
    issued_token: str | None = None  # New anonymous token to persist client-side
    verified: bool = False  # Resolved through verified session claims


class ResolveCurrentUserUseCase(
    BaseUseCase[ResolveCurrentUserRequest, ResolveCurrentUserResponse]
):
    """Use case for determining who the current visitor is."""

    def __init__(
        self,
        identity_resolver: IdentityResolver,
        provisioning_service: ProvisioningService,
    ) -> None:
        """Initialize resolve current user use case.

        Args:
            identity_resolver: Identity resolution domain service
            provisioning_service: Provisioning domain service
        """
        self.identity_resolver = identity_resolver
        self.provisioning_service = provisioning_service

    async def execute(
        self, request: ResolveCurrentUserRequest
    ) -> ResolveCurrentUserResponse:
        """Execute resolve flow.

        Steps:
        1. Resolve via verified claims if present (authoritative)
        2. If the verified identity has no user yet, fall back to the
           anonymous token so the visitor stays anonymous until linked
        3. If still absent, provision a new anonymous user

        Args:
            request: Request with the evidence the visitor presented

        Returns:
            The current user, plus the newly issued token if one was created

        Raises:
            ProvisioningExhaustedError: If provisioning gave up
        """
        if request.claims is not None:
            user = await self.identity_resolver.resolve(
                IdentityEvidence(claims=request.claims)
            )
            if user:
                return ResolveCurrentUserResponse(
                    user=to_user_info(user), verified=True
                )
            logfire.info(
                "Verified identity not linked, resolving anonymously",
                external_id=request.claims.external_id,
            )

        user = await self.identity_resolver.resolve(
            IdentityEvidence(anonymous_token=request.anonymous_token)
        )
        if user:
            return ResolveCurrentUserResponse(user=to_user_info(user))

        if not request.provision_if_absent:
            return ResolveCurrentUserResponse(user=None)

        user = await self.provisioning_service.provision()
        return ResolveCurrentUserResponse(
            user=to_user_info(user), issued_token=user.public_id.root
        )
