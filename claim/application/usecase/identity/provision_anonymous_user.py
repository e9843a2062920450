"""Provision anonymous user use case."""

from pydantic import BaseModel

from claim.application.usecase.base import BaseUseCase
from claim.application.usecase.identity.common import UserInfo, to_user_info
from claim.domain.service import IdentityResolver, ProvisioningService
from claim.domain.value import IdentityEvidence


class ProvisionAnonymousUserRequest(BaseModel):
    """Provision anonymous user request."""

    anonymous_token: str | None = None  # Existing token, if the client has one


class ProvisionAnonymousUserResponse(BaseModel):
    """Provision anonymous user response."""

    user: UserInfo
    issued_token: str | None  # Set only when a new user was created


class ProvisionAnonymousUserUseCase(
    BaseUseCase[ProvisionAnonymousUserRequest, ProvisionAnonymousUserResponse]
):
    """Use case for explicitly starting an anonymous identity.

    A client that already holds a valid token gets its existing user back,
    so a token is issued at most once per visitor.
    """

    def __init__(
        self,
        identity_resolver: IdentityResolver,
        provisioning_service: ProvisioningService,
    ) -> None:
        """Initialize provision anonymous user use case.

        Args:
            identity_resolver: Identity resolution domain service
            provisioning_service: Provisioning domain service
        """
        self.identity_resolver = identity_resolver
        self.provisioning_service = provisioning_service

    async def execute(
        self, request: ProvisionAnonymousUserRequest
    ) -> ProvisionAnonymousUserResponse:
        """Execute provisioning flow.

        Args:
            request: Request with the client's current token, if any

        Returns:
            The user and the token to persist client-side when newly issued

        Raises:
            ProvisioningExhaustedError: If every generated public ID collided
        """
        existing = await self.identity_resolver.resolve(
            IdentityEvidence(anonymous_token=request.anonymous_token)
        )
        if existing:
            return ProvisionAnonymousUserResponse(
                user=to_user_info(existing), issued_token=None
            )

        user = await self.provisioning_service.provision()
        return ProvisionAnonymousUserResponse(
            user=to_user_info(user), issued_token=user.public_id.root
        )
