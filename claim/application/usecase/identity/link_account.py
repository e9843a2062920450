"""Link account use case."""

import logfire
from pydantic import BaseModel

from claim.application.usecase.base import BaseUseCase
from claim.application.usecase.identity.common import UserInfo, to_user_info
from claim.domain.error import LinkingConflictError
from claim.domain.model import User
from claim.domain.service import (
    AccountLinkingService,
    IdentityResolver,
    ProvisioningService,
    SessionService,
)
from claim.domain.value import IdentityEvidence, SessionClaims


class LinkAccountRequest(BaseModel):
    """Link account request.

    Made after the upstream OAuth exchange succeeded and verified claims
    are in the session.
    """

    anonymous_token: str | None = None
    claims: SessionClaims


class LinkAccountResponse(BaseModel):
    """Link account response."""

    user: UserInfo
    claims: SessionClaims  # Refreshed claims, linked=True
    session_token: str | None  # Re-issued token, None if unchanged
    issued_token: str | None = None  # New anonymous token, if one was provisioned
    skipped: bool = False  # Session was already linked


class LinkAccountUseCase(BaseUseCase[LinkAccountRequest, LinkAccountResponse]):
    """Use case for claiming an anonymous identity with a verified account."""

    def __init__(
        self,
        identity_resolver: IdentityResolver,
        provisioning_service: ProvisioningService,
        account_linking_service: AccountLinkingService,
        session_service: SessionService,
    ) -> None:
        """Initialize link account use case.

        Args:
            identity_resolver: Identity resolution domain service
            provisioning_service: Provisioning domain service
            account_linking_service: Account linking domain service
            session_service: Session token domain service
        """
        self.identity_resolver = identity_resolver
        self.provisioning_service = provisioning_service
        self.account_linking_service = account_linking_service
        self.session_service = session_service

    async def execute(self, request: LinkAccountRequest) -> LinkAccountResponse:
        """Execute account linking flow.

        Steps:
        1. Skip if the session says it is already linked and the user exists
        2. Resolve the anonymous user from the token
        3. If there is no anonymous user to claim, reuse the user already
           linked to the external identity, or provision a fresh anonymous
           user so the verified visitor always ends up with a record
        4. Upgrade and refresh the session claims

        Args:
            request: Request with the anonymous token and verified claims

        Returns:
            Linked user, refreshed claims and tokens to persist client-side

        Raises:
            LinkingConflictError: If a linking race could not be settled
            ProvisioningExhaustedError: If provisioning gave up
        """
        claims = request.claims
        identity = claims.to_external_identity()

        with logfire.span(
            "link_account", external_id=identity.external_id.root
        ):
            if claims.linked:
                current = await self.identity_resolver.resolve(
                    IdentityEvidence(claims=claims)
                )
                if current:
                    return LinkAccountResponse(
                        user=to_user_info(current),
                        claims=claims,
                        session_token=None,
                        skipped=True,
                    )
                logfire.warn(
                    "Session marked linked but no user found, relinking",
                    external_id=identity.external_id.root,
                )

            issued_token: str | None = None
            anonymous = await self.identity_resolver.resolve(
                IdentityEvidence(anonymous_token=request.anonymous_token)
            )

            linked: User | None
            if anonymous is not None and anonymous.is_anonymous:
                linked = await self.account_linking_service.upgrade(
                    anonymous, identity
                )
            else:
                linked = await self.identity_resolver.resolve(
                    IdentityEvidence(claims=claims)
                )
                if linked is None:
                    fresh = await self.provisioning_service.provision()
                    linked = await self.account_linking_service.upgrade(
                        fresh, identity
                    )
                    if linked is not None and linked.id == fresh.id:
                        issued_token = fresh.public_id.root
                    else:
                        # Another request linked the identity first; keep the
                        # cookie off the leftover anonymous user.
                        logfire.warn(
                            "Fresh anonymous user lost the linking race",
                            external_id=identity.external_id.root,
                            public_id=fresh.public_id.root,
                        )

            if linked is None:
                raise LinkingConflictError(identity.external_id.root)

            refreshed = claims.as_linked(linked.public_id)
            return LinkAccountResponse(
                user=to_user_info(linked),
                claims=refreshed,
                session_token=self.session_service.issue(refreshed),
                issued_token=issued_token,
            )
