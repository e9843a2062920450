"""Application layer DI providers."""

from dishka import Scope, provide

from claim.application.usecase.identity import (
    LinkAccountUseCase,
    ProvisionAnonymousUserUseCase,
    ResolveCurrentUserUseCase,
)
from claim.application.usecase.user import GetUserProfileUseCase
from claim.domain.service import (
    AccountLinkingService,
    IdentityResolver,
    ProvisioningService,
    SessionService,
    UserService,
)
from claim.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Identity use cases
    @provide(scope=Scope.REQUEST)
    def get_provision_anonymous_user_use_case(
        self,
        identity_resolver: IdentityResolver,
        provisioning_service: ProvisioningService,
    ) -> ProvisionAnonymousUserUseCase:
        """Provide provision anonymous user use case."""
        return ProvisionAnonymousUserUseCase(
            identity_resolver=identity_resolver,
            provisioning_service=provisioning_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_resolve_current_user_use_case(
        self,
        identity_resolver: IdentityResolver,
        provisioning_service: ProvisioningService,
    ) -> ResolveCurrentUserUseCase:
        """Provide resolve current user use case."""
        return ResolveCurrentUserUseCase(
            identity_resolver=identity_resolver,
            provisioning_service=provisioning_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_link_account_use_case(
        self,
        identity_resolver: IdentityResolver,
        provisioning_service: ProvisioningService,
        account_linking_service: AccountLinkingService,
        session_service: SessionService,
    ) -> LinkAccountUseCase:
        """Provide link account use case."""
        return LinkAccountUseCase(
            identity_resolver=identity_resolver,
            provisioning_service=provisioning_service,
            account_linking_service=account_linking_service,
            session_service=session_service,
        )

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_get_user_profile_use_case(
        self, user_service: UserService
    ) -> GetUserProfileUseCase:
        """Provide get user profile use case."""
        return GetUserProfileUseCase(user_service=user_service)
