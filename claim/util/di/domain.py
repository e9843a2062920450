"""Domain layer DI providers."""

from dishka import Scope, provide

from claim.config import AnonymousSettings, AuthSettings
from claim.domain.repository import UserRepository
from claim.domain.service import (
    AccountLinkingService,
    DisplayNameGenerator,
    IdentityResolver,
    ProvisioningService,
    PublicIdGenerator,
    SessionService,
    UserService,
)
from claim.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    The stateless generators live for the whole app.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_public_id_generator(
        self, anonymous_settings: AnonymousSettings
    ) -> PublicIdGenerator:
        """Provide public ID generator."""
        return PublicIdGenerator(size=anonymous_settings.public_id_length)

    @provide(scope=Scope.APP)
    def get_display_name_generator(
        self, anonymous_settings: AnonymousSettings
    ) -> DisplayNameGenerator:
        """Provide display name generator."""
        return DisplayNameGenerator(locale=anonymous_settings.display_name_locale)

    @provide
    def get_session_service(self, auth_settings: AuthSettings) -> SessionService:
        """Provide session token domain service."""
        return SessionService(auth_settings=auth_settings)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_identity_resolver(self, user_repository: UserRepository) -> IdentityResolver:
        """Provide identity resolution domain service."""
        return IdentityResolver(user_repository=user_repository)

    @provide
    def get_provisioning_service(
        self,
        user_repository: UserRepository,
        public_id_generator: PublicIdGenerator,
        display_name_generator: DisplayNameGenerator,
        anonymous_settings: AnonymousSettings,
    ) -> ProvisioningService:
        """Provide anonymous provisioning domain service."""
        return ProvisioningService(
            user_repository=user_repository,
            public_id_generator=public_id_generator,
            display_name_generator=display_name_generator,
            max_attempts=anonymous_settings.provision_max_attempts,
        )

    @provide
    def get_account_linking_service(
        self, user_repository: UserRepository
    ) -> AccountLinkingService:
        """Provide account linking domain service."""
        return AccountLinkingService(user_repository=user_repository)
