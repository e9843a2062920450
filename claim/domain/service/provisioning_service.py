"""Anonymous user provisioning domain service."""

import logfire

from claim.domain.error import DuplicatePublicIdError, ProvisioningExhaustedError
from claim.domain.model import User
from claim.domain.repository import UserRepository

from .base import Service
from .display_name import DisplayNameGenerator
from .public_id import PublicIdGenerator


class ProvisioningService(Service):
    """Domain service creating anonymous users on first contact."""

    def __init__(
        self,
        user_repository: UserRepository,
        public_id_generator: PublicIdGenerator,
        display_name_generator: DisplayNameGenerator,
        max_attempts: int = 3,
    ) -> None:
        """Initialize provisioning service.

        Args:
            user_repository: User repository
            public_id_generator: Source of fresh public IDs
            display_name_generator: Source of display names
            max_attempts: Total insert attempts before giving up
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.user_repository = user_repository
        self.public_id_generator = public_id_generator
        self.display_name_generator = display_name_generator
        self.max_attempts = max_attempts

    async def provision(self) -> User:
        """Create and persist a new anonymous user.

        Each attempt draws a fresh public ID. The repository's unique
        constraint is the backstop against collisions, including between
        concurrent requests.

        Returns:
            The persisted anonymous user

        Raises:
            ProvisioningExhaustedError: If every attempt collided
        """
        with logfire.span("provisioning_service.provision"):
            for attempt in range(1, self.max_attempts + 1):
                user = User.create_anonymous(
                    public_id=self.public_id_generator.generate(),
                    display_name=self.display_name_generator.generate(),
                )
                try:
                    saved = await self.user_repository.insert(user)
                except DuplicatePublicIdError:
                    logfire.warn(
                        "Public ID collision, retrying",
                        attempt=attempt,
                        max_attempts=self.max_attempts,
                    )
                    continue

                logfire.info(
                    "Anonymous user provisioned",
                    public_id=saved.public_id.root,
                    display_name=saved.display_name.root,
                    attempt=attempt,
                )
                return saved

            logfire.error(
                "Provisioning exhausted", max_attempts=self.max_attempts
            )
            raise ProvisioningExhaustedError(self.max_attempts)
