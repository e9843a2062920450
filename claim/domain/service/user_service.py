"""User domain service."""

import logfire

from claim.domain.error import NotFoundError
from claim.domain.model import User
from claim.domain.repository import UserRepository
from claim.domain.value import PublicId

from .base import Service


class UserService(Service):
    """Domain service for fetching users by key."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def get_by_public_id(self, public_id: PublicId) -> User:
        """Get user by public ID.

        Args:
            public_id: Public ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span(
            "user_service.get_by_public_id", public_id=public_id.root
        ):
            user = await self.user_repository.find_by_public_id(public_id)
            if not user:
                logfire.warn("User not found", public_id=public_id.root)
                raise NotFoundError("User", public_id.root)
            logfire.info(
                "User found",
                public_id=public_id.root,
                is_anonymous=user.is_anonymous,
            )
            return user
