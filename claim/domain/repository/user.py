"""User repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from claim.domain.model.user import User
from claim.domain.value import ExternalId, ExternalIdentity, PublicId, UserId


class UserRepository(ABC):
    """Repository for the User aggregate - the only shared mutable resource.

    Implementations must enforce uniqueness of ``public_id`` and
    ``external_id`` and must apply ``link_if_anonymous`` as one atomic
    conditional write. Storage failures surface as
    ``claim.persistence.error.PersistenceError`` subclasses.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by internal ID.

        Args:
            user_id: The user's internal identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_public_id(self, public_id: PublicId) -> Optional[User]:
        """Find a user by public ID.

        Args:
            public_id: The client-facing identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_external_id(self, external_id: ExternalId) -> Optional[User]:
        """Find the user linked to an external identity.

        Args:
            external_id: The provider-scoped identifier

        Returns:
            The linked user if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: The user to insert

        Returns:
            The persisted user

        Raises:
            DuplicatePublicIdError: If the public ID is already taken
            DuplicateExternalIdError: If the external ID is already linked
        """
        pass

    @abstractmethod
    async def link_if_anonymous(
        self, user_id: UserId, identity: ExternalIdentity, linked_at: datetime
    ) -> Optional[User]:
        """Promote a user to linked, only if it is still anonymous.

        Sets external ID, email and avatar, clears the anonymous flag and
        bumps ``updated_at``. The display name is left untouched.

        Args:
            user_id: The user to promote
            identity: The verified external identity
            linked_at: Timestamp recorded as ``updated_at``

        Returns:
            The promoted user, or None if no anonymous user matched

        Raises:
            DuplicateExternalIdError: If another user already holds the external ID
        """
        pass
