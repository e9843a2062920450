"""In-memory user repository for testing."""

import asyncio
from datetime import datetime
from typing import Optional

from claim.domain.error import DuplicateExternalIdError, DuplicatePublicIdError
from claim.domain.model.user import User
from claim.domain.repository.user import UserRepository
from claim.domain.value import ExternalId, ExternalIdentity, PublicId, UserId
from claim.persistence.deadline import effective_timeout
from claim.persistence.error import StorageTimeoutError, StorageUnavailableError


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing.

    Each operation yields to the event loop before touching state, so
    concurrent callers interleave the way they would against a real store.
    Reads and writes after that point never await, which keeps every
    check-and-set atomic.

    Args:
        latency: Simulated round-trip time in seconds
        timeout: Upper bound for each operation, None for no bound; a
            caller's ``store_deadline`` can tighten it
        unavailable: Fail every operation as if the store were down
    """

    def __init__(
        self,
        latency: float = 0.0,
        timeout: float | None = None,
        unavailable: bool = False,
    ) -> None:
        self.latency = latency
        self.timeout = timeout
        self.unavailable = unavailable
        self._users: dict[UserId, User] = {}
        self._by_public_id: dict[str, UserId] = {}
        self._by_external_id: dict[str, UserId] = {}

    async def _io(self, operation: str) -> None:
        if self.unavailable:
            raise StorageUnavailableError(operation)
        timeout = effective_timeout(self.timeout)
        try:
            await asyncio.wait_for(asyncio.sleep(self.latency), timeout)
        except asyncio.TimeoutError as e:
            raise StorageTimeoutError(operation, timeout) from e

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        await self._io("find_by_id")
        return self._users.get(user_id)

    async def find_by_public_id(self, public_id: PublicId) -> Optional[User]:
        """Find a user by public ID."""
        await self._io("find_by_public_id")
        user_id = self._by_public_id.get(public_id.root)
        return self._users.get(user_id) if user_id else None

    async def find_by_external_id(self, external_id: ExternalId) -> Optional[User]:
        """Find the user linked to an external identity."""
        await self._io("find_by_external_id")
        user_id = self._by_external_id.get(external_id.root)
        return self._users.get(user_id) if user_id else None

    async def insert(self, user: User) -> User:
        """Insert a new user, enforcing identifier uniqueness."""
        await self._io("insert")
        if user.public_id.root in self._by_public_id:
            raise DuplicatePublicIdError(user.public_id.root)
        if user.external_id and user.external_id.root in self._by_external_id:
            raise DuplicateExternalIdError(user.external_id.root)

        self._users[user.id] = user
        self._by_public_id[user.public_id.root] = user.id
        if user.external_id:
            self._by_external_id[user.external_id.root] = user.id
        return user

    async def link_if_anonymous(
        self, user_id: UserId, identity: ExternalIdentity, linked_at: datetime
    ) -> Optional[User]:
        """Promote a user to linked if it is still anonymous."""
        await self._io("link_if_anonymous")
        user = self._users.get(user_id)
        if user is None or not user.is_anonymous or user.external_id is not None:
            return None
        if identity.external_id.root in self._by_external_id:
            raise DuplicateExternalIdError(identity.external_id.root)

        linked = user.link(identity, linked_at)
        self._users[user_id] = linked
        self._by_external_id[identity.external_id.root] = user_id
        return linked

    def add(self, user: User) -> None:
        """Seed a user directly, bypassing latency and failure injection."""
        self._users[user.id] = user
        self._by_public_id[user.public_id.root] = user.id
        if user.external_id:
            self._by_external_id[user.external_id.root] = user.id
