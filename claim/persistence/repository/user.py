"""SQL implementation of User repository."""

import asyncio
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, TypeVar

import logfire
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from claim.domain.error import (
    DuplicateExternalIdError,
    DuplicateIdentifierError,
    DuplicatePublicIdError,
)
from claim.domain.model import User
from claim.domain.repository import UserRepository
from claim.domain.value import ExternalId, ExternalIdentity, PublicId, UserId
from claim.persistence.deadline import effective_timeout
from claim.persistence.error import StorageTimeoutError, StorageUnavailableError
from claim.persistence.mappers import row_to_user, user_to_dict
from claim.persistence.tables import users_table

T = TypeVar("T")


def _duplicate_error(
    error: IntegrityError, public_id: str, external_id: str | None
) -> DuplicateIdentifierError | None:
    """Map a unique violation to the domain error for the offending column."""
    message = str(error.orig).lower()
    if "external_id" in message and external_id is not None:
        return DuplicateExternalIdError(external_id)
    if "public_id" in message:
        return DuplicatePublicIdError(public_id)
    return None


class SqlUserRepository(UserRepository):
    """SQL implementation of UserRepository.

    Every write commits on its own so a unique violation in one operation
    cannot poison the rest of the request's session.
    """

    def __init__(self, session: AsyncSession, timeout: float | None = None) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            timeout: Upper bound for each operation in seconds, None for no bound
        """
        self.session = session
        self.timeout = timeout

    async def _run(self, operation: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run a store operation under the time bound.

        The bound is the tighter of the repository timeout and any deadline
        the caller opened with ``store_deadline``.

        Raises:
            StorageTimeoutError: If the bound expired
            StorageUnavailableError: If the database could not be reached
        """
        timeout = effective_timeout(self.timeout)
        try:
            if timeout is None:
                return await fn()
            return await asyncio.wait_for(fn(), timeout)
        except asyncio.TimeoutError as e:
            logfire.error(
                "Store operation timed out", operation=operation, timeout=timeout
            )
            await self._rollback(operation)
            raise StorageTimeoutError(operation, timeout) from e
        except (OperationalError, InterfaceError, OSError) as e:
            logfire.error("Store unavailable", operation=operation, error=str(e))
            await self._rollback(operation)
            raise StorageUnavailableError(operation) from e

    async def _rollback(self, operation: str) -> None:
        """Reset the session after a failed operation so later calls can run.

        A dead connection can fail the rollback too; the original failure is
        the one reported.
        """
        try:
            await self.session.rollback()
        except (OperationalError, InterfaceError, OSError) as e:
            logfire.warn("Rollback failed", operation=operation, error=str(e))

    async def _find_one(self, operation: str, *criteria: Any) -> Optional[User]:
        async def _query() -> Optional[User]:
            stmt = select(users_table).where(*criteria)
            result = await self.session.execute(stmt)
            row = result.mappings().first()
            return row_to_user(dict(row)) if row else None

        return await self._run(operation, _query)

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by internal ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        return await self._find_one("find_by_id", users_table.c.id == user_id)

    async def find_by_public_id(self, public_id: PublicId) -> Optional[User]:
        """Find a user by public ID.

        Args:
            public_id: Public ID to look up

        Returns:
            User if found, None otherwise
        """
        return await self._find_one(
            "find_by_public_id", users_table.c.public_id == public_id.root
        )

    async def find_by_external_id(self, external_id: ExternalId) -> Optional[User]:
        """Find the user linked to an external identity.

        Args:
            external_id: External ID to look up

        Returns:
            User if found, None otherwise
        """
        return await self._find_one(
            "find_by_external_id", users_table.c.external_id == external_id.root
        )

    async def insert(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: User to insert

        Returns:
            Inserted user

        Raises:
            DuplicatePublicIdError: If the public ID is already taken
            DuplicateExternalIdError: If the external ID is already linked
        """

        async def _insert() -> User:
            stmt = users_table.insert().values(**user_to_dict(user))
            try:
                await self.session.execute(stmt)
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                duplicate = _duplicate_error(
                    e,
                    user.public_id.root,
                    user.external_id.root if user.external_id else None,
                )
                if duplicate is None:
                    raise
                raise duplicate from e
            return user

        return await self._run("insert", _insert)

    async def link_if_anonymous(
        self, user_id: UserId, identity: ExternalIdentity, linked_at: datetime
    ) -> Optional[User]:
        """Promote a user to linked with a single conditional UPDATE.

        The ``is_anonymous`` and ``external_id IS NULL`` guards make the
        promotion happen at most once, whichever request gets there first.

        Args:
            user_id: User to promote
            identity: Verified external identity
            linked_at: Timestamp recorded as ``updated_at``

        Returns:
            The promoted user, or None if no anonymous user matched

        Raises:
            DuplicateExternalIdError: If another user already holds the external ID
        """

        async def _link() -> Optional[User]:
            stmt = (
                users_table.update()
                .where(users_table.c.id == user_id)
                .where(users_table.c.is_anonymous.is_(True))
                .where(users_table.c.external_id.is_(None))
                .values(
                    external_id=identity.external_id.root,
                    email=identity.email,
                    avatar_image=identity.avatar_image,
                    is_anonymous=False,
                    updated_at=linked_at,
                )
                .returning(*users_table.c)
            )
            try:
                result = await self.session.execute(stmt)
                row = result.mappings().first()
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                if "external_id" in str(e.orig).lower():
                    raise DuplicateExternalIdError(identity.external_id.root) from e
                raise
            return row_to_user(dict(row)) if row else None

        return await self._run("link_if_anonymous", _link)
