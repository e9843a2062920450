"""Account linking domain service."""

from datetime import datetime, timezone

import logfire

from claim.domain.error import DuplicateExternalIdError, LinkingConflictError
from claim.domain.model import User
from claim.domain.repository import UserRepository
from claim.domain.value import ExternalIdentity

from .base import Service


class AccountLinkingService(Service):
    """Promote an anonymous user to a user linked to an external identity.

    A user moves from anonymous to linked once and never back. Each external
    identity maps to at most one user, even when several requests race to
    link it; the race is settled by the repository's unique constraint, and
    the losing caller re-checks and returns the winner.
    """

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize account linking service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def upgrade(
        self, anonymous_user: User | None, identity: ExternalIdentity
    ) -> User | None:
        """Link an anonymous user to a verified external identity.

        Steps:
        1. Nothing to do if there is no user or it is already linked
        2. If a user is already linked to the external ID, return it as-is
        3. Otherwise promote the anonymous user with one conditional write
        4. If that write loses a race, re-check once and return the winner

        Args:
            anonymous_user: The request's current anonymous user, if any
            identity: Verified external identity from the identity provider

        Returns:
            The user now linked to the external identity, or None if there
            was nothing to upgrade

        Raises:
            LinkingConflictError: If the re-check after a lost race still
                finds no user for the external identity
        """
        external_id = identity.external_id

        with logfire.span(
            "account_linking_service.upgrade", external_id=external_id.root
        ):
            if anonymous_user is None or not anonymous_user.is_anonymous:
                logfire.info("No anonymous user to upgrade")
                return None

            existing = await self.user_repository.find_by_external_id(external_id)
            if existing:
                # Possibly linked from another device; this browser's
                # anonymous user stays untouched
                logfire.info(
                    "External identity already linked",
                    external_id=external_id.root,
                    public_id=existing.public_id.root,
                    requested_public_id=anonymous_user.public_id.root,
                )
                return existing

            try:
                linked = await self.user_repository.link_if_anonymous(
                    anonymous_user.id, identity, datetime.now(timezone.utc)
                )
            except DuplicateExternalIdError:
                logfire.warn(
                    "Lost linking race on external ID",
                    external_id=external_id.root,
                    public_id=anonymous_user.public_id.root,
                )
                linked = None

            if linked is not None:
                logfire.info(
                    "Anonymous user linked",
                    external_id=external_id.root,
                    public_id=linked.public_id.root,
                    display_name=linked.display_name.root,
                )
                return linked

            winner = await self.user_repository.find_by_external_id(external_id)
            if winner:
                logfire.info(
                    "Returning race winner",
                    external_id=external_id.root,
                    public_id=winner.public_id.root,
                )
                return winner

            logfire.error(
                "Linking conflict unresolved",
                external_id=external_id.root,
                public_id=anonymous_user.public_id.root,
            )
            raise LinkingConflictError(external_id.root)
