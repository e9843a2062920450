"""Identity resolution domain service."""

import logfire
from pydantic import ValidationError

from claim.domain.model import User
from claim.domain.repository import UserRepository
from claim.domain.value import ExternalId, IdentityEvidence, PublicId

from .base import Service


class IdentityResolver(Service):
    """Determine the effective user for a request's evidence.

    Read-only: an absent identity is a normal result (None), and provisioning
    is left to the caller.
    """

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize identity resolver.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def resolve(self, evidence: IdentityEvidence) -> User | None:
        """Resolve the current user.

        Verified session claims are authoritative and resolved by external
        ID; the anonymous token is then not consulted at all. Otherwise the
        anonymous token is resolved by public ID. Tokens that are malformed
        or match nothing resolve to None.

        Args:
            evidence: Anonymous token and/or verified session claims

        Returns:
            The current user, or None if absent
        """
        with logfire.span(
            "identity_resolver.resolve",
            has_token=evidence.anonymous_token is not None,
            has_claims=evidence.claims is not None,
        ):
            if evidence.claims is not None:
                return await self._resolve_verified(evidence.claims.external_id)

            if evidence.anonymous_token:
                return await self._resolve_anonymous(evidence.anonymous_token)

            logfire.info("No identity evidence")
            return None

    async def _resolve_verified(self, raw_external_id: str) -> User | None:
        try:
            external_id = ExternalId(raw_external_id)
        except ValidationError:
            logfire.warn("Malformed external ID in session claims")
            return None

        user = await self.user_repository.find_by_external_id(external_id)
        if user:
            logfire.info(
                "Resolved verified user",
                external_id=external_id.root,
                public_id=user.public_id.root,
            )
        else:
            logfire.info("Verified identity not linked yet", external_id=external_id.root)
        return user

    async def _resolve_anonymous(self, token: str) -> User | None:
        try:
            public_id = PublicId(token)
        except ValidationError:
            logfire.warn("Malformed anonymous token")
            return None

        user = await self.user_repository.find_by_public_id(public_id)
        if user:
            logfire.info("Resolved user by token", public_id=public_id.root)
        else:
            logfire.warn("Anonymous token matches no user", public_id=public_id.root)
        return user
