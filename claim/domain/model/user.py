"""User aggregate root.

A user starts anonymous, identified only by a generated public ID, and may be
promoted once to a linked user by attaching a verified external identity.
Promotion mutates the same record; it never creates a new one.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import Field, model_validator

from claim.domain.error import BusinessRuleViolationError
from claim.domain.model.common import DomainModel
from claim.domain.value import (
    DisplayName,
    ExternalId,
    ExternalIdentity,
    PublicId,
    UserId,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(DomainModel):
    """Identity record.

    Invariant: ``is_anonymous`` is False exactly when ``external_id`` is set.
    """

    id: UserId
    public_id: PublicId
    display_name: DisplayName
    email: Optional[str] = None
    avatar_image: Optional[str] = None
    is_anonymous: bool = True
    external_id: Optional[ExternalId] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def check_link_state(self) -> "User":
        """Reject records whose anonymity flag disagrees with their link."""
        if self.is_anonymous and self.external_id is not None:
            raise ValueError("Anonymous user cannot carry an external ID")
        if not self.is_anonymous and self.external_id is None:
            raise ValueError("Linked user must carry an external ID")
        return self

    @classmethod
    def create_anonymous(
        cls, public_id: PublicId, display_name: DisplayName
    ) -> "User":
        """Create a fresh anonymous user."""
        now = utcnow()
        return cls(
            id=UserId(uuid4()),
            public_id=public_id,
            display_name=display_name,
            is_anonymous=True,
            created_at=now,
            updated_at=now,
        )

    def link(self, identity: ExternalIdentity, linked_at: datetime) -> "User":
        """Return this user promoted to a linked user.

        The display name is kept; the provider's profile name is ignored.

        Raises:
            BusinessRuleViolationError: If the user is already linked
        """
        if not self.is_anonymous:
            raise BusinessRuleViolationError(
                f"User {self.public_id} is already linked"
            )
        return self.model_copy(
            update={
                "external_id": identity.external_id,
                "email": identity.email,
                "avatar_image": identity.avatar_image,
                "is_anonymous": False,
                "updated_at": linked_at,
            }
        )
