"""Domain value objects.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules for the identifiers the linking protocol
depends on.
"""

import re

from pydantic import field_validator

from claim.domain.value.common import RootValueObject, ValueObject

PUBLIC_ID_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"
)

_PUBLIC_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{8,64}$")


class PublicId(RootValueObject[str]):
    """Opaque client-facing handle of an identity record.

    Doubles as the anonymous bearer token, so it is generated from a
    cryptographic source and never reused. Immutable for the record's lifetime,
    including after linking.
    """

    @field_validator("root")
    @classmethod
    def validate_public_id(cls, v: str) -> str:
        """Validate URL-safe alphabet and length."""
        if not _PUBLIC_ID_PATTERN.match(v):
            raise ValueError(
                "Public ID must be 8-64 characters of A-Z, a-z, 0-9, '_' or '-'"
            )
        return v


class ExternalId(RootValueObject[str]):
    """Provider-scoped identifier asserted by the trusted identity provider.

    At most one identity record may carry a given external ID, ever.
    """

    @field_validator("root")
    @classmethod
    def validate_external_id(cls, v: str) -> str:
        """Validate external ID is not empty and within length limits."""
        if len(v) < 1 or len(v) > 255:
            raise ValueError("External ID must be 1-255 characters")
        return v


class DisplayName(RootValueObject[str]):
    """Human-readable name shown for a user.

    Generated at creation and preserved across linking. Not unique.
    """

    @field_validator("root")
    @classmethod
    def validate_display_name(cls, v: str) -> str:
        """Validate display name is not blank and within length limits."""
        if not v.strip() or len(v) > 100:
            raise ValueError("Display name must be 1-100 characters")
        return v


class ExternalIdentity(ValueObject):
    """Verified identity handed over by the upstream identity provider."""

    external_id: ExternalId
    email: str | None = None
    profile_name: str | None = None  # Discarded on link, the anonymous name wins
    avatar_image: str | None = None


class SessionClaims(ValueObject):
    """Claims carried by the signed session token.

    Present only after a successful external OAuth exchange. ``linked`` tells
    the boundary whether the external identity has already been merged into
    the user store, so the linking flow only runs once per session.
    """

    external_id: str
    email: str | None = None
    profile_name: str | None = None
    avatar_image: str | None = None
    linked: bool = False
    public_id: str | None = None
    is_anonymous: bool = True

    def to_external_identity(self) -> ExternalIdentity:
        """Project the claims onto the identity used for linking."""
        return ExternalIdentity(
            external_id=ExternalId(self.external_id),
            email=self.email,
            profile_name=self.profile_name,
            avatar_image=self.avatar_image,
        )

    def as_linked(self, public_id: PublicId) -> "SessionClaims":
        """Claims refreshed to point at the now-current linked record."""
        return self.model_copy(
            update={
                "public_id": public_id.root,
                "is_anonymous": False,
                "linked": True,
            }
        )


class IdentityEvidence(ValueObject):
    """Everything a request carries that can identify its user."""

    anonymous_token: str | None = None
    claims: SessionClaims | None = None
