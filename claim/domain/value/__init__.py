"""Domain value objects for the identity service."""

from claim.domain.value.identifiers import UserId
from claim.domain.value.types import (
    PUBLIC_ID_ALPHABET,
    DisplayName,
    ExternalId,
    ExternalIdentity,
    IdentityEvidence,
    PublicId,
    SessionClaims,
)

__all__ = [
    # Identifiers
    "UserId",
    # Types
    "PUBLIC_ID_ALPHABET",
    "PublicId",
    "ExternalId",
    "DisplayName",
    "ExternalIdentity",
    "SessionClaims",
    "IdentityEvidence",
]
