"""Test configuration and fixtures."""

from uuid import uuid4

import logfire

from claim.domain.model import User
from claim.domain.value import (
    DisplayName,
    ExternalId,
    ExternalIdentity,
    PublicId,
    SessionClaims,
    UserId,
)

# Spans and logs are emitted throughout the code under test; keep them local
logfire.configure(send_to_logfire=False, console=False)


def make_anonymous_user(
    public_id: str | None = None, display_name: str = "Quiet Fox 7"
) -> User:
    """Helper to build an anonymous user without going through a repository."""
    return User(
        id=UserId(uuid4()),
        public_id=PublicId(public_id or uuid4().hex[:21]),
        display_name=DisplayName(display_name),
    )


def make_identity(
    external_id: str = "google-oauth2|1001",
    email: str | None = "alice@example.com",
    profile_name: str | None = "Alice Example",
    avatar_image: str | None = "https://cdn.example.com/alice.png",
) -> ExternalIdentity:
    """Helper to build a verified external identity."""
    return ExternalIdentity(
        external_id=ExternalId(external_id),
        email=email,
        profile_name=profile_name,
        avatar_image=avatar_image,
    )


def make_claims(external_id: str = "google-oauth2|1001", **overrides) -> SessionClaims:
    """Helper to build unlinked session claims for an external identity."""
    values = {
        "external_id": external_id,
        "email": "alice@example.com",
        "profile_name": "Alice Example",
        "avatar_image": "https://cdn.example.com/alice.png",
    }
    values.update(overrides)
    return SessionClaims(**values)
