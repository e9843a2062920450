"""Public ID generator."""

import secrets

from claim.domain.value import PUBLIC_ID_ALPHABET, PublicId

from .base import Service


class PublicIdGenerator(Service):
    """Generate unguessable URL-safe public IDs.

    Public IDs double as anonymous bearer tokens, so they come from
    ``secrets`` rather than ``random``. Uniqueness is still enforced by the
    repository; a collision is retried by the provisioning service.
    """

    def __init__(self, size: int = 21) -> None:
        if size < 8 or size > 64:
            raise ValueError("Public ID size must be between 8 and 64")
        self.size = size

    def generate(self) -> PublicId:
        return PublicId(
            "".join(secrets.choice(PUBLIC_ID_ALPHABET) for _ in range(self.size))
        )
