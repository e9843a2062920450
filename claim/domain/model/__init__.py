"""Domain model entities."""

from claim.domain.model.user import User

__all__ = [
    "User",
]
