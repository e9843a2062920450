"""SQL repository implementations."""

from claim.persistence.repository.user import SqlUserRepository

__all__ = ["SqlUserRepository"]
