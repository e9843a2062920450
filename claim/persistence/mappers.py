"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID

from claim.domain.model import User
from claim.domain.value import DisplayName, ExternalId, PublicId, UserId


def _aware(value: datetime) -> datetime:
    """Attach UTC to naive timestamps (SQLite drops the offset)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    external_id = row.get("external_id")
    return User(
        id=UserId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        public_id=PublicId(row["public_id"]),
        display_name=DisplayName(row["display_name"]),
        email=row.get("email"),
        avatar_image=row.get("avatar_image"),
        is_anonymous=row["is_anonymous"],
        external_id=ExternalId(external_id) if external_id is not None else None,
        created_at=_aware(row["created_at"]),
        updated_at=_aware(row["updated_at"]),
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return user.model_dump()
