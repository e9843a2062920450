"""Response models shared by identity use cases."""

from datetime import datetime

from pydantic import BaseModel

from claim.domain.model import User


class UserInfo(BaseModel):
    """Current user as seen by its owner.

    The internal user ID is deliberately absent.
    """

    public_id: str
    display_name: str
    email: str | None
    avatar_image: str | None
    is_anonymous: bool
    created_at: datetime
    updated_at: datetime


def to_user_info(user: User) -> UserInfo:
    return UserInfo(
        public_id=user.public_id.root,
        display_name=user.display_name.root,
        email=user.email,
        avatar_image=user.avatar_image,
        is_anonymous=user.is_anonymous,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
