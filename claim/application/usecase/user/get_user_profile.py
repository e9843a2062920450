"""Get user profile use case."""

from datetime import datetime

from pydantic import BaseModel, ValidationError

from claim.application.usecase.base import BaseUseCase
from claim.domain.error import NotFoundError
from claim.domain.service import UserService
from claim.domain.value import PublicId


class GetUserProfileRequest(BaseModel):
    """Get user profile request."""

    public_id: str


class GetUserProfileResponse(BaseModel):
    """Public profile of a user, safe to show to anyone."""

    public_id: str
    display_name: str
    avatar_image: str | None
    is_anonymous: bool
    created_at: datetime


class GetUserProfileUseCase(
    BaseUseCase[GetUserProfileRequest, GetUserProfileResponse]
):
    """Use case for getting a user's public profile by public ID."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize get user profile use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: GetUserProfileRequest) -> GetUserProfileResponse:
        """Execute get user profile flow.

        Args:
            request: Request with public ID

        Returns:
            Public profile information

        Raises:
            NotFoundError: If the public ID is malformed or unknown
        """
        try:
            public_id = PublicId(request.public_id)
        except ValidationError:
            raise NotFoundError("User", request.public_id) from None

        user = await self.user_service.get_by_public_id(public_id)

        return GetUserProfileResponse(
            public_id=user.public_id.root,
            display_name=user.display_name.root,
            avatar_image=user.avatar_image,
            is_anonymous=user.is_anonymous,
            created_at=user.created_at,
        )
