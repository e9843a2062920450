"""Unit tests for GetUserProfileUseCase."""

from dishka import AsyncContainer
import pytest

from claim.application.usecase.user import GetUserProfileUseCase
from claim.application.usecase.user.get_user_profile import GetUserProfileRequest
from claim.domain.error import NotFoundError
from claim.domain.service import ProvisioningService
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestGetUserProfileUseCase:
    """Tests for GetUserProfileUseCase."""

    @pytest.mark.asyncio
    async def test_returns_public_profile(self, unit_env: AsyncContainer):
        """Should return the public view of an existing user."""
        provisioning = await unit_env.get(ProvisioningService)
        use_case = await unit_env.get(GetUserProfileUseCase)
        user = await provisioning.provision()

        profile = await use_case.execute(
            GetUserProfileRequest(public_id=user.public_id.root)
        )

        assert profile.public_id == user.public_id.root
        assert profile.display_name == user.display_name.root
        assert profile.is_anonymous is True
        assert not hasattr(profile, "email")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("public_id", ["unknown-user-01", "bad id!"])
    async def test_unknown_or_malformed_id_not_found(
        self, unit_env: AsyncContainer, public_id: str
    ):
        """Unknown and malformed public IDs are both not found."""
        use_case = await unit_env.get(GetUserProfileUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(GetUserProfileRequest(public_id=public_id))
