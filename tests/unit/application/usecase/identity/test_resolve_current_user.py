"""Unit tests for ResolveCurrentUserUseCase."""

from dishka import AsyncContainer
import pytest

from claim.application.usecase.identity import (
    LinkAccountUseCase,
    ResolveCurrentUserUseCase,
)
from claim.application.usecase.identity.link_account import LinkAccountRequest
from claim.application.usecase.identity.resolve_current_user import (
    ResolveCurrentUserRequest,
)
from claim.domain.service import ProvisioningService
from tests.conftest import make_claims
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestResolveCurrentUserUseCase:
    """Tests for ResolveCurrentUserUseCase."""

    @pytest.mark.asyncio
    async def test_first_visit_provisions(self, unit_env: AsyncContainer):
        """No evidence: a new anonymous user is created and its token issued."""
        use_case = await unit_env.get(ResolveCurrentUserUseCase)

        response = await use_case.execute(ResolveCurrentUserRequest())

        assert response.user is not None
        assert response.user.is_anonymous is True
        assert response.issued_token == response.user.public_id
        assert response.verified is False

    @pytest.mark.asyncio
    async def test_returning_visitor_resolves_without_new_token(
        self, unit_env: AsyncContainer
    ):
        """A valid token resolves to its user and nothing new is issued."""
        use_case = await unit_env.get(ResolveCurrentUserUseCase)
        first = await use_case.execute(ResolveCurrentUserRequest())

        second = await use_case.execute(
            ResolveCurrentUserRequest(anonymous_token=first.issued_token)
        )

        assert second.user == first.user
        assert second.issued_token is None

    @pytest.mark.asyncio
    async def test_stale_token_provisions_new_user(self, unit_env: AsyncContainer):
        """A token matching nothing is treated as a first visit."""
        use_case = await unit_env.get(ResolveCurrentUserUseCase)

        response = await use_case.execute(
            ResolveCurrentUserRequest(anonymous_token="stale-token-0001")
        )

        assert response.issued_token is not None
        assert response.issued_token != "stale-token-0001"

    @pytest.mark.asyncio
    async def test_provisioning_can_be_disabled(self, unit_env: AsyncContainer):
        """With provisioning off an absent visitor stays absent."""
        use_case = await unit_env.get(ResolveCurrentUserUseCase)

        response = await use_case.execute(
            ResolveCurrentUserRequest(provision_if_absent=False)
        )

        assert response.user is None
        assert response.issued_token is None

    @pytest.mark.asyncio
    async def test_linked_claims_resolve_verified(self, unit_env: AsyncContainer):
        """Linked claims resolve to the linked user, ignoring the token."""
        provisioning = await unit_env.get(ProvisioningService)
        link = await unit_env.get(LinkAccountUseCase)
        use_case = await unit_env.get(ResolveCurrentUserUseCase)
        anonymous = await provisioning.provision()
        other = await provisioning.provision()
        linked = await link.execute(
            LinkAccountRequest(
                anonymous_token=anonymous.public_id.root, claims=make_claims()
            )
        )

        response = await use_case.execute(
            ResolveCurrentUserRequest(
                anonymous_token=other.public_id.root, claims=linked.claims
            )
        )

        assert response.verified is True
        assert response.user.public_id == anonymous.public_id.root

    @pytest.mark.asyncio
    async def test_unlinked_claims_stay_anonymous(self, unit_env: AsyncContainer):
        """Claims not yet linked fall back to the anonymous token."""
        provisioning = await unit_env.get(ProvisioningService)
        use_case = await unit_env.get(ResolveCurrentUserUseCase)
        anonymous = await provisioning.provision()

        response = await use_case.execute(
            ResolveCurrentUserRequest(
                anonymous_token=anonymous.public_id.root, claims=make_claims()
            )
        )

        assert response.verified is False
        assert response.user.public_id == anonymous.public_id.root
        assert response.user.is_anonymous is True
