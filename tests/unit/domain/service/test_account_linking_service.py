"""Unit tests for AccountLinkingService."""

import asyncio
from datetime import datetime, timezone

import pytest

from claim.domain.error import DuplicateExternalIdError, LinkingConflictError
from claim.domain.service import AccountLinkingService
from claim.domain.value import ExternalId
from claim.persistence.deadline import store_deadline
from claim.persistence.error import StorageTimeoutError
from claim.persistence.repository.inmemory import InMemoryUserRepository
from tests.conftest import make_anonymous_user, make_identity


@pytest.fixture
def repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def service(repo: InMemoryUserRepository) -> AccountLinkingService:
    return AccountLinkingService(user_repository=repo)


class TestUpgrade:
    """Tests for AccountLinkingService.upgrade()."""

    @pytest.mark.asyncio
    async def test_upgrade_links_anonymous_user_in_place(self, repo, service):
        """First login: the anonymous record itself becomes the linked record."""
        anonymous = make_anonymous_user(display_name="Clever Fox 88")
        repo.add(anonymous)

        linked = await service.upgrade(anonymous, make_identity())

        assert linked is not None
        assert linked.id == anonymous.id
        assert linked.public_id == anonymous.public_id
        assert linked.display_name.root == "Clever Fox 88"  # Not "Alice Example"
        assert linked.email == "alice@example.com"
        assert linked.is_anonymous is False
        assert linked.updated_at >= anonymous.updated_at
        assert await repo.find_by_public_id(anonymous.public_id) == linked

    @pytest.mark.asyncio
    async def test_upgrade_without_user_is_noop(self, service):
        """No anonymous user means nothing to do."""
        assert await service.upgrade(None, make_identity()) is None

    @pytest.mark.asyncio
    async def test_upgrade_of_linked_user_is_noop(self, repo, service):
        """An already linked user is not an upgrade candidate."""
        linked = make_anonymous_user().link(make_identity(), datetime.now(timezone.utc))
        repo.add(linked)

        assert await service.upgrade(linked, make_identity("github|7")) is None

    @pytest.mark.asyncio
    async def test_upgrade_is_idempotent(self, repo, service):
        """Upgrading the same pair twice yields the same record."""
        anonymous = make_anonymous_user()
        repo.add(anonymous)

        first = await service.upgrade(anonymous, make_identity())
        second = await service.upgrade(anonymous, make_identity())

        assert first == second

    @pytest.mark.asyncio
    async def test_returning_user_on_new_device_keeps_new_anonymous_user(
        self, repo, service
    ):
        """Second device: the existing linked record wins, the new one is untouched."""
        first_device = make_anonymous_user()
        repo.add(first_device)
        linked = await service.upgrade(first_device, make_identity())

        second_device = make_anonymous_user()
        repo.add(second_device)
        result = await service.upgrade(second_device, make_identity())

        assert result == linked
        assert await repo.find_by_public_id(second_device.public_id) == second_device

    @pytest.mark.asyncio
    async def test_concurrent_upgrades_link_exactly_one(self, repo, service):
        """Two browsers racing to link the same identity end with one linked record."""
        p3 = make_anonymous_user()
        p4 = make_anonymous_user()
        repo.add(p3)
        repo.add(p4)

        results = await asyncio.gather(
            service.upgrade(p3, make_identity()),
            service.upgrade(p4, make_identity()),
        )

        winner = await repo.find_by_external_id(ExternalId("google-oauth2|1001"))
        assert winner is not None
        assert winner.id in {p3.id, p4.id}
        assert results[0] == winner
        assert results[1] == winner

        loser_id = p4.public_id if winner.id == p3.id else p3.public_id
        loser = await repo.find_by_public_id(loser_id)
        assert loser.is_anonymous is True

    @pytest.mark.asyncio
    async def test_many_concurrent_upgrades_link_exactly_one(self, repo, service):
        """Any number of racing upgrades agree on a single winner."""
        users = [make_anonymous_user() for _ in range(10)]
        for user in users:
            repo.add(user)

        results = await asyncio.gather(
            *(service.upgrade(user, make_identity()) for user in users)
        )

        assert len({r.id for r in results}) == 1
        remaining = [
            await repo.find_by_public_id(user.public_id) for user in users
        ]
        assert sum(1 for u in remaining if not u.is_anonymous) == 1

    @pytest.mark.asyncio
    async def test_upgrade_of_deleted_user_raises_conflict(self, service):
        """If the conditional write matches nothing and no winner exists, report a conflict."""
        ghost = make_anonymous_user()  # Never stored

        with pytest.raises(LinkingConflictError) as exc_info:
            await service.upgrade(ghost, make_identity())

        assert exc_info.value.external_id == "google-oauth2|1001"

    @pytest.mark.asyncio
    async def test_duplicate_without_winner_raises_conflict(self):
        """A rejected link whose holder cannot be found on re-check is a conflict."""
        repo = UnfindableHolderRepository()
        service = AccountLinkingService(user_repository=repo)
        anonymous = make_anonymous_user()
        repo.add(anonymous)

        with pytest.raises(LinkingConflictError) as exc_info:
            await service.upgrade(anonymous, make_identity())

        assert exc_info.value.external_id == "google-oauth2|1001"
        assert repo.external_id_lookups == 2

    @pytest.mark.asyncio
    async def test_caller_deadline_surfaces_storage_timeout(self, repo, service):
        """A caller deadline aborts the upgrade without a partial link."""
        anonymous = make_anonymous_user()
        repo.add(anonymous)
        repo.latency = 0.2

        with pytest.raises(StorageTimeoutError):
            with store_deadline(0.01):
                await service.upgrade(anonymous, make_identity())

        repo.latency = 0.0
        stored = await repo.find_by_public_id(anonymous.public_id)
        assert stored.is_anonymous is True
        assert stored.external_id is None


class UnfindableHolderRepository(InMemoryUserRepository):
    """Store where the external ID is taken by a user no lookup can see."""

    def __init__(self) -> None:
        super().__init__()
        self.external_id_lookups = 0

    async def find_by_external_id(self, external_id):
        self.external_id_lookups += 1
        return None

    async def link_if_anonymous(self, user_id, identity, linked_at):
        raise DuplicateExternalIdError(identity.external_id.root)
