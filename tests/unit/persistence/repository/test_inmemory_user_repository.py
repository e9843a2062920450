"""Unit tests for InMemoryUserRepository.

The in-memory store stands in for the database in most tests, so it must
enforce the same uniqueness and conditional-write rules.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from claim.domain.error import DuplicateExternalIdError, DuplicatePublicIdError
from claim.domain.value import ExternalId
from claim.persistence.deadline import store_deadline
from claim.persistence.error import StorageTimeoutError, StorageUnavailableError
from claim.persistence.repository.inmemory import InMemoryUserRepository
from tests.conftest import make_anonymous_user, make_identity


class TestUniqueness:
    """Tests for identifier uniqueness."""

    @pytest.mark.asyncio
    async def test_insert_duplicate_public_id_rejected(self):
        """Two users cannot share a public ID."""
        repo = InMemoryUserRepository()
        await repo.insert(make_anonymous_user(public_id="same-public-id"))

        with pytest.raises(DuplicatePublicIdError):
            await repo.insert(make_anonymous_user(public_id="same-public-id"))

    @pytest.mark.asyncio
    async def test_insert_duplicate_external_id_rejected(self):
        """Two users cannot be linked to the same external identity."""
        repo = InMemoryUserRepository()
        now = datetime.now(timezone.utc)
        await repo.insert(make_anonymous_user().link(make_identity(), now))

        with pytest.raises(DuplicateExternalIdError):
            await repo.insert(make_anonymous_user().link(make_identity(), now))


class TestLinkIfAnonymous:
    """Tests for the conditional link write."""

    @pytest.mark.asyncio
    async def test_links_anonymous_user(self):
        """An anonymous user is promoted and indexed by external ID."""
        repo = InMemoryUserRepository()
        user = make_anonymous_user()
        repo.add(user)

        linked = await repo.link_if_anonymous(
            user.id, make_identity(), datetime.now(timezone.utc)
        )

        assert linked is not None
        assert linked.is_anonymous is False
        assert await repo.find_by_external_id(ExternalId("google-oauth2|1001")) == linked

    @pytest.mark.asyncio
    async def test_already_linked_user_not_matched(self):
        """A second link of the same user matches nothing."""
        repo = InMemoryUserRepository()
        user = make_anonymous_user()
        repo.add(user)
        await repo.link_if_anonymous(user.id, make_identity(), datetime.now(timezone.utc))

        result = await repo.link_if_anonymous(
            user.id, make_identity("github|9"), datetime.now(timezone.utc)
        )

        assert result is None
        assert await repo.find_by_external_id(ExternalId("github|9")) is None

    @pytest.mark.asyncio
    async def test_taken_external_id_rejected(self):
        """Linking to an external ID held by another user is a duplicate."""
        repo = InMemoryUserRepository()
        first = make_anonymous_user()
        second = make_anonymous_user()
        repo.add(first)
        repo.add(second)
        await repo.link_if_anonymous(first.id, make_identity(), datetime.now(timezone.utc))

        with pytest.raises(DuplicateExternalIdError):
            await repo.link_if_anonymous(
                second.id, make_identity(), datetime.now(timezone.utc)
            )

        assert (await repo.find_by_id(second.id)).is_anonymous is True

    @pytest.mark.asyncio
    async def test_racing_links_of_one_user_apply_once(self):
        """Concurrent links of the same user: one applies, the rest match nothing."""
        repo = InMemoryUserRepository(latency=0.001)
        user = make_anonymous_user()
        repo.add(user)
        now = datetime.now(timezone.utc)

        results = await asyncio.gather(
            repo.link_if_anonymous(user.id, make_identity(), now),
            repo.link_if_anonymous(user.id, make_identity("github|5"), now),
        )

        assert sum(1 for r in results if r is not None) == 1


class TestFailureInjection:
    """Tests for simulated store failures."""

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Latency beyond the timeout raises StorageTimeoutError."""
        repo = InMemoryUserRepository(latency=0.2, timeout=0.01)

        with pytest.raises(StorageTimeoutError) as exc_info:
            await repo.insert(make_anonymous_user())

        assert exc_info.value.operation == "insert"

    @pytest.mark.asyncio
    async def test_timed_out_insert_leaves_no_record(self):
        """A timed-out operation has no partial effect."""
        repo = InMemoryUserRepository(latency=0.2, timeout=0.01)
        user = make_anonymous_user()

        with pytest.raises(StorageTimeoutError):
            await repo.insert(user)

        repo.timeout = None
        repo.latency = 0.0
        assert await repo.find_by_id(user.id) is None

    @pytest.mark.asyncio
    async def test_unavailable(self):
        """An unavailable store fails every operation."""
        repo = InMemoryUserRepository(unavailable=True)

        with pytest.raises(StorageUnavailableError):
            await repo.find_by_external_id(ExternalId("google-oauth2|1001"))

    @pytest.mark.asyncio
    async def test_caller_deadline_aborts_operation(self):
        """A caller deadline tighter than the store's own bound wins."""
        repo = InMemoryUserRepository(latency=0.2)
        user = make_anonymous_user()

        with pytest.raises(StorageTimeoutError) as exc_info:
            with store_deadline(0.01):
                await repo.insert(user)

        assert exc_info.value.timeout <= 0.01
        repo.latency = 0.0
        assert await repo.find_by_id(user.id) is None
