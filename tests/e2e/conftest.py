"""Fixtures for end-to-end tests through the HTTP API."""

from typing import Callable

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from claim.config import Settings
from claim.interface.api.app import create_app
from tests.di import build_test_container


@pytest.fixture
def app() -> FastAPI:
    """App wired to a fresh in-memory store."""
    return create_app(container=build_test_container())


@pytest.fixture
def new_browser(app: FastAPI) -> Callable[[], TestClient]:
    """Factory for clients with separate cookie jars over the same app."""
    return lambda: TestClient(app)


@pytest.fixture
def client(new_browser) -> TestClient:
    return new_browser()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def login(settings: Settings):
    """Simulate the upstream identity provider completing an OAuth exchange."""

    def _login(client: TestClient, external_id: str = "google-oauth2|1001", **profile):
        body = {
            "external_id": external_id,
            "email": "alice@example.com",
            "profile_name": "Alice Example",
            "avatar_image": "https://cdn.example.com/alice.png",
        }
        body.update(profile)
        response = client.post(
            "/auth/session",
            json=body,
            headers={"X-Upstream-Secret": settings.auth.upstream_secret},
        )
        assert response.status_code == 200
        return response

    return _login
