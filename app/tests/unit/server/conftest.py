"""Fixtures for server module unit tests."""

import pytest
from fastapi.testclient import TestClient

from infrastructure.routing import LocalizedRouter
from server.server import create_app
from tests.factories.localization import make_localization_config


@pytest.fixture
def app_router_factory():
    """Build a localized router for a config created from keyword overrides."""

    def _factory(**config_kwargs) -> LocalizedRouter:
        config = make_localization_config(**config_kwargs)
        config.freeze()
        return LocalizedRouter(config)

    return _factory


@pytest.fixture
def client_factory(app_router_factory):
    """Build a TestClient for an app using a fresh localized router."""

    def _factory(**config_kwargs) -> TestClient:
        app = create_app(app_router_factory(**config_kwargs))
        return TestClient(app)

    return _factory


@pytest.fixture
def client(client_factory) -> TestClient:
    """Client for an app without first request redirects."""
    return client_factory()
