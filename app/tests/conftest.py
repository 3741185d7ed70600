"""Top-level fixtures shared by all test packages."""

import pytest

from infrastructure.localization import LocalizationConfig
from infrastructure.routing import LocalizedRouter, RouteGroupRegistry, UrlBuilder
from tests.factories.localization import make_localization_config


@pytest.fixture
def localization_config() -> LocalizationConfig:
    """Config with default "en" and allowed {en, en-US, de-DE}."""
    return make_localization_config()


@pytest.fixture
def route_registry() -> RouteGroupRegistry:
    """Empty route registry."""
    return RouteGroupRegistry()


@pytest.fixture
def url_builder(localization_config) -> UrlBuilder:
    """URL builder using the shared localization config."""
    return UrlBuilder(localization_config)


@pytest.fixture
def localized_router(localization_config):
    """Localized router; the active localization is reset afterwards."""
    router = LocalizedRouter(localization_config)
    yield router
    router.reset()
