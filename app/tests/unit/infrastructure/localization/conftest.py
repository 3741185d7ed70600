"""Fixtures for infrastructure.localization tests."""

import pytest

from infrastructure.localization import LocalizationResolver
from tests.factories.localization import make_localization_config


@pytest.fixture
def resolver_factory():
    """Build a resolver for a config created from keyword overrides."""

    def _factory(**config_kwargs) -> LocalizationResolver:
        return LocalizationResolver(make_localization_config(**config_kwargs))

    return _factory


@pytest.fixture
def resolver(resolver_factory) -> LocalizationResolver:
    """Resolver with default "en" and allowed {en, en-US, de-DE}."""
    return resolver_factory()
