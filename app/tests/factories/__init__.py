"""Test data factories for deterministic test data generation."""

from tests.factories.localization import (
    make_localization_config,
    make_request_signals,
)
from tests.factories.routing import make_localized_route, make_route

__all__ = [
    "make_localization_config",
    "make_request_signals",
    "make_localized_route",
    "make_route",
]
