"""Unit tests for infrastructure.routing.fields module."""

import pytest

from infrastructure.routing.fields import (
    PerLocale,
    Scalar,
    is_localized,
    is_route_config_localized,
    route_field,
)


@pytest.mark.unit
class TestRouteField:
    """Test suite for route field coercion."""

    def test_scalar_value(self):
        """Plain values become Scalar fields shared by every key."""
        field = route_field("/products")
        assert isinstance(field, Scalar)
        assert field.get("de") == "/products"

    def test_mapping_value(self):
        """Mappings become PerLocale fields in configuration order."""
        field = route_field({"en": "/products", "de": "/produkte"})
        assert isinstance(field, PerLocale)
        assert field.get("de") == "/produkte"
        assert field.get("fr") is None
        assert field.first_key() == "en"
        assert list(field.keys()) == ["en", "de"]

    def test_existing_field_is_kept(self):
        """Route fields pass through unchanged."""
        field = PerLocale({"en": "/x"})
        assert route_field(field) is field

    def test_is_localized(self):
        """Any PerLocale field makes the set localized."""
        assert is_localized(Scalar(None), PerLocale({"en": "/"})) is True
        assert is_localized(Scalar("/"), Scalar(None)) is False

    def test_is_route_config_localized(self):
        """Configs with a mapping pattern, match or reverse are localized."""
        assert is_route_config_localized({"reverse": {"en": "/"}}) is True
        assert is_route_config_localized({"pattern": "/", "defaults": {"a": 1}}) is False
