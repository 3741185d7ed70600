"""Unit tests for infrastructure.routing.route module.

Tests cover:
- Route identity and configuration errors
- LocalizedRoute per-locale data and key fallback
- Reverse data caching per routing key
- Params filters
- create_route() dispatch
"""

import threading
from unittest.mock import patch

import pytest

from infrastructure.localization import (
    ConfigurationError,
    ReverseTemplateError,
    UnknownLocalizationError,
)
from infrastructure.routing import route as route_module
from infrastructure.routing.fields import PerLocale
from infrastructure.routing.route import (
    FILTER_IN,
    FILTER_OUT,
    LocalizedRoute,
    Route,
    create_route,
)
from tests.factories.routing import make_localized_route, make_route


@pytest.mark.unit
class TestRoute:
    """Test suite for non-localized routes."""

    def test_name_defaults_to_controller_action(self):
        """Routes without a name are named by their controller action."""
        route = Route(controller_action="Products:list", pattern="/products")
        assert route.name == "Products:list"

    def test_missing_name_and_controller_action_raises(self):
        """Routes need a name or a controller action."""
        with pytest.raises(ConfigurationError):
            Route(pattern="/products")

    def test_reverse_falls_back_to_pattern(self):
        """The pattern is used when no reverse is configured."""
        route = Route(name="home", pattern="/home[/<page>]")
        assert route.reverse_data_for().reverse == "/home[/<page>]"

    def test_reverse_data_keeps_defaults(self):
        """Reverse data carries the route defaults."""
        route = make_route(defaults={"color": "red"})
        data = route.reverse_data_for()
        assert data.param_names == ("name", "color")
        assert data.defaults == {"color": "red"}

    def test_missing_reverse_raises(self):
        """Routes without pattern or reverse cannot build URLs."""
        route = Route(name="broken")
        with pytest.raises(ReverseTemplateError) as exc_info:
            route.reverse_data_for()
        assert exc_info.value.route_name == "broken"

    def test_invalid_reverse_names_route(self):
        """Template errors mention the route."""
        route = Route(name="broken", reverse="/<name")
        with pytest.raises(ReverseTemplateError, match="broken"):
            route.reverse_data_for()

    def test_filter_params_out(self):
        """The outgoing filter receives params and request defaults."""
        calls = []

        def out_filter(params, defaults):
            calls.append(defaults)
            return {**params, "name": params["name"].lower()}

        route = make_route(filters={FILTER_OUT: out_filter})
        result = route.filter_params({"name": "Table", "color": None}, {"page": 2})
        assert result == {"name": "table"}
        assert calls == [{"page": 2}]

    def test_filter_direction(self):
        """Only the filter of the requested direction runs."""
        route = make_route(filters={FILTER_IN: lambda params, defaults: {}})
        assert route.filter_params({"a": 1}, direction=FILTER_OUT) == {"a": 1}
        assert route.filter_params({"a": 1}, direction=FILTER_IN) == {}


@pytest.mark.unit
class TestLocalizedRoute:
    """Test suite for localized routes."""

    def test_requires_localized_field(self):
        """A localized route needs at least one per-locale field."""
        with pytest.raises(ConfigurationError):
            LocalizedRoute(name="products", reverse="/products")

    def test_reverse_per_locale(self):
        """Each routing key has its own reverse template."""
        route = make_localized_route()
        assert route.reverse_data_for("de").reverse == "/produkt-liste/<name>/<color*>"
        assert route.reverse_data_for("en").reverse == "/products-list/<name>/<color*>"

    def test_unknown_key_uses_first_key(self):
        """Unknown routing keys deterministically use the first key."""
        route = make_localized_route()
        assert route.reverse_data_for("fr").reverse == "/products-list/<name>/<color*>"
        assert route.get_reverse("fr") == "/products-list/<name>/<color*>"

    def test_shared_defaults_apply_to_every_key(self):
        """Scalar defaults are used for every locale key."""
        route = make_localized_route(defaults={"color": "red"})
        assert route.get_defaults("en") == {"color": "red"}
        assert route.get_defaults("de") == {"color": "red"}

    def test_per_locale_defaults(self):
        """Defaults keyed by locale are used per key."""
        route = make_localized_route(
            defaults={"en": {"color": "red"}, "de": {"color": "rot"}}
        )
        assert route.get_defaults("de") == {"color": "rot"}
        assert route.reverse_data_for("en").defaults == {"color": "red"}

    def test_locale_keys_from_all_fields(self):
        """Locale keys are collected from pattern, match and reverse."""
        route = LocalizedRoute(
            name="products",
            pattern={"en": "/products"},
            reverse={"de": "/produkte"},
        )
        assert route.locale_keys() == ["en", "de"]

    def test_no_locale_data_raises(self):
        """A route without keys cannot resolve a localization."""
        route = make_localized_route()
        route.reverse = PerLocale({})
        route.pattern = PerLocale({})
        route.match = PerLocale({})
        with pytest.raises(UnknownLocalizationError):
            route.reverse_data_for("en")


@pytest.mark.unit
class TestReverseDataCache:
    """Test suite for per-key reverse data caching."""

    def test_parsed_once_per_key(self):
        """Templates are parsed once per routing key."""
        route = make_localized_route()
        with patch.object(
            route_module,
            "parse_reverse_template",
            wraps=route_module.parse_reverse_template,
        ) as parse:
            first = route.reverse_data_for("en")
            second = route.reverse_data_for("en")
            route.reverse_data_for("de")

        assert first is second
        assert parse.call_count == 2

    def test_fallback_key_shares_cache(self):
        """Unknown keys reuse the fallback key's cached data."""
        route = make_localized_route()
        assert route.reverse_data_for("fr") is route.reverse_data_for("en")

    def test_concurrent_first_access(self):
        """Concurrent first access yields a single cached instance."""
        route = make_localized_route()
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(route.reverse_data_for("de"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result is results[0] for result in results)


@pytest.mark.unit
class TestCreateRoute:
    """Test suite for create_route()."""

    def test_route_instance_passes_through(self):
        """Route instances are returned unchanged."""
        route = make_route()
        assert create_route(route) is route

    def test_localized_config(self):
        """Configs with per-locale fields create LocalizedRoute."""
        route = create_route({"name": "p", "reverse": {"en": "/p"}})
        assert isinstance(route, LocalizedRoute)

    def test_plain_config(self):
        """Other configs create Route."""
        route = create_route({"name": "p", "pattern": "/p"})
        assert type(route) is Route

    def test_route_factory(self):
        """A route factory replaces the default dispatch."""

        class CustomRoute(Route):
            pass

        route = create_route({"name": "p", "pattern": "/p"}, CustomRoute.from_config)
        assert isinstance(route, CustomRoute)
