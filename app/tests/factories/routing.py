"""Test data factories for localized routing testing."""

from typing import Any, Dict, Optional

from infrastructure.routing import LocalizedRoute, Route


def make_route(
    name: str = "products",
    reverse: str = "/products-list/<name>/<color*>",
    defaults: Optional[Dict[str, Any]] = None,
    **kwargs,
) -> Route:
    """Create a non-localized Route."""
    return Route(name=name, reverse=reverse, defaults=defaults, **kwargs)


def make_localized_route(
    name: str = "products",
    reverse: Optional[Dict[str, str]] = None,
    defaults: Optional[Dict[str, Any]] = None,
    **kwargs,
) -> LocalizedRoute:
    """Create a LocalizedRoute with English and German reverse templates."""
    if reverse is None:
        reverse = {
            "en": "/products-list/<name>/<color*>",
            "de": "/produkt-liste/<name>/<color*>",
        }
    return LocalizedRoute(name=name, reverse=reverse, defaults=defaults, **kwargs)
