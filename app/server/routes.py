"""Application route table.

Localized routes carry one reverse template per language; the registry
groups them per language for matching and the router builds URLs from them.
"""

from infrastructure.routing import LocalizedRouter

ROUTES = {
    "home": {
        "controller_action": "Index:index",
        "pattern": "/",
    },
    "products": {
        "controller_action": "Products:list",
        "pattern": {
            "en": "/<localization>/products-list[/<page>]",
            "de": "/<localization>/produkt-liste[/<page>]",
        },
        "defaults": {"page": 1},
        "group_name": {"en": "catalog", "de": "catalog"},
    },
    "product_detail": {
        "controller_action": "Products:detail",
        "pattern": {
            "en": "/<localization>/products-list/<name>/<color*>",
            "de": "/<localization>/produkt-liste/<name>/<color*>",
        },
        "group_name": {"en": "catalog", "de": "catalog"},
    },
}


def register_routes(router: LocalizedRouter) -> None:
    """Register the application routes, replacing any existing table."""
    router.registry.set_routes(ROUTES)
