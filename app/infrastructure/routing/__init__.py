"""Localized routing - route grouping and localized URL building.

Main components:
- fields: Scalar / PerLocale route fields
- reverse: reverse template parsing, path and query composition
- route: Route and LocalizedRoute with cached reverse data
- registry: RouteGroupRegistry grouping routes by localization and group
- url_builder: UrlBuilder producing localized URLs
- router: LocalizedRouter facade
"""

from infrastructure.routing.fields import PerLocale, Scalar, route_field
from infrastructure.routing.registry import RouteGroupRegistry, group_keys_for
from infrastructure.routing.reverse import (
    ReverseTemplate,
    build_query_string,
    compose_path,
    match_path,
    parse_reverse_template,
)
from infrastructure.routing.route import (
    FILTER_IN,
    FILTER_OUT,
    LocalizedRoute,
    ReverseData,
    Route,
    create_route,
)
from infrastructure.routing.router import LocalizedRouter
from infrastructure.routing.url_builder import UrlBuilder, UrlRequestContext

__all__ = [
    "Scalar",
    "PerLocale",
    "route_field",
    "ReverseTemplate",
    "parse_reverse_template",
    "compose_path",
    "match_path",
    "build_query_string",
    "Route",
    "LocalizedRoute",
    "ReverseData",
    "create_route",
    "FILTER_IN",
    "FILTER_OUT",
    "RouteGroupRegistry",
    "group_keys_for",
    "UrlBuilder",
    "UrlRequestContext",
    "LocalizedRouter",
]
