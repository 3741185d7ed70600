"""Localized router facade.

Combines the shared localization configuration, the route registry, the
resolver and the URL builder. The resolved localization is kept in a
context variable for the remainder of the request.
"""

from contextvars import ContextVar
from typing import Any, Dict, Mapping, Optional, Union

import structlog

from infrastructure.localization.config import LocalizationConfig
from infrastructure.localization.exceptions import (
    CompositionError,
    ConfigurationError,
    NonLocalizedRouteError,
)
from infrastructure.localization.models import (
    LocaleIdentifier,
    RequestSignals,
    ResolutionResult,
)
from infrastructure.localization.resolvers import (
    LocalizationResolver,
    redirect_localization_query,
)
from infrastructure.routing.registry import RouteGroupRegistry
from infrastructure.routing.reverse import build_query_string
from infrastructure.routing.route import Route
from infrastructure.routing.url_builder import UrlBuilder, UrlRequestContext, UrlResult

logger = structlog.get_logger().bind(component="routing.router")

_active_resolution: ContextVar[Optional[ResolutionResult]] = ContextVar(
    "active_resolution", default=None
)
_explicit_localization: ContextVar[Optional[LocaleIdentifier]] = ContextVar(
    "explicit_localization", default=None
)


class LocalizedRouter:
    """Entry point for resolving localizations and building localized URLs.

    Example:
        router = LocalizedRouter(config)
        router.registry.add_routes({
            "products": {
                "reverse": {"en": "/products-list/<name>", "de": "/produkt-liste/<name>"},
            },
        })
        router.resolve(RequestSignals(accept_language="de"))
        router.url("products", {"name": "tisch"})  # "/produkt-liste/tisch"
    """

    def __init__(
        self,
        config: LocalizationConfig,
        registry: Optional[RouteGroupRegistry] = None,
        request_context: Optional[UrlRequestContext] = None,
    ):
        self.config = config
        self.registry = registry or RouteGroupRegistry()
        self.resolver = LocalizationResolver(config)
        self.url_builder = UrlBuilder(config, request_context)

    def resolve(self, signals: RequestSignals) -> ResolutionResult:
        """Resolve the request localization and make it the active one."""
        result = self.resolver.resolve(signals)
        _active_resolution.set(result)
        _explicit_localization.set(None)
        return result

    def reset(self) -> None:
        """Forget the active localization of the current context."""
        _active_resolution.set(None)
        _explicit_localization.set(None)

    @property
    def resolution(self) -> Optional[ResolutionResult]:
        return _active_resolution.get()

    def get_localization(self, as_string: bool = False) -> Union[LocaleIdentifier, str]:
        """Return the active localization, or the default before resolution."""
        localization = _explicit_localization.get()
        if localization is None:
            result = _active_resolution.get()
            localization = (
                result.localization
                if result is not None
                else self.config.get_default_localization()
            )
        return str(localization) if as_string else localization

    def set_localization(
        self, language: Optional[str], locale: Optional[str] = None
    ) -> "LocalizedRouter":
        """Set the localization of the current context explicitly.

        The value is not checked against the allowed localizations and wins
        over the resolved one until the next ``resolve`` or ``reset``.

        Args:
            language: Language code.
            locale: Optional locale code.

        Returns:
            Self for chaining.

        Raises:
            ConfigurationError: If no valid language is given.
        """
        if not language:
            raise ConfigurationError(
                "Localization must be defined at least by the language"
            )
        try:
            localization = LocaleIdentifier(language=language, locale=locale)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid localization: {language!r}, {locale!r}",
                localization_key=language,
            ) from e
        _explicit_localization.set(localization)
        return self

    def routes_for_group(self, group_name: Optional[str] = None) -> Dict[str, Route]:
        """Return candidate routes for the active localization.

        Localized routes of ``"<routing key>/<group>"`` come first, then the
        routes of the plain group key. Non-localized routes are left out
        when they are disallowed.

        Args:
            group_name: Group name, None for ungrouped routes.

        Returns:
            Ordered mapping of route name to Route.
        """
        include_non_localized = self.config.allow_non_localized_routes
        if group_name is None:
            return self.registry.routes_for_group("", include_non_localized)
        routing_key = self.config.routing_key_for(self.get_localization())
        routes = self.registry.routes_for_group(f"{routing_key}/{group_name}")
        for name, route in self.registry.routes_for_group(
            group_name, include_non_localized
        ).items():
            routes.setdefault(name, route)
        return routes

    def url(
        self,
        name_or_route: Union[str, Route],
        params: Optional[Mapping[str, Any]] = None,
        default_params: Optional[Mapping[str, Any]] = None,
        split: bool = False,
        request: Optional[UrlRequestContext] = None,
    ) -> UrlResult:
        """Build a URL by route name, controller action or route instance.

        Raises:
            CompositionError: If no route is registered under the name.
            NonLocalizedRouteError: If the route is not localized while
                non-localized routes are disallowed.
        """
        if isinstance(name_or_route, Route):
            route = name_or_route
        else:
            route = self.registry.get_route(name_or_route)
            if route is None:
                raise CompositionError(
                    f"No route found for name or controller action '{name_or_route}'",
                    route_name=name_or_route,
                )
        if not route.localized and not self.config.allow_non_localized_routes:
            raise NonLocalizedRouteError(
                f"Route '{route.name}' is not localized and non-localized "
                "routes are not allowed",
                route_name=route.name,
            )
        return self.url_builder.build_url(
            self.get_localization(), route, params, default_params, split, request
        )

    def redirect_url(
        self,
        path: str,
        query_params: Mapping[str, str],
        target: LocaleIdentifier,
    ) -> Optional[str]:
        """Build the redirect target for a localization redirect.

        The localized route producing ``path`` is looked up and its URL is
        built again in the target localization, keeping the path params and
        the query string. A localization query param is updated (or dropped
        for the default localization).

        Args:
            path: Original request path.
            query_params: Original request query params.
            target: Localization to redirect to.

        Returns:
            Path with query string, or None when no localized route owns
            the path.
        """
        param_name = self.config.localization_param_name
        default_str = self.config.get_default_localization(as_string=True)
        query, url_value = redirect_localization_query(
            query_params, target, default_str, param_name
        )

        matched = self.registry.find_route_by_path(path, include_non_localized=False)
        if matched is None:
            logger.debug("localization_redirect_skipped", path=path, target=str(target))
            return None
        route, _, path_params = matched

        params: Dict[str, Any] = {
            name: value for name, value in query.items() if name != param_name
        }
        params.update(path_params)
        params[param_name] = str(target)
        location = self.url_builder.build_url(target, route, params)
        if url_value is None and param_name in query:
            localization_query = build_query_string(
                {param_name: query[param_name]}, self.config.query_separator
            )
            separator = self.config.query_separator if "?" in location else "?"
            location = f"{location}{separator}{localization_query}"

        logger.info(
            "localization_redirect", target=str(target), path=path, location=location
        )
        return location
