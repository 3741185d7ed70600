"""Route entities with localized reverse data.

``Route`` carries a single pattern/match/reverse; ``LocalizedRoute`` carries
them per routing locale key (bare language or language-locale). Parsed
reverse templates are cached per key for the lifetime of the route.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import structlog

from infrastructure.localization.exceptions import (
    ConfigurationError,
    ReverseTemplateError,
    UnknownLocalizationError,
)
from infrastructure.routing.fields import (
    PerLocale,
    RouteField,
    Scalar,
    is_localized,
    is_route_config_localized,
    route_field,
)
from infrastructure.routing.reverse import (
    ReverseSection,
    ReverseTemplate,
    parse_reverse_template,
)

logger = structlog.get_logger().bind(component="routing.route")

FILTER_IN = "in"
FILTER_OUT = "out"

ParamsFilter = Callable[[Dict[str, Any], Dict[str, Any]], Dict[str, Any]]
GroupName = Union[str, Dict[str, str], None]

_NON_LOCALIZED_KEY = ""


@dataclass(frozen=True)
class ReverseData:
    """Reverse data of a route for one routing locale key."""

    template: ReverseTemplate
    defaults: Mapping[str, Any] = field(default_factory=dict)

    @property
    def reverse(self) -> str:
        return self.template.template

    @property
    def sections(self) -> Tuple[ReverseSection, ...]:
        return self.template.sections

    @property
    def param_names(self) -> Tuple[str, ...]:
        return self.template.param_names


class Route:
    """Non-localized route.

    Attributes:
        name: Unique route name, defaults to the controller action.
        controller_action: "Controller:action" identity, ":" when unset.
        absolute: Always build absolute URLs (scheme and host).
    """

    localized = False

    def __init__(
        self,
        name: Optional[str] = None,
        controller_action: Optional[str] = None,
        pattern: Any = None,
        match: Any = None,
        reverse: Any = None,
        defaults: Optional[Mapping[str, Any]] = None,
        group_name: GroupName = None,
        filters: Optional[Mapping[str, ParamsFilter]] = None,
        absolute: bool = False,
    ):
        self.controller_action = controller_action or ":"
        self.name = name or (
            self.controller_action if self.controller_action != ":" else None
        )
        if not self.name:
            raise ConfigurationError(
                "Route must be defined with a name or a controller action"
            )
        self.pattern: RouteField = route_field(pattern)
        self.match: RouteField = route_field(match)
        self.reverse: RouteField = route_field(reverse)
        self.filters: Dict[str, ParamsFilter] = dict(filters or {})
        self.absolute = absolute
        self.group_name: GroupName = group_name
        self._init_defaults(defaults)
        self._reverse_cache: Dict[str, ReverseData] = {}
        self._reverse_lock = threading.Lock()

    def _init_defaults(self, defaults: Optional[Mapping[str, Any]]) -> None:
        self.defaults: RouteField = Scalar(dict(defaults or {}))

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Route":
        """Create a route from a configuration mapping.

        Args:
            config: Mapping with route constructor keys.

        Returns:
            Route instance.
        """
        return cls(**dict(config))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def locale_keys(self) -> List[str]:
        return []

    def set_group_name(self, group_name: GroupName) -> None:
        self.group_name = group_name

    def get_pattern(self, key: Optional[str] = None) -> Optional[str]:
        return self.pattern.get(self._resolve_key(key))

    def get_match(self, key: Optional[str] = None) -> Optional[str]:
        return self.match.get(self._resolve_key(key))

    def get_reverse(self, key: Optional[str] = None) -> Optional[str]:
        return self.reverse.get(self._resolve_key(key))

    def get_defaults(self, key: Optional[str] = None) -> Dict[str, Any]:
        return dict(self.defaults.get(self._resolve_key(key)) or {})

    def _resolve_key(self, key: Optional[str]) -> str:
        return _NON_LOCALIZED_KEY

    def reverse_data_for(self, key: Optional[str] = None) -> ReverseData:
        """Return reverse data for a routing locale key, parsing it once.

        Args:
            key: Routing locale key, ignored for non-localized routes.

        Returns:
            ReverseData for the key, or for the fallback key.

        Raises:
            UnknownLocalizationError: If the route has no localized data.
            ReverseTemplateError: If the route has no valid reverse template.
        """
        resolved = self._resolve_key(key)
        data = self._reverse_cache.get(resolved)
        if data is not None:
            return data
        with self._reverse_lock:
            data = self._reverse_cache.get(resolved)
            if data is None:
                data = self._build_reverse_data(resolved)
                self._reverse_cache[resolved] = data
        return data

    def _build_reverse_data(self, key: str) -> ReverseData:
        template = self.reverse.get(key) or self.pattern.get(key)
        if not template:
            raise ReverseTemplateError(
                f"Route '{self.name}' has no reverse template",
                route_name=self.name,
                localization_key=key or None,
            )
        try:
            parsed = parse_reverse_template(template)
        except ReverseTemplateError as e:
            raise ReverseTemplateError(
                f"{e} (route: {self.name})",
                route_name=self.name,
                localization_key=key or None,
            ) from e
        logger.debug(
            "reverse_template_parsed",
            route=self.name,
            routing_key=key,
            params=list(parsed.param_names),
        )
        return ReverseData(template=parsed, defaults=self.get_defaults(key))

    def filter_params(
        self,
        params: Mapping[str, Any],
        default_params: Optional[Mapping[str, Any]] = None,
        direction: str = FILTER_OUT,
    ) -> Dict[str, Any]:
        """Run the configured params filter and drop unset values.

        Args:
            params: Params to filter.
            default_params: Current request params, passed to the filter.
            direction: FILTER_IN when matching, FILTER_OUT when building URLs.

        Returns:
            Filtered params without None values.
        """
        filtered = dict(params)
        handler = self.filters.get(direction)
        if handler is not None:
            filtered = dict(handler(filtered, dict(default_params or {})))
        return {name: value for name, value in filtered.items() if value is not None}


class LocalizedRoute(Route):
    """Route with pattern, match, reverse and defaults per routing locale key.

    Example:
        route = LocalizedRoute(
            name="products",
            reverse={
                "en": "/products-list/<name>",
                "de": "/produkt-liste/<name>",
            },
        )
        route.reverse_data_for("de").reverse  # "/produkt-liste/<name>"
    """

    localized = True

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not is_localized(self.pattern, self.match, self.reverse):
            raise ConfigurationError(
                f"Localized route '{self.name}' needs a localized pattern, "
                "match or reverse",
                route_name=self.name,
            )

    def _init_defaults(self, defaults: Optional[Mapping[str, Any]]) -> None:
        keys = self._collect_locale_keys()
        if isinstance(defaults, PerLocale):
            self.defaults = defaults
        elif (
            defaults
            and set(defaults).issubset(keys)
            and all(isinstance(value, Mapping) for value in defaults.values())
        ):
            self.defaults = PerLocale({k: dict(v) for k, v in defaults.items()})
        else:
            # Shared defaults apply to every localization
            self.defaults = PerLocale({k: dict(defaults or {}) for k in keys})

    def _collect_locale_keys(self) -> List[str]:
        keys: Dict[str, None] = {}
        for item in (self.pattern, self.match, self.reverse):
            if isinstance(item, PerLocale):
                for key in item.keys():
                    keys[key] = None
        return list(keys)

    def locale_keys(self) -> List[str]:
        return self._collect_locale_keys()

    def _resolve_key(self, key: Optional[str]) -> str:
        keys = self.locale_keys()
        if key in keys:
            return key
        if not keys:
            raise UnknownLocalizationError(
                f"Route '{self.name}' has no data for localization '{key}'",
                route_name=self.name,
                localization_key=key,
            )
        # Unknown keys deterministically use the first configured localization
        return keys[0]


def create_route(
    config_or_route: Union[Route, Mapping[str, Any]],
    route_factory: Optional[Callable[[Mapping[str, Any]], Route]] = None,
) -> Route:
    """Create a route from configuration, or return a route unchanged.

    Args:
        config_or_route: Route instance or route configuration mapping.
        route_factory: Factory used for every config in the batch instead
            of picking Route or LocalizedRoute from the config shape.

    Returns:
        Route instance.
    """
    if isinstance(config_or_route, Route):
        return config_or_route
    if route_factory is not None:
        return route_factory(config_or_route)
    if is_route_config_localized(config_or_route):
        return LocalizedRoute.from_config(config_or_route)
    return Route.from_config(config_or_route)
