"""Localized URL building.

Builds URLs for a route in a target localization:

    Input (params):
        {"name": "cool-product-name", "color": "blue", "variants": ["L", "XL"]}
    Input (reverse):
        "/products-list/<name>/<color*>"
    Output:
        "/products-list/cool-product-name/blue?variants[]=L&variants[]=XL"

The result is either one URL string or, when split, a tuple of the domain
part (scheme, host and base path) and the path with query string.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit

import structlog

from infrastructure.localization.config import LocalizationConfig
from infrastructure.localization.exceptions import ForbiddenDomainParamError
from infrastructure.localization.models import LocaleIdentifier
from infrastructure.routing.reverse import build_query_string, compose_path
from infrastructure.routing.route import FILTER_OUT, Route

logger = structlog.get_logger().bind(component="routing.url_builder")

DOMAIN_PARAM_HOST = "%host%"
DOMAIN_PARAM_DOMAIN = "%domain%"
DOMAIN_PARAM_SLD = "%sld%"
DOMAIN_PARAM_TLD = "%tld%"
DOMAIN_PARAM_BASE_PATH = "%basePath%"

DOMAIN_PARAM_CONSTRAINTS = {
    DOMAIN_PARAM_HOST: re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?(?::\d+)?$"),
    DOMAIN_PARAM_DOMAIN: re.compile(r"^[A-Za-z0-9-]+\.[A-Za-z0-9-]+$"),
    DOMAIN_PARAM_SLD: re.compile(r"^[A-Za-z0-9-]+$"),
    DOMAIN_PARAM_TLD: re.compile(r"^[A-Za-z]{2,63}$"),
    DOMAIN_PARAM_BASE_PATH: re.compile(r"^(?:/[A-Za-z0-9._~%-]+)*$"),
}

UrlResult = Union[str, Tuple[str, str]]


@dataclass(frozen=True)
class UrlRequestContext:
    """Scheme, host and base path of the current request.

    Attributes:
        scheme: URL scheme (e.g. "https").
        host: Host with optional port (e.g. "example.com:8000").
        base_path: Application base path without trailing slash.
    """

    scheme: str = "http"
    host: str = "localhost"
    base_path: str = ""

    @classmethod
    def from_url(cls, url: str) -> "UrlRequestContext":
        """Create a context from an absolute base URL."""
        parts = urlsplit(url)
        return cls(
            scheme=parts.scheme or "http",
            host=parts.netloc or "localhost",
            base_path=parts.path.rstrip("/"),
        )


class UrlBuilder:
    """Builds localized URLs from route reverse data.

    Example:
        builder = UrlBuilder(config)
        builder.build_url(
            LocaleIdentifier("en"),
            route,
            {"name": "cool-product-name", "color": "blue"},
        )
    """

    def __init__(
        self,
        config: LocalizationConfig,
        request_context: Optional[UrlRequestContext] = None,
    ):
        self.config = config
        self.request_context = request_context or UrlRequestContext()

    def build_url(
        self,
        active_localization: Union[LocaleIdentifier, str],
        route: Route,
        params: Optional[Mapping[str, Any]] = None,
        default_params: Optional[Mapping[str, Any]] = None,
        split: bool = False,
        request: Optional[UrlRequestContext] = None,
    ) -> UrlResult:
        """Build a URL for a route.

        Args:
            active_localization: Localization currently active for the request.
            route: Route to build the URL for.
            params: Caller params; a localization param here wins.
            default_params: Current request params (route and query params).
            split: Return (domain part, path and query) instead of one string.
            request: Request context, defaults to the builder's context.

        Returns:
            URL string, or a tuple of two strings when split.

        Raises:
            UnknownLocalizationError: If the route has no reverse data to use.
            ForbiddenDomainParamError: If a domain param value is forbidden.
        """
        param_name = self.config.localization_param_name
        params = dict(params or {})
        default_params = dict(default_params or {})

        default_params_localization = None
        if params.get(param_name) is not None:
            localization_str = str(params.pop(param_name))
        elif default_params.get(param_name) is not None:
            localization_str = str(default_params.pop(param_name))
            default_params_localization = localization_str
        else:
            localization_str = str(active_localization)

        routing_key = self.config.routing_key_for(localization_str)
        reverse_data = route.reverse_data_for(routing_key)
        defaults = dict(reverse_data.defaults)

        # Only params known to the reverse template are taken from defaults,
        # caller params are always kept
        param_names = reverse_data.param_names
        if not param_names:
            all_params = dict(params)
        else:
            empty = dict.fromkeys(param_names)
            merged = {**defaults, **default_params, **params}
            known = {name: value for name, value in merged.items() if name in empty}
            all_params = {**empty, **known, **params}

        localization_contained = param_name in all_params
        all_params[param_name] = localization_str
        filter_defaults = dict(default_params)
        if default_params_localization is not None:
            filter_defaults[param_name] = default_params_localization
        filtered = route.filter_params(all_params, filter_defaults, FILTER_OUT)
        if not localization_contained:
            filtered.pop(param_name, None)

        domain_params = self._pop_domain_params(route, filtered, routing_key)

        result = compose_path(reverse_data.template, filtered, defaults)
        if filtered:
            query = build_query_string(filtered, self.config.query_separator)
            if query:
                separator = self.config.query_separator if "?" in result else "?"
                result = f"{result}{separator}{query}"

        logger.debug(
            "url_built",
            route=route.name,
            localization=localization_str,
            routing_key=routing_key,
        )
        return self._absolute_part_and_split(
            route, result, domain_params, split, request or self.request_context
        )

    def _pop_domain_params(
        self, route: Route, params: Dict[str, Any], routing_key: str
    ) -> Dict[str, str]:
        domain_params = {}
        for name in list(params):
            constraint = DOMAIN_PARAM_CONSTRAINTS.get(name)
            if constraint is None:
                continue
            value = str(params.pop(name))
            if not constraint.match(value):
                raise ForbiddenDomainParamError(
                    f"Forbidden value {value!r} for domain param '{name}' "
                    f"(route: {route.name})",
                    route_name=route.name,
                    localization_key=routing_key,
                )
            domain_params[name] = value
        return domain_params

    def _absolute_part_and_split(
        self,
        route: Route,
        path: str,
        domain_params: Dict[str, str],
        split: bool,
        request: UrlRequestContext,
    ) -> UrlResult:
        base_path = domain_params.get(DOMAIN_PARAM_BASE_PATH, request.base_path)
        host_params = {
            name: value
            for name, value in domain_params.items()
            if name != DOMAIN_PARAM_BASE_PATH
        }
        if route.absolute or host_params:
            host = self._compose_host(request.host, host_params)
            domain_part = f"{request.scheme}://{host}{base_path}"
        else:
            domain_part = base_path
        if split:
            return domain_part, path
        return f"{domain_part}{path}"

    @staticmethod
    def _compose_host(host: str, host_params: Dict[str, str]) -> str:
        if DOMAIN_PARAM_HOST in host_params:
            return host_params[DOMAIN_PARAM_HOST]

        hostname, _, port = host.partition(":")
        labels = hostname.split(".")
        if DOMAIN_PARAM_DOMAIN in host_params:
            labels = labels[:-2] + host_params[DOMAIN_PARAM_DOMAIN].split(".")
        if DOMAIN_PARAM_SLD in host_params:
            if len(labels) >= 2:
                labels[-2] = host_params[DOMAIN_PARAM_SLD]
            else:
                labels.insert(0, host_params[DOMAIN_PARAM_SLD])
        if DOMAIN_PARAM_TLD in host_params:
            if len(labels) >= 2:
                labels[-1] = host_params[DOMAIN_PARAM_TLD]
            else:
                labels.append(host_params[DOMAIN_PARAM_TLD])
        composed = ".".join(labels)
        return f"{composed}:{port}" if port else composed
