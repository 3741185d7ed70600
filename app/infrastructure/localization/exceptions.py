"""Custom exceptions for localization and localized routing.

Configuration errors are raised while the application is being set up
(default localization, allowed set, route registration). Composition errors
are raised while building URLs. Resolution never raises: malformed request
values silently fall through to the next source.
"""

from typing import Optional


class LocalizationError(Exception):
    """Base exception for all localization-related errors.

    Attributes:
        route_name: Name of the route involved, if any.
        localization_key: Localization or routing key involved, if any.
    """

    def __init__(
        self,
        message: str,
        route_name: Optional[str] = None,
        localization_key: Optional[str] = None,
    ):
        """Initialize with message and optional diagnostic context.

        Args:
            message: Error message
            route_name: Route name the error relates to
            localization_key: Localization string or routing key involved
        """
        super().__init__(message)
        self.route_name = route_name
        self.localization_key = localization_key


class ConfigurationError(LocalizationError):
    """Raised for invalid configuration at setup or registration time.

    Example:
        >>> config.set_default_localization("")
        Traceback (most recent call last):
        ...
        ConfigurationError: Default localization must be defined at least by the language
    """

    pass


class DuplicateRouteError(ConfigurationError):
    """Raised when a route name or controller:action is registered twice."""

    pass


class RouteGroupMismatchError(ConfigurationError):
    """Raised when group names do not fit the route's localization shape.

    Per-locale group names require a localized route, and a route which
    already carries per-locale group names cannot get a single group name.
    """

    pass


class CompositionError(LocalizationError):
    """Raised when a URL cannot be composed. No partial URL is returned."""

    pass


class UnknownLocalizationError(CompositionError):
    """Raised when a route has no reverse data for a localization and no fallback."""

    pass


class ForbiddenDomainParamError(CompositionError):
    """Raised when a domain placeholder param holds a forbidden value.

    Example:
        >>> builder.build_url(loc, route, {"%tld%": "com/evil"})
        Traceback (most recent call last):
        ...
        ForbiddenDomainParamError: Forbidden value for domain param '%tld%'
    """

    pass


class ReverseTemplateError(CompositionError):
    """Raised when a reverse template cannot be parsed."""

    pass


class NonLocalizedRouteError(CompositionError):
    """Raised when a non-localized route is used while they are disallowed."""

    pass
