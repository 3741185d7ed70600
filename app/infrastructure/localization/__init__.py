"""Localization system - request localization detection.

Resolves the effective language/locale pair for every request from the
switch query param, the session, the URL and the Accept-Language header.

Main components:
- models: LocaleIdentifier, AllowedLocaleSet, EquivalenceMap, ResolutionResult
- config: LocalizationConfig shared, read-only-at-runtime configuration
- resolvers: LocalizationResolver and Accept-Language parsing
- exceptions: ConfigurationError and CompositionError families
"""

from infrastructure.localization.config import (
    URL_PARAM_LOCALIZATION,
    URL_PARAM_SWITCH_LOCALIZATION,
    LocalizationConfig,
)
from infrastructure.localization.exceptions import (
    CompositionError,
    ConfigurationError,
    DuplicateRouteError,
    ForbiddenDomainParamError,
    LocalizationError,
    NonLocalizedRouteError,
    ReverseTemplateError,
    RouteGroupMismatchError,
    UnknownLocalizationError,
)
from infrastructure.localization.models import (
    AllowedLocaleSet,
    EquivalenceMap,
    FirstRequestDetection,
    LocaleIdentifier,
    LocalizationSource,
    RedirectDecision,
    RequestSignals,
    ResolutionResult,
)
from infrastructure.localization.resolvers import (
    LocalizationResolver,
    parse_accept_language,
    redirect_localization_query,
)

__all__ = [
    "URL_PARAM_LOCALIZATION",
    "URL_PARAM_SWITCH_LOCALIZATION",
    "LocalizationConfig",
    "LocalizationError",
    "NonLocalizedRouteError",
    "ConfigurationError",
    "DuplicateRouteError",
    "RouteGroupMismatchError",
    "CompositionError",
    "UnknownLocalizationError",
    "ForbiddenDomainParamError",
    "ReverseTemplateError",
    "LocaleIdentifier",
    "AllowedLocaleSet",
    "EquivalenceMap",
    "FirstRequestDetection",
    "LocalizationSource",
    "RequestSignals",
    "RedirectDecision",
    "ResolutionResult",
    "LocalizationResolver",
    "parse_accept_language",
    "redirect_localization_query",
]
