"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated

from fastapi import Depends, Request

from infrastructure.configuration import Settings
from infrastructure.localization import LocaleIdentifier
from infrastructure.routing import LocalizedRouter
from infrastructure.services.providers import get_localized_router, get_settings


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Localized router dependency
LocalizedRouterDep = Annotated[LocalizedRouter, Depends(get_localized_router)]


def get_request_localization(
    request: Request, router: LocalizedRouterDep
) -> LocaleIdentifier:
    """Return the localization resolved for the current request.

    Falls back to the router's default localization when the localization
    middleware did not run for the request.
    """
    localization = getattr(request.state, "localization", None)
    if localization is None:
        return router.config.get_default_localization()
    return localization


# Active request localization
LocalizationDep = Annotated[LocaleIdentifier, Depends(get_request_localization)]

__all__ = [
    "SettingsDep",
    "LocalizedRouterDep",
    "LocalizationDep",
    "get_request_localization",
]
