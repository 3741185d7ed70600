"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    LocalizationDep,
    LocalizedRouterDep,
    SettingsDep,
    get_request_localization,
)
from infrastructure.services.providers import (
    get_localization_config,
    get_localized_router,
    get_settings,
)

__all__ = [
    "SettingsDep",
    "LocalizedRouterDep",
    "LocalizationDep",
    "get_request_localization",
    "get_settings",
    "get_localization_config",
    "get_localized_router",
]
