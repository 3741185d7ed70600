"""Infrastructure modules for the localized routing application.

Centralized infrastructure components:
- configuration: Settings management (settings, LocalizationSettings)
- logging: Structured logging (get_module_logger, bind_request_context)
- localization: Request localization detection (LocalizationResolver)
- routing: Localized routes and URL building (LocalizedRouter, UrlBuilder)
- services: Dependency injection services (SettingsDep, LocalizedRouterDep)
"""

# Configuration
from infrastructure.configuration import settings

# Observability
from infrastructure.logging import get_module_logger

# Dependency Injection Services
from infrastructure.services import (
    LocalizationDep,
    LocalizedRouterDep,
    SettingsDep,
    get_localized_router,
    get_settings,
)

__all__ = [
    # Configuration
    "settings",
    # Observability
    "get_module_logger",
    # Dependency Injection Services
    "SettingsDep",
    "LocalizedRouterDep",
    "LocalizationDep",
    "get_settings",
    "get_localized_router",
]
