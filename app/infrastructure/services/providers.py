"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.localization import LocalizationConfig
from infrastructure.routing import LocalizedRouter, UrlRequestContext


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process.

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.localization.model_dump()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_localization_config() -> LocalizationConfig:
    """
    Get application-scoped localization configuration.

    The configuration is frozen before it is handed out, so it stays
    read-only while requests are handled.

    Returns:
        LocalizationConfig: Frozen configuration built from settings.
    """
    config = LocalizationConfig.from_settings(get_settings().localization)
    config.freeze()
    return config


@lru_cache
def get_localized_router() -> LocalizedRouter:
    """
    Get application-scoped localized router singleton.

    Routes are registered by the application at startup.

    Returns:
        LocalizedRouter: Router using the shared localization configuration
        and the backend URL as request context for absolute URLs.
    """
    settings = get_settings()
    return LocalizedRouter(
        get_localization_config(),
        request_context=UrlRequestContext.from_url(settings.server.BACKEND_URL),
    )
