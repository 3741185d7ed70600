"""Infrastructure configuration module - public API.

Centralized configuration management using Pydantic BaseSettings with
domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    LocalizationSettings: Localization settings class
    ServerSettings: Server settings class

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()
    allowed = settings.localization.allowed_localizations
    ```
"""

from infrastructure.configuration.features import LocalizationSettings
from infrastructure.configuration.infrastructure import ServerSettings
from infrastructure.configuration.settings import Settings, settings

__all__ = ["Settings", "settings", "LocalizationSettings", "ServerSettings"]
