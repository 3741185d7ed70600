"""Server infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """Server and session configuration.

    Environment Variables:
        BACKEND_URL: Base URL used for absolute URLs (default: http://127.0.0.1:8000)
        SESSION_SECRET_KEY: Secret key for session cookie signing
        SESSION_LOCALIZATION_KEY: Session key holding the localization

    Example:
        ```python
        from infrastructure.services import get_settings

        backend_url = get_settings().server.BACKEND_URL
        ```
    """

    BACKEND_URL: str = Field(default="http://127.0.0.1:8000", alias="BACKEND_URL")
    SECRET_KEY: str = Field(default="change-me", alias="SESSION_SECRET_KEY")
    SESSION_LOCALIZATION_KEY: str = Field(
        default="localization", alias="SESSION_LOCALIZATION_KEY"
    )
