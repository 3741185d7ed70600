"""Localization and localized routing feature settings."""

from typing import Dict, List

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class LocalizationSettings(FeatureSettings):
    """Localization detection and localized URL configuration.

    Environment Variables:
        LOCALIZATION_DEFAULT: Default localization (default: "en")
        LOCALIZATION_ALLOWED: JSON list of allowed localizations
        LOCALIZATION_EQUIVALENTS: JSON dict ``{target: [equivalents...]}``
        LOCALIZATION_DETECT_ONLY_BY_LANG: Match header values by language only
        LOCALIZATION_REDIRECT_FIRST_REQUEST_TO_DEFAULT: Redirect first
            requests to the default localization
        LOCALIZATION_ROUTE_RECORDS_BY_LANGUAGE_AND_LOCALE: Key localized
            route data by full localization instead of language
        LOCALIZATION_QUERY_SEPARATOR: Separator between query params
        LOCALIZATION_ALLOW_NON_LOCALIZED_ROUTES: Match and build non-localized
            routes (default: true)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        default = settings.localization.default_localization
        ```
    """

    default_localization: str = Field(
        default="en",
        alias="LOCALIZATION_DEFAULT",
        description="Default localization, language or language-locale",
    )
    allowed_localizations: List[str] = Field(
        default_factory=list,
        alias="LOCALIZATION_ALLOWED",
        description="Allowed localizations, the default is always allowed",
    )
    localization_equivalents: Dict[str, List[str]] = Field(
        default_factory=dict,
        alias="LOCALIZATION_EQUIVALENTS",
        description="Target localization mapped to its equivalents",
    )
    detect_localization_only_by_lang: bool = Field(
        default=True,
        alias="LOCALIZATION_DETECT_ONLY_BY_LANG",
        description="Match Accept-Language values by language only",
    )
    redirect_first_request_to_default: bool = Field(
        default=False,
        alias="LOCALIZATION_REDIRECT_FIRST_REQUEST_TO_DEFAULT",
        description="Redirect the first request of a session to the default",
    )
    route_records_by_language_and_locale: bool = Field(
        default=False,
        alias="LOCALIZATION_ROUTE_RECORDS_BY_LANGUAGE_AND_LOCALE",
        description="Key localized route data by language-locale",
    )
    query_separator: str = Field(
        default="&",
        alias="LOCALIZATION_QUERY_SEPARATOR",
        description="Separator between query string params in built URLs",
    )
    allow_non_localized_routes: bool = Field(
        default=True,
        alias="LOCALIZATION_ALLOW_NON_LOCALIZED_ROUTES",
        description="Use non-localized routes for matching and URL building",
    )
