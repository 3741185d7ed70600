"""Shared localization configuration.

Holds the default localization, the allowed set, the equivalence map and
the detection flags. It is populated during startup and frozen before
request traffic begins; only reads happen while handling requests.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Union

import structlog

from infrastructure.localization.exceptions import ConfigurationError
from infrastructure.localization.models import (
    LANG_AND_LOCALE_SEPARATOR,
    AllowedLocaleSet,
    EquivalenceMap,
    LocaleIdentifier,
)

logger = structlog.get_logger().bind(component="localization.config")

URL_PARAM_LOCALIZATION = "localization"
URL_PARAM_SWITCH_LOCALIZATION = "switch_localization"


class LocalizationConfig:
    """Configuration accessors for localization detection and URL shaping.

    Example:
        config = LocalizationConfig("en")
        config.set_allowed_localizations("en", "de-DE")
        config.set_localization_equivalents({"uk": ["ru"]})
        config.freeze()
    """

    separator = LANG_AND_LOCALE_SEPARATOR
    localization_param_name = URL_PARAM_LOCALIZATION
    switch_param_name = URL_PARAM_SWITCH_LOCALIZATION

    def __init__(
        self,
        default_localization: Union[str, LocaleIdentifier] = "en",
        allowed_localizations: Iterable[str] = (),
        localization_equivalents: Optional[Mapping[str, Iterable[str]]] = None,
        detect_localization_only_by_lang: bool = True,
        redirect_first_request_to_default: bool = False,
        route_records_by_language_and_locale: bool = False,
        query_separator: str = "&",
        allow_non_localized_routes: bool = True,
    ):
        self._frozen = False
        self._default = self._parse_default(default_localization)
        self._allowed = AllowedLocaleSet(str(self._default))
        self._equivalents = EquivalenceMap()
        self.add_allowed_localizations(*allowed_localizations)
        if localization_equivalents:
            self.add_localization_equivalents(localization_equivalents)
        self._detect_localization_only_by_lang = detect_localization_only_by_lang
        self._redirect_first_request_to_default = redirect_first_request_to_default
        self._route_records_by_language_and_locale = (
            route_records_by_language_and_locale
        )
        self.query_separator = query_separator
        self._allow_non_localized_routes = allow_non_localized_routes

    @classmethod
    def from_settings(cls, settings) -> "LocalizationConfig":
        """Create configuration from ``LocalizationSettings``.

        Args:
            settings: LocalizationSettings instance.

        Returns:
            LocalizationConfig instance (not frozen).
        """
        return cls(
            default_localization=settings.default_localization,
            allowed_localizations=settings.allowed_localizations,
            localization_equivalents=settings.localization_equivalents,
            detect_localization_only_by_lang=settings.detect_localization_only_by_lang,
            redirect_first_request_to_default=settings.redirect_first_request_to_default,
            route_records_by_language_and_locale=settings.route_records_by_language_and_locale,
            query_separator=settings.query_separator,
            allow_non_localized_routes=settings.allow_non_localized_routes,
        )

    def freeze(self) -> None:
        """Mark the configuration read-only for request handling."""
        self._frozen = True
        logger.info(
            "localization_config_frozen",
            default=str(self._default),
            allowed=self._allowed.values(),
        )

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise ConfigurationError(
                "Localization configuration is frozen and cannot be changed"
            )

    def _parse_default(
        self, value: Union[str, LocaleIdentifier, None], locale: Optional[str] = None
    ) -> LocaleIdentifier:
        if isinstance(value, LocaleIdentifier):
            return value
        if not value:
            raise ConfigurationError(
                "Default localization must be defined at least by the language"
            )
        try:
            if locale is not None:
                return LocaleIdentifier(language=value, locale=locale)
            return LocaleIdentifier.parse(value, self.separator)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid default localization: {value!r}",
                localization_key=str(value),
            ) from e

    def _normalize(self, value: str) -> str:
        try:
            return str(LocaleIdentifier.parse(value, self.separator))
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid localization: {value!r}", localization_key=str(value)
            ) from e

    # Default localization

    def get_default_localization(
        self, as_string: bool = False
    ) -> Union[LocaleIdentifier, str]:
        return str(self._default) if as_string else self._default

    def set_default_localization(
        self, localization_or_language: Optional[str], locale: Optional[str] = None
    ) -> "LocalizationConfig":
        """Set the default localization.

        Args:
            localization_or_language: Language ("en") or full localization
                string ("en-US").
            locale: Optional locale when only the language was given.

        Returns:
            Self for chaining.

        Raises:
            ConfigurationError: If no language component is given.
        """
        self._ensure_mutable()
        self._default = self._parse_default(localization_or_language, locale)
        self._allowed.set_default(str(self._default))
        return self

    # Allowed localizations

    @property
    def allowed(self) -> AllowedLocaleSet:
        return self._allowed

    def get_allowed_localizations(self) -> List[str]:
        return self._allowed.values()

    def set_allowed_localizations(self, *localizations: str) -> "LocalizationConfig":
        self._ensure_mutable()
        self._allowed.replace(*[self._normalize(value) for value in localizations])
        return self

    def add_allowed_localizations(self, *localizations: str) -> "LocalizationConfig":
        self._ensure_mutable()
        self._allowed.add(*[self._normalize(value) for value in localizations])
        return self

    # Equivalents

    @property
    def equivalents(self) -> EquivalenceMap:
        return self._equivalents

    def get_localization_equivalents(self) -> Dict[str, str]:
        return self._equivalents.as_dict()

    def set_localization_equivalents(
        self, equivalents: Mapping[str, Iterable[str]]
    ) -> "LocalizationConfig":
        self._ensure_mutable()
        self._equivalents.replace(self._normalize_equivalents(equivalents))
        return self

    def add_localization_equivalents(
        self, equivalents: Mapping[str, Iterable[str]]
    ) -> "LocalizationConfig":
        self._ensure_mutable()
        self._equivalents.add(self._normalize_equivalents(equivalents))
        return self

    def _normalize_equivalents(
        self, equivalents: Mapping[str, Iterable[str]]
    ) -> Dict[str, List[str]]:
        return {
            self._normalize(target): [self._normalize(value) for value in values]
            for target, values in equivalents.items()
        }

    # Flags

    @property
    def detect_localization_only_by_lang(self) -> bool:
        return self._detect_localization_only_by_lang

    def set_detect_localization_only_by_lang(
        self, value: bool = True
    ) -> "LocalizationConfig":
        self._ensure_mutable()
        self._detect_localization_only_by_lang = value
        return self

    @property
    def redirect_first_request_to_default(self) -> bool:
        return self._redirect_first_request_to_default

    def set_redirect_first_request_to_default(
        self, value: bool = True
    ) -> "LocalizationConfig":
        self._ensure_mutable()
        self._redirect_first_request_to_default = value
        return self

    @property
    def route_records_by_language_and_locale(self) -> bool:
        return self._route_records_by_language_and_locale

    def set_route_records_by_language_and_locale(
        self, value: bool = True
    ) -> "LocalizationConfig":
        self._ensure_mutable()
        self._route_records_by_language_and_locale = value
        return self

    @property
    def allow_non_localized_routes(self) -> bool:
        return self._allow_non_localized_routes

    def set_allow_non_localized_routes(
        self, value: bool = True
    ) -> "LocalizationConfig":
        """Allow or ignore non-localized routes in matching and URL building."""
        self._ensure_mutable()
        self._allow_non_localized_routes = value
        return self

    def routing_key_for(self, localization: Union[str, LocaleIdentifier]) -> str:
        """Return the key used to index per-locale route data.

        Args:
            localization: Localization string or identifier.

        Returns:
            Full localization string when routes are recorded by language
            and locale, otherwise the bare language.
        """
        localization_str = str(localization)
        if self._route_records_by_language_and_locale:
            return localization_str
        return localization_str.split(self.separator)[0]
