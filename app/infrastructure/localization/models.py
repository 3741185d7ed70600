"""Localization models.

Defines the localization identifier, the configured allowed set and
equivalence map, and the per-request resolution inputs and outputs.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

LANG_AND_LOCALE_SEPARATOR = "-"

_LANGUAGE_RE = re.compile(r"^[a-zA-Z]{2}$")
_LOCALE_RE = re.compile(r"^[a-zA-Z0-9]{2,3}$")


@dataclass(frozen=True)
class LocaleIdentifier:
    """A ``(language, locale)`` pair, e.g. ``("de", "DE")`` or ``("en", None)``.

    Frozen to ensure immutability and hashability. Resolution produces a
    fresh value per request.

    Attributes:
        language: Two lowercase letters (ISO 639-1).
        locale: Two or three uppercase alphanumerics, or None.
    """

    language: str
    locale: Optional[str] = None

    def __post_init__(self):
        if not _LANGUAGE_RE.match(self.language or ""):
            raise ValueError(f"Invalid language code: {self.language!r}")
        if self.locale is not None and not _LOCALE_RE.match(self.locale):
            raise ValueError(f"Invalid locale code: {self.locale!r}")
        object.__setattr__(self, "language", self.language.lower())
        if self.locale is not None:
            object.__setattr__(self, "locale", self.locale.upper())

    def __str__(self) -> str:
        return self.to_string()

    def to_string(self, separator: str = LANG_AND_LOCALE_SEPARATOR) -> str:
        """Return the canonical string form (e.g. ``"de-DE"`` or ``"en"``).

        Args:
            separator: Language and locale separator.

        Returns:
            Canonical localization string.
        """
        if self.locale is None:
            return self.language
        return f"{self.language}{separator}{self.locale}"

    @classmethod
    def parse(
        cls, value: str, separator: str = LANG_AND_LOCALE_SEPARATOR
    ) -> "LocaleIdentifier":
        """Parse a localization string, normalizing case.

        Args:
            value: Localization string (e.g. "en", "en-US", "en-us").
            separator: Language and locale separator.

        Returns:
            LocaleIdentifier instance.

        Raises:
            ValueError: If value is not a valid localization string.
        """
        if not isinstance(value, str) or not value:
            raise ValueError(f"Invalid localization: {value!r}")
        parts = value.strip().split(separator)
        if len(parts) == 1:
            return cls(language=parts[0])
        if len(parts) == 2:
            return cls(language=parts[0], locale=parts[1])
        raise ValueError(f"Invalid localization: {value!r}")

    @classmethod
    def try_parse(
        cls, value: Optional[str], separator: str = LANG_AND_LOCALE_SEPARATOR
    ) -> Optional["LocaleIdentifier"]:
        """Parse a localization string, returning None when malformed."""
        if value is None:
            return None
        try:
            return cls.parse(value, separator)
        except ValueError:
            return None


class AllowedLocaleSet:
    """Ordered set of allowed localization strings.

    The default localization string is always a member, even when it was
    never added explicitly or the set was replaced. The default is yielded
    first when iterating.
    """

    def __init__(self, default: str, values: Iterable[str] = ()):
        self._default = default
        self._values: Dict[str, str] = {}
        self.add(*values)

    @property
    def default(self) -> str:
        return self._default

    def set_default(self, default: str) -> None:
        self._default = default

    def replace(self, *values: str) -> None:
        """Replace all explicitly allowed values."""
        self._values = {}
        self.add(*values)

    def add(self, *values: str) -> None:
        """Merge values into the set, keeping first-insertion order."""
        for value in values:
            self._values[value] = value

    def values(self) -> List[str]:
        return list(self)

    def first_with_language(self, language: str) -> Optional[str]:
        """Return the first allowed value sharing the given language.

        Args:
            language: Lowercase language code.

        Returns:
            Allowed localization string, or None.
        """
        for value in self:
            identifier = LocaleIdentifier.try_parse(value)
            if identifier is not None and identifier.language == language:
                return value
        return None

    def __contains__(self, value: object) -> bool:
        return value == self._default or value in self._values

    def __iter__(self) -> Iterator[str]:
        yield self._default
        for value in self._values:
            if value != self._default:
                yield value

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"AllowedLocaleSet({self.values()!r})"


class EquivalenceMap:
    """Maps observed localization tokens onto canonical allowed ones.

    Configured as ``{target: [equivalent, ...]}`` and stored flattened as
    ``{equivalent: target}``.

    Example:
        equivalents = EquivalenceMap({"uk": ["ru"]})
        equivalents.lookup("ru-RU")  # "uk"
    """

    def __init__(self, mapping: Optional[Mapping[str, Iterable[str]]] = None):
        self._equivalents: Dict[str, str] = {}
        if mapping:
            self.add(mapping)

    def replace(self, mapping: Mapping[str, Iterable[str]]) -> None:
        self._equivalents = {}
        self.add(mapping)

    def add(self, mapping: Mapping[str, Iterable[str]]) -> None:
        for target, equivalents in mapping.items():
            for equivalent in equivalents:
                self._equivalents[equivalent] = target

    def lookup(self, token: str) -> Optional[str]:
        """Return the canonical target for a token.

        The full token is tried first, then its bare language.

        Args:
            token: Localization token (e.g. "ru-RU").

        Returns:
            Target localization string, or None.
        """
        if token in self._equivalents:
            return self._equivalents[token]
        language = token.split(LANG_AND_LOCALE_SEPARATOR)[0]
        return self._equivalents.get(language)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._equivalents)

    def __len__(self) -> int:
        return len(self._equivalents)


class FirstRequestDetection(Enum):
    """How the localization was detected for a session's first request."""

    NOT_FIRST = "not_first"
    HEADER_BEST_MATCH = "header_best_match"
    FALLBACK = "fallback"


class LocalizationSource(Enum):
    """Which request signal produced the active localization."""

    SWITCH_PARAM = "switch_param"
    SESSION = "session"
    URL = "url"
    HEADER = "header"
    DEFAULT = "default"


@dataclass(frozen=True)
class RequestSignals:
    """Already-materialized request inputs consumed by the resolver.

    Attributes:
        query_params: Raw query string parameters.
        accept_language: Raw ``Accept-Language`` header value.
        session_localization: Localization stored in the session, if any.
        url_localization: Localization string parsed from the URL, if any.
    """

    query_params: Mapping[str, str] = field(default_factory=dict)
    accept_language: Optional[str] = None
    session_localization: Optional[LocaleIdentifier] = None
    url_localization: Optional[str] = None


@dataclass(frozen=True)
class RedirectDecision:
    """Whether the caller should redirect, and to which localization."""

    redirect: bool = False
    target: Optional[LocaleIdentifier] = None

    @classmethod
    def none(cls) -> "RedirectDecision":
        return cls()

    @classmethod
    def to(cls, target: LocaleIdentifier) -> "RedirectDecision":
        return cls(redirect=True, target=target)


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one request's localization.

    Attributes:
        localization: Active localization for the request.
        is_first_request: True when no session localization was available.
        redirect: Redirect decision for the caller.
        source: Request signal the localization came from.
        first_request_detection: Detection kind, None when an explicit
            switch param or URL value decided the first request.
        session_localization: Localization recalled from the session.
        request_localization: Localization taken directly from the request.
        request_localization_equivalent: Equivalence-remapped localization.
        switch_param_localization: Localization from the switch param.
    """

    localization: LocaleIdentifier
    is_first_request: bool
    redirect: RedirectDecision = field(default_factory=RedirectDecision.none)
    source: LocalizationSource = LocalizationSource.DEFAULT
    first_request_detection: Optional[FirstRequestDetection] = None
    session_localization: Optional[LocaleIdentifier] = None
    request_localization: Optional[LocaleIdentifier] = None
    request_localization_equivalent: Optional[LocaleIdentifier] = None
    switch_param_localization: Optional[LocaleIdentifier] = None
