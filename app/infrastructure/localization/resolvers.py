"""Localization resolution for incoming requests.

Decides the active localization from, in order of precedence:
1. The switch query parameter
2. The localization stored in the session
3. The localization embedded in the URL
4. The Accept-Language header (with equivalence remapping)
5. The configured default localization

Malformed or disallowed values never raise; they fall through to the next
source.
"""

from typing import Dict, List, Mapping, Optional, Tuple, Union

import structlog

from infrastructure.localization.config import LocalizationConfig
from infrastructure.localization.models import (
    FirstRequestDetection,
    LocaleIdentifier,
    LocalizationSource,
    RedirectDecision,
    RequestSignals,
    ResolutionResult,
)

logger = structlog.get_logger().bind(component="localization.resolver")


def parse_accept_language(accept_language: Optional[str]) -> List[Tuple[str, float]]:
    """Parse an Accept-Language header into weighted language tags.

    Parses "de-DE;q=1.0, en;q=0.5" -> [("de-DE", 1.0), ("en", 0.5)].
    Results are ordered by quality, descending, with header order kept for
    ties. Wildcards and entries with zero quality are skipped; unparsable
    quality values count as 1.0.

    Args:
        accept_language: Accept-Language header value.

    Returns:
        List of (language tag, quality) tuples.
    """
    if not accept_language:
        return []

    preferences = []
    for part in accept_language.split(","):
        pieces = part.split(";")
        lang_range = pieces[0].strip().replace("_", "-")
        if not lang_range or lang_range == "*":
            continue

        quality = 1.0
        for param in pieces[1:]:
            param = param.strip()
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 1.0

        if quality <= 0:
            continue
        preferences.append((lang_range, quality))

    # sorted() is stable, so equal weights keep header order
    return sorted(preferences, key=lambda item: item[1], reverse=True)


def redirect_localization_query(
    query_params: Mapping[str, str],
    target_localization: Union[str, LocaleIdentifier],
    default_localization: str,
    param_name: str = LocalizationConfig.localization_param_name,
) -> Tuple[Dict[str, str], Optional[str]]:
    """Compute query params and URL localization value for a redirect.

    When the localization travels in the query string, the query param is
    updated (or removed for the default localization) and no URL value is
    returned. Otherwise the query is returned unchanged and the target
    localization string is returned for substitution into the URL.

    Args:
        query_params: Current request query params.
        target_localization: Localization to redirect to.
        default_localization: Default localization string.
        param_name: Localization query param name.

    Returns:
        Tuple of (updated query params, URL localization value or None).
    """
    target_str = str(target_localization)
    updated = dict(query_params)
    if param_name in updated:
        if target_str == default_localization:
            del updated[param_name]
        else:
            updated[param_name] = target_str
        return updated, None
    return updated, target_str


class LocalizationResolver:
    """Resolves the active localization for a single request.

    The resolver holds no per-request state; ``resolve`` is a pure function
    of the request signals and the shared configuration. Storing the result
    in the session and issuing redirects is left to the caller.

    Example:
        resolver = LocalizationResolver(config)
        result = resolver.resolve(
            RequestSignals(accept_language="de-DE;q=1.0, en;q=0.5")
        )
        result.localization  # LocaleIdentifier("de", "DE")
    """

    def __init__(self, config: LocalizationConfig):
        self.config = config

    def resolve(self, signals: RequestSignals) -> ResolutionResult:
        """Resolve the active localization for the request.

        Args:
            signals: Request inputs.

        Returns:
            ResolutionResult with the active localization, first request
            flag and redirect decision.
        """
        config = self.config
        default = config.get_default_localization()

        session = self._allowed_identifier(signals.session_localization)
        is_first_request = session is None
        detection = None if is_first_request else FirstRequestDetection.NOT_FIRST

        switch = self._allowed_identifier(
            signals.query_params.get(config.switch_param_name)
        )
        if switch is not None:
            return self._finish(
                switch,
                is_first_request,
                LocalizationSource.SWITCH_PARAM,
                detection,
                session_localization=session,
                request_localization=switch,
                switch_param_localization=switch,
            )

        if session is not None:
            return self._finish(
                session,
                False,
                LocalizationSource.SESSION,
                detection,
                session_localization=session,
            )

        url = self._allowed_identifier(signals.url_localization)
        if url is not None:
            return self._finish(
                url,
                True,
                LocalizationSource.URL,
                None,
                request_localization=url,
            )

        matched, observed = self._detect_from_header(signals.accept_language)
        if matched is not None:
            if observed is not None:
                return self._finish(
                    matched,
                    True,
                    LocalizationSource.HEADER,
                    FirstRequestDetection.HEADER_BEST_MATCH,
                    request_localization=observed,
                    request_localization_equivalent=matched,
                )
            return self._finish(
                matched,
                True,
                LocalizationSource.HEADER,
                FirstRequestDetection.HEADER_BEST_MATCH,
                request_localization=matched,
            )

        return self._finish(
            default,
            True,
            LocalizationSource.DEFAULT,
            FirstRequestDetection.FALLBACK,
        )

    def _finish(
        self,
        localization: LocaleIdentifier,
        is_first_request: bool,
        source: LocalizationSource,
        detection: Optional[FirstRequestDetection],
        **state,
    ) -> ResolutionResult:
        redirect = self._redirect_decision(localization, is_first_request, source)
        result = ResolutionResult(
            localization=localization,
            is_first_request=is_first_request,
            redirect=redirect,
            source=source,
            first_request_detection=detection,
            **state,
        )
        logger.debug(
            "localization_resolved",
            localization=str(localization),
            source=source.value,
            is_first_request=is_first_request,
            redirect=redirect.redirect,
        )
        return result

    def _redirect_decision(
        self,
        localization: LocaleIdentifier,
        is_first_request: bool,
        source: LocalizationSource,
    ) -> RedirectDecision:
        config = self.config
        if not (is_first_request and config.redirect_first_request_to_default):
            return RedirectDecision.none()
        # Explicit, already allowed values are honoured as requested
        if source in (LocalizationSource.SWITCH_PARAM, LocalizationSource.URL):
            return RedirectDecision.none()
        default = config.get_default_localization()
        if localization == default:
            return RedirectDecision.none()
        return RedirectDecision.to(default)

    def _allowed_identifier(
        self, value: Union[str, LocaleIdentifier, None]
    ) -> Optional[LocaleIdentifier]:
        if value is None:
            return None
        if isinstance(value, LocaleIdentifier):
            identifier = value
        else:
            identifier = LocaleIdentifier.try_parse(value, self.config.separator)
        if identifier is None:
            logger.debug("invalid_localization_ignored", value=str(value))
            return None
        if str(identifier) not in self.config.allowed:
            logger.debug("disallowed_localization_ignored", value=str(identifier))
            return None
        return identifier

    def _match_allowed(self, identifier: LocaleIdentifier) -> Optional[LocaleIdentifier]:
        allowed = self.config.allowed
        if self.config.detect_localization_only_by_lang:
            match = allowed.first_with_language(identifier.language)
            return LocaleIdentifier.parse(match) if match is not None else None
        return identifier if str(identifier) in allowed else None

    def _detect_from_header(
        self, accept_language: Optional[str]
    ) -> Tuple[Optional[LocaleIdentifier], Optional[LocaleIdentifier]]:
        """Find the best allowed localization in the Accept-Language header.

        Every candidate is first tested directly, then every candidate is
        remapped through the equivalence map and tested again.

        Returns:
            Tuple of (matched localization, observed equivalent token). The
            second item is only set when the match came via an equivalence.
        """
        candidates = []
        for tag, _ in parse_accept_language(accept_language):
            identifier = LocaleIdentifier.try_parse(tag)
            if identifier is None:
                # Extended tags like "zh-Hant-TW" fall back to their language
                identifier = LocaleIdentifier.try_parse(tag.split("-")[0])
            if identifier is not None:
                candidates.append(identifier)

        for candidate in candidates:
            match = self._match_allowed(candidate)
            if match is not None:
                return match, None

        equivalents = self.config.equivalents
        for candidate in candidates:
            target = equivalents.lookup(str(candidate))
            if target is None:
                continue
            target_identifier = LocaleIdentifier.try_parse(target)
            if target_identifier is None:
                continue
            match = self._match_allowed(target_identifier)
            if match is not None:
                return match, candidate

        return None, None
