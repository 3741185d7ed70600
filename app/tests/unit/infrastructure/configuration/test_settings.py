"""Unit tests for infrastructure.configuration.settings module.

Tests cover:
- LocalizationSettings defaults and environment overrides
- ServerSettings defaults and environment overrides
- Settings aggregation
"""

import pytest

from infrastructure.configuration import (
    LocalizationSettings,
    ServerSettings,
    Settings,
)


@pytest.mark.unit
class TestLocalizationSettings:
    """Test suite for LocalizationSettings configuration."""

    def test_defaults(self):
        """LocalizationSettings uses correct default values."""
        localization = LocalizationSettings()

        assert localization.default_localization == "en"
        assert localization.allowed_localizations == []
        assert localization.localization_equivalents == {}
        assert localization.detect_localization_only_by_lang is True
        assert localization.redirect_first_request_to_default is False
        assert localization.route_records_by_language_and_locale is False
        assert localization.query_separator == "&"
        assert localization.allow_non_localized_routes is True

    def test_custom_values(self, monkeypatch):
        """LocalizationSettings reads its environment variables."""
        monkeypatch.setenv("LOCALIZATION_DEFAULT", "de-DE")
        monkeypatch.setenv("LOCALIZATION_ALLOWED", '["en", "cs-CZ"]')
        monkeypatch.setenv("LOCALIZATION_EQUIVALENTS", '{"uk": ["ru", "be"]}')
        monkeypatch.setenv("LOCALIZATION_DETECT_ONLY_BY_LANG", "false")
        monkeypatch.setenv("LOCALIZATION_ROUTE_RECORDS_BY_LANGUAGE_AND_LOCALE", "true")
        monkeypatch.setenv("LOCALIZATION_QUERY_SEPARATOR", "&amp;")
        monkeypatch.setenv("LOCALIZATION_ALLOW_NON_LOCALIZED_ROUTES", "false")

        localization = LocalizationSettings()

        assert localization.default_localization == "de-DE"
        assert localization.allowed_localizations == ["en", "cs-CZ"]
        assert localization.localization_equivalents == {"uk": ["ru", "be"]}
        assert localization.detect_localization_only_by_lang is False
        assert localization.route_records_by_language_and_locale is True
        assert localization.query_separator == "&amp;"
        assert localization.allow_non_localized_routes is False


@pytest.mark.unit
class TestServerSettings:
    """Test suite for ServerSettings configuration."""

    def test_defaults(self):
        """ServerSettings uses correct default values."""
        server = ServerSettings()

        assert server.BACKEND_URL == "http://127.0.0.1:8000"
        assert server.SESSION_LOCALIZATION_KEY == "localization"

    def test_custom_values(self, monkeypatch):
        """ServerSettings reads its environment variables."""
        monkeypatch.setenv("BACKEND_URL", "https://example.com")
        monkeypatch.setenv("SESSION_SECRET_KEY", "secret")

        server = ServerSettings()

        assert server.BACKEND_URL == "https://example.com"
        assert server.SECRET_KEY == "secret"


@pytest.mark.unit
class TestSettings:
    """Test suite for the Settings aggregator."""

    def test_subsettings_are_created(self):
        """Feature and infrastructure settings are instantiated."""
        settings = Settings()

        assert isinstance(settings.localization, LocalizationSettings)
        assert isinstance(settings.server, ServerSettings)

    def test_explicit_subsettings_are_kept(self):
        """Passed subsettings override the defaults."""
        localization = LocalizationSettings(LOCALIZATION_DEFAULT="cs")
        settings = Settings(localization=localization)

        assert settings.localization.default_localization == "cs"

    def test_is_production_without_prefix(self, monkeypatch):
        """An empty prefix means production."""
        monkeypatch.setenv("PREFIX", "")
        assert Settings().is_production is True

    def test_is_not_production_with_prefix(self, monkeypatch):
        """A prefix marks a non-production environment."""
        monkeypatch.setenv("PREFIX", "dev-")
        assert Settings().is_production is False
