"""Unit tests for server.localization_middleware module.

Tests cover:
- Header detection on the first request
- Session reuse on following requests
- Switch param handling
- First request redirects
- Localized URL endpoint
"""

import pytest


@pytest.mark.unit
class TestLocalizationMiddleware:
    """Test suite for LocalizationMiddleware."""

    def test_first_request_uses_header(self, client):
        """The first request is detected from Accept-Language."""
        response = client.get(
            "/api/v1/localization", headers={"accept-language": "de-DE,en;q=0.5"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["localization"] == "de-DE"
        assert body["is_first_request"] is True
        assert body["source"] == "header"

    def test_following_request_uses_session(self, client):
        """The detected localization is stored in the session."""
        client.get("/api/v1/localization", headers={"accept-language": "de-DE"})
        response = client.get(
            "/api/v1/localization", headers={"accept-language": "en-US"}
        )
        body = response.json()
        assert body["localization"] == "de-DE"
        assert body["is_first_request"] is False
        assert body["source"] == "session"

    def test_switch_param_updates_session(self, client):
        """The switch param changes the stored localization."""
        client.get("/api/v1/localization", headers={"accept-language": "de-DE"})
        switched = client.get("/api/v1/localization?switch_localization=en-US")
        assert switched.json()["localization"] == "en-US"
        assert switched.json()["source"] == "switch_param"

        response = client.get("/api/v1/localization")
        assert response.json()["localization"] == "en-US"

    def test_default_without_header(self, client):
        """Requests without signals use the default."""
        response = client.get("/api/v1/localization")
        body = response.json()
        assert body["localization"] == "en"
        assert body["source"] == "default"
        assert body["allowed"] == ["en", "en-US", "de-DE"]

    def test_first_request_redirects_to_default(self, client_factory):
        """Detected first requests are redirected to the translated path."""
        client = client_factory(redirect_first_request_to_default=True)
        response = client.get(
            "/fr-FR/produkt-liste/tisch/rot",
            headers={"accept-language": "de-DE"},
            follow_redirects=False,
        )
        assert response.status_code == 307
        assert response.headers["location"] == "/en/products-list/tisch/rot"

    def test_redirect_stores_default_in_session(self, client_factory):
        """After a redirect the session holds the default."""
        client = client_factory(redirect_first_request_to_default=True)
        client.get(
            "/fr-FR/produkt-liste",
            headers={"accept-language": "de-DE"},
            follow_redirects=False,
        )
        response = client.get(
            "/api/v1/localization", headers={"accept-language": "de-DE"}
        )
        assert response.status_code == 200
        assert response.json()["localization"] == "en"
        assert response.json()["is_first_request"] is False

    def test_no_redirect_for_path_without_localized_route(self, client_factory):
        """Paths of non-localized endpoints are served as requested."""
        client = client_factory(redirect_first_request_to_default=True)
        response = client.get(
            "/health",
            headers={"accept-language": "de-DE"},
            follow_redirects=False,
        )
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

        following = client.get("/api/v1/localization")
        assert following.json()["localization"] == "de-DE"
        assert following.json()["source"] == "session"

    def test_no_redirect_for_default_detection(self, client_factory):
        """Detecting the default needs no redirect."""
        client = client_factory(redirect_first_request_to_default=True)
        response = client.get(
            "/api/v1/localization",
            headers={"accept-language": "en"},
            follow_redirects=False,
        )
        assert response.status_code == 200


@pytest.mark.unit
class TestLocalizedUrlEndpoint:
    """Test suite for the localized URL endpoint."""

    def test_builds_url_in_active_localization(self, client):
        """URLs use the localization resolved for the request."""
        response = client.get(
            "/api/v1/localization/urls/products?page=2",
            headers={"accept-language": "de-DE"},
        )
        assert response.status_code == 200
        assert response.json() == {
            "route": "products",
            "url": "/de-DE/produkt-liste/2",
        }

    def test_default_page_is_omitted(self, client):
        """Default optional params are dropped."""
        response = client.get("/api/v1/localization/urls/products?page=1")
        assert response.json()["url"] == "/en/products-list"

    def test_explicit_localization(self, client):
        """An explicit localization param wins."""
        response = client.get(
            "/api/v1/localization/urls/product_detail"
            "?localization=de-DE&name=tisch&color=rot/hell&size=L"
        )
        assert response.json()["url"] == "/de-DE/produkt-liste/tisch/rot/hell?size=L"

    def test_unknown_route_is_not_found(self, client):
        """Unknown routes return 404."""
        response = client.get("/api/v1/localization/urls/missing")
        assert response.status_code == 404
