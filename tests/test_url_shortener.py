import logging
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from main import app
from shortlinks_app.dependencies import get_registry, get_url_service

from conftest import BASE_URL, START

CHROME_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_2) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestShortenEndpoint:
    """POST /api/shorturls"""

    def test_create_short_url(self, client: TestClient):
        """Test creating a short URL with defaults"""
        response = client.post("/api/shorturls", json={"url": "https://www.google.com/"})
        assert response.status_code == 201

        data = response.json()
        assert set(data) == {"shortcode", "shortLink", "expiry"}
        assert data["shortLink"] == f"{BASE_URL}/{data['shortcode']}"
        assert parse_time(data["expiry"]) == START + timedelta(minutes=30)

    def test_create_with_custom_code_and_validity(self, client: TestClient):
        response = client.post(
            "/api/shorturls",
            json={"url": "https://example.com/a", "validity": 1, "shortcode": "promo7"},
        )
        assert response.status_code == 201

        data = response.json()
        assert data["shortcode"] == "promo7"
        assert parse_time(data["expiry"]) == START + timedelta(minutes=1)

    def test_invalid_url(self, client: TestClient):
        """Test creating URL with an unsupported scheme"""
        response = client.post("/api/shorturls", json={"url": "ftp://x.com"})
        assert response.status_code == 400

        data = response.json()
        assert data["error"] is True
        assert data["kind"] == "invalid_url"
        assert "timestamp" in data

    def test_missing_url(self, client: TestClient):
        response = client.post("/api/shorturls", json={})
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_url"

    def test_invalid_validity(self, client: TestClient):
        response = client.post("/api/shorturls", json={"url": "https://example.com/", "validity": -5})
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_validity"

    def test_reserved_shortcode(self, client: TestClient):
        response = client.post("/api/shorturls", json={"url": "https://example.com/", "shortcode": "api"})
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_shortcode"

    def test_taken_shortcode(self, client: TestClient):
        payload = {"url": "https://example.com/", "shortcode": "taken1"}
        assert client.post("/api/shorturls", json=payload).status_code == 201

        response = client.post("/api/shorturls", json=payload)
        assert response.status_code == 409
        assert response.json()["kind"] == "shortcode_taken"

    def test_creator_provenance_is_stored(self, client: TestClient, registry):
        client.post(
            "/api/shorturls",
            json={"url": "https://example.com/", "shortcode": "whoami"},
            headers={"User-Agent": "curl/8.4.0"},
        )

        record = registry.get("whoami")
        assert record.created_by == "testclient"
        assert record.creator_user_agent == "curl/8.4.0"


class TestRedirectEndpoint:
    """GET /{shortcode}"""

    def test_redirect_url(self, client: TestClient):
        """Test URL redirection"""
        create_response = client.post("/api/shorturls", json={"url": "https://www.github.com/"})
        shortcode = create_response.json()["shortcode"]

        response = client.get(f"/{shortcode}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

    def test_redirect_nonexistent_url(self, client: TestClient):
        """Test redirecting non-existent URL"""
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_redirect_expired_url(self, client: TestClient, clock):
        client.post("/api/shorturls", json={"url": "https://example.com/a", "validity": 1, "shortcode": "brief"})

        clock.advance(seconds=60)
        assert client.get("/brief", follow_redirects=False).status_code == 302

        clock.advance(seconds=1)
        response = client.get("/brief", follow_redirects=False)
        assert response.status_code == 410
        assert response.json()["kind"] == "expired"


class TestStatsEndpoint:
    """GET /api/shorturls/{shortcode}"""

    def test_url_stats(self, client: TestClient, clock):
        """Clicks show up with their enrichment, oldest first"""
        client.post("/api/shorturls", json={"url": "https://www.stackoverflow.com/", "shortcode": "so1"})

        client.get("/so1", follow_redirects=False, headers={"User-Agent": CHROME_MAC})
        clock.advance(seconds=30)
        client.get(
            "/so1",
            follow_redirects=False,
            headers={"User-Agent": "curl/8.4.0", "Referer": "https://news.example/"},
        )

        response = client.get("/api/shorturls/so1")
        assert response.status_code == 200

        data = response.json()
        assert data["shortcode"] == "so1"
        assert data["originalUrl"] == "https://www.stackoverflow.com/"
        assert data["totalClicks"] == 2
        assert data["isExpired"] is False

        first, second = data["clicks"]
        assert first["source"] == {
            "referrer": "Direct",
            "userAgent": CHROME_MAC,
            "browser": "Chrome",
            "os": "macOS",
        }
        assert first["location"] == {
            "country": "Unknown",
            "region": "Unknown",
            "city": "Unknown",
            "coordinates": None,
        }
        assert second["source"]["referrer"] == "https://news.example/"
        assert second["source"]["browser"] == "Unknown"
        assert parse_time(second["timestamp"]) - parse_time(first["timestamp"]) == timedelta(seconds=30)

    def test_stats_for_expired_url(self, client: TestClient, clock):
        client.post("/api/shorturls", json={"url": "https://example.com/", "validity": 1, "shortcode": "old1"})
        clock.advance(minutes=5)

        response = client.get("/api/shorturls/old1")
        assert response.status_code == 200
        assert response.json()["isExpired"] is True

    def test_stats_for_unknown_url(self, client: TestClient):
        response = client.get("/api/shorturls/missing")
        assert response.status_code == 404


class TestListAndSweepEndpoints:
    """GET /api/shorturls and POST /api/shorturls/sweep"""

    def test_list_urls(self, client: TestClient):
        client.post("/api/shorturls", json={"url": "https://one.example/", "shortcode": "one1"})
        client.post("/api/shorturls", json={"url": "https://two.example/", "shortcode": "two2"})
        client.get("/two2", follow_redirects=False)

        response = client.get("/api/shorturls")
        assert response.status_code == 200

        body = response.json()
        assert body["error"] is False
        entries = {entry["shortcode"]: entry for entry in body["data"]}
        assert set(entries) == {"one1", "two2"}
        assert entries["two2"]["totalClicks"] == 1
        assert entries["one1"]["shortLink"] == f"{BASE_URL}/one1"
        assert entries["one1"]["originalUrl"] == "https://one.example/"

    def test_sweep(self, client: TestClient, clock):
        client.post("/api/shorturls", json={"url": "https://example.com/", "validity": 1, "shortcode": "temp1"})
        clock.advance(minutes=2)

        assert client.post("/api/shorturls/sweep").json() == {"removed": 1}
        assert client.post("/api/shorturls/sweep").json() == {"removed": 0}
        assert client.get("/temp1", follow_redirects=False).status_code == 404


class TestRouteShadowing:
    """Single-segment paths belong to shortcodes"""

    @pytest.mark.parametrize("code", ["docs", "redoc", "health", "openapi"])
    def test_codes_named_like_service_pages_redirect(self, client: TestClient, code):
        create_response = client.post(
            "/api/shorturls", json={"url": "https://example.com/target", "shortcode": code}
        )
        assert create_response.status_code == 201

        response = client.get(f"/{code}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/target"

    def test_docs_served_under_api(self, client: TestClient):
        assert client.get("/api/docs").status_code == 200
        assert client.get("/api/openapi.json").json()["info"]["title"]


class TestErrorBodies:
    """Failures outside the core still use the error body"""

    def test_malformed_json(self, client: TestClient):
        response = client.post(
            "/api/shorturls",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["error"] is True
        assert data["message"] == "Invalid JSON in request body"
        assert data["kind"] == "invalid_request"
        assert "timestamp" in data

    def test_body_that_is_not_an_object(self, client: TestClient):
        response = client.post("/api/shorturls", json=["https://example.com/"])
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_request"

    def test_unknown_route(self, client: TestClient):
        response = client.get("/api/nope/unknown")
        assert response.status_code == 404

        data = response.json()
        assert data["error"] is True
        assert data["message"] == "Route not found"
        assert data["kind"] == "not_found"

    def test_wrong_method(self, client: TestClient):
        response = client.delete("/api/shorturls")
        assert response.status_code == 405
        assert response.json()["kind"] == "invalid_request"

    def test_unexpected_failure(self, registry):
        class BrokenService:
            async def list_urls(self):
                raise RuntimeError("registry exploded")

        app.dependency_overrides[get_url_service] = lambda: BrokenService()
        app.dependency_overrides[get_registry] = lambda: registry
        try:
            with TestClient(app, raise_server_exceptions=False) as test_client:
                response = test_client.get("/api/shorturls")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        data = response.json()
        assert data["error"] is True
        assert data["message"] == "Internal server error"
        assert data["kind"] == "internal"
        assert "exploded" not in response.text


class TestServiceEndpoints:
    def test_health(self, client: TestClient):
        client.post("/api/shorturls", json={"url": "https://example.com/"})

        response = client.get("/api/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["urls"] == 1
        assert parse_time(data["timestamp"]).tzinfo is not None
        assert data["uptime"] >= 0

    def test_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert "version" in response.json()
        assert response.json()["docs"] == "/api/docs"

    def test_request_id_header(self, client: TestClient):
        response = client.get("/api/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_log_lines(self, client: TestClient, caplog):
        caplog.set_level(logging.INFO, logger="shortlinks_app.web")

        client.get("/api/health", headers={"X-Request-ID": "req-456"})

        messages = [record.getMessage() for record in caplog.records if record.name == "shortlinks_app.web"]
        assert "[req-456] Request: GET /api/health from testclient" in messages
        assert any(m.startswith("[req-456] Response: GET /api/health - Status: 200") for m in messages)
