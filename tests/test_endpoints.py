"""End-to-end tests for the HTTP API using FastAPI's TestClient."""

import re

import pytest

from shortlinks.core.exceptions import DatabaseError
from shortlinks.core.rate_limit import RATE_LIMITS, limiter
from shortlinks.core.setting import settings
from shortlinks.services import url_service
from shortlinks.services.link_store import LinkStore

RANDOM_CODE = re.compile(r"^[a-z0-9]{6}$")


def shorten(client, **body):
    return client.post("/api/shorten", json=body)


class TestShorten:
    """POST /api/shorten"""

    def test_defaults(self, client, frozen_time):
        response = shorten(client, url="https://example.com")

        assert response.status_code == 201
        data = response.json()
        assert RANDOM_CODE.match(data["short_code"])
        assert data["short_url"] == f"http://sho.rt/{data['short_code']}"
        assert data["original_url"] == "https://example.com"
        assert data["expires_at"] == frozen_time.now_ms + 1_800_000

    def test_custom_code_and_validity(self, client, frozen_time):
        response = shorten(client, url="https://example.com", custom_code="MyLink", validity="5")

        assert response.status_code == 201
        assert response.json()["short_code"] == "MyLink"
        assert response.json()["expires_at"] == frozen_time.now_ms + 5 * 60_000

    def test_numeric_validity(self, client, frozen_time):
        response = shorten(client, url="https://example.com", validity=120)
        assert response.json()["expires_at"] == frozen_time.now_ms + 120 * 60_000

    @pytest.mark.parametrize("validity", [True, False])
    def test_boolean_validity_uses_default(self, client, frozen_time, validity):
        response = shorten(client, url="https://example.com", validity=validity)

        assert response.status_code == 201
        assert response.json()["expires_at"] == frozen_time.now_ms + 1_800_000

    def test_custom_code_twice(self, client):
        assert shorten(client, url="https://example.com", custom_code="abc").status_code == 201

        response = shorten(client, url="https://example.org", custom_code="abc")

        assert response.status_code == 409
        assert response.json() == {"detail": "Shortcode already in use. Please choose another."}

    @pytest.mark.parametrize(
        "body, detail",
        [
            ({}, "Please enter a URL."),
            ({"url": "   "}, "Please enter a URL."),
            ({"url": "example.com"}, "Invalid URL format. Please enter a valid URL including http(s)://"),
            (
                {"url": "https://example.com", "custom_code": "no"},
                "Shortcode must be 3-16 alphanumeric characters.",
            ),
        ],
    )
    def test_rejected_input(self, client, body, detail):
        response = client.post("/api/shorten", json=body)

        assert response.status_code == 400
        assert response.json() == {"detail": detail}
        assert client.get("/api/links").json() == []


class TestLinks:
    """GET /api/links"""

    def test_empty(self, client):
        response = client.get("/api/links")
        assert response.status_code == 200
        assert response.json() == []

    def test_newest_first(self, client):
        shorten(client, url="https://example.com/1", custom_code="one")
        shorten(client, url="https://example.com/2", custom_code="two")

        codes = [link["short_code"] for link in client.get("/api/links").json()]

        assert codes == ["two", "one"]


class TestRedirect:
    """GET /{short_code}"""

    def test_redirects_active_code(self, client):
        shorten(client, url="https://example.com/target", custom_code="go123")

        response = client.get("/go123")

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/target"

    def test_unknown_code(self, client):
        response = client.get("/missing")
        assert response.status_code == 404

    def test_expired_code(self, client, frozen_time):
        shorten(client, url="https://example.com", custom_code="brief", validity=1)

        frozen_time.advance(60_000)
        assert client.get("/brief").status_code == 302

        frozen_time.advance(1000)
        response = client.get("/brief")
        assert response.status_code == 410
        assert response.json() == {"detail": "This short URL has expired."}

    def test_codes_named_like_api_pages_still_redirect(self, client):
        shorten(client, url="https://example.com/docs", custom_code="docs")
        shorten(client, url="https://example.com/health", custom_code="health")

        assert client.get("/docs").headers["location"] == "https://example.com/docs"
        assert client.get("/health").headers["location"] == "https://example.com/health"


class TestHealth:

    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "healthy"}

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/api/docs"
        assert "X-Process-Time" in response.headers


class TestServerErrors:
    """Failures that are not the caller's fault."""

    def test_code_space_exhausted(self, client, monkeypatch):
        monkeypatch.setattr(url_service, "BASE36_CHARS", "a")
        monkeypatch.setattr(settings, "SHORT_CODE_LENGTH", 3)
        monkeypatch.setattr(settings, "MAX_GENERATION_ATTEMPTS", 5)
        assert shorten(client, url="https://example.com", custom_code="aaa").status_code == 201

        response = shorten(client, url="https://example.org")

        assert response.status_code == 503
        assert "after 5 attempts" in response.json()["detail"]

    def test_storage_failure(self, client, monkeypatch):
        async def failing_save(self, records):
            raise DatabaseError("disk full")

        monkeypatch.setattr(LinkStore, "save", failing_save)

        response = shorten(client, url="https://example.com")

        assert response.status_code == 500
        assert response.json() == {"detail": "Database error: disk full"}
        assert client.get("/api/links").json() == []


class TestRateLimit:

    def test_shorten_is_limited_per_client(self, client, monkeypatch):
        monkeypatch.setattr(limiter, "enabled", True)
        limiter.reset()
        allowed = int(RATE_LIMITS["shorten"].split("/")[0])

        for i in range(allowed):
            assert shorten(client, url=f"https://example.com/{i}").status_code == 201

        assert shorten(client, url="https://example.com/over").status_code == 429
        assert len(client.get("/api/links").json()) == allowed
