"""
App-level behaviour: health checks, error bodies, headers, config.
"""
from fastapi.testclient import TestClient

from listings.core.config import Settings
from listings.main import create_app


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_health_db(self, client):
        assert client.get("/health/db").json() == {"status": "ok", "database": "connected"}


class TestErrorBodies:
    def test_unknown_route_has_message(self, client):
        resp = client.get("/api/nothing-here")
        assert resp.status_code == 404
        assert "message" in resp.json()

    def test_wrong_method_has_message(self, client):
        resp = client.patch("/api/properties")
        assert resp.status_code == 405
        assert "message" in resp.json()

    def test_rate_limit(self, settings):
        settings.rate_limit = "2/minute"
        with TestClient(create_app(settings)) as c:
            assert c.get("/health").status_code == 200
            assert c.get("/health").status_code == 200
            resp = c.get("/health")
        assert resp.status_code == 429
        assert "Rate limit exceeded" in resp.json()["message"]

    def test_rate_limit_covers_property_routes(self, settings):
        settings.rate_limit = "2/minute"
        with TestClient(create_app(settings)) as c:
            assert c.get("/api/properties").status_code == 200
            assert c.post("/api/properties", data={"address": "1 Main St"}).status_code == 201
            resp = c.get("/api/properties")
        assert resp.status_code == 429
        assert "message" in resp.json()


class TestHeaders:
    def test_security_headers(self, client):
        resp = client.get("/health")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" not in resp.headers

    def test_cors_allows_any_origin_by_default(self, client):
        resp = client.get("/api/properties", headers={"Origin": "http://example.com"})
        assert resp.headers["access-control-allow-origin"] == "*"


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("UPLOAD_DIR", raising=False)
        s = Settings(_env_file=None)
        assert s.port == 5000
        assert s.upload_dir == "uploads"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/listings")
        s = Settings(_env_file=None)
        assert s.port == 8080
        assert s.database_url == "postgresql+asyncpg://u:p@db/listings"

    def test_upload_dir_created(self, settings, tmp_path):
        create_app(settings)
        assert (tmp_path / "uploads").is_dir()
