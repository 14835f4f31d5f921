import pytest
from fastapi.testclient import TestClient

from listings.core.config import Settings
from listings.main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'listings.db'}",
        upload_dir=str(tmp_path / "uploads"),
        auto_create_tables=True,
        rate_limit="10000/minute",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def make_property(client):
    """POST a property and return the response JSON."""

    def _make(image: bytes | None = b"\xff\xd8jpeg-bytes", filename: str = "house.jpg", **fields):
        data = {"description": "Cozy cottage", "address": "1 Main St", "price": "250000"}
        data.update({k: str(v) for k, v in fields.items()})
        files = {"image": (filename, image, "image/jpeg")} if image is not None else None
        resp = client.post("/api/properties", data=data, files=files)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
