import os

import bcrypt
import pytest

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct horse battery"

# Set before the app is imported: logging and auth read these at import/startup.
os.environ["ADMIN_USERNAME"] = ADMIN_USERNAME
os.environ["ADMIN_PASSWORD_HASH"] = bcrypt.hashpw(ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt(4)).decode("utf-8")
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["LOG_DIR"] = ""
os.environ.pop("SCRAPER_BACKEND", None)

from fastapi.testclient import TestClient  # noqa: E402

from app import security  # noqa: E402
from app.api import app  # noqa: E402
from core.auth import issue_token  # noqa: E402
from core.store.schema import Tea  # noqa: E402


@pytest.fixture(autouse=True)
def data_file(tmp_path, monkeypatch):
    """Every test gets its own empty teas.yaml."""
    path = tmp_path / "teas.yaml"
    monkeypatch.setenv("DATA_FILE_PATH", str(path))
    return path


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    security.reset_rate_limits()
    yield
    security.reset_rate_limits()


@pytest.fixture
def client():
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def token():
    return issue_token(ADMIN_USERNAME)


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signed_in_client(client, token):
    """Browser-style client: login cookie plus a known CSRF cookie."""
    client.cookies.set("auth_token", token)
    client.cookies.set(security.CSRF_COOKIE_NAME, "csrf-test-token")
    return client


@pytest.fixture
def tea_payload():
    return {
        "name": "Dragon Well",
        "type": "Green",
        "image": "https://img.example.com/dragon-well.jpg",
        "steepTimes": [20, 25, 30],
        "caffeine": "Low caffeine",
        "caffeineLevel": "Low",
        "website": "https://shop.example.com/dragon-well",
        "brewingTemperature": "185℉ / 85℃",
        "teaWeight": "5g Tea",
    }


@pytest.fixture
def make_tea():
    def _make(**overrides) -> Tea:
        data = {
            "id": "1700000000000",
            "name": "Dragon Well",
            "type": "Green",
            "image": "https://img.example.com/dragon-well.jpg",
            "steepTimes": [20, 25, 30],
            "caffeine": "",
            "caffeineLevel": "Low",
            "website": "",
            "brewingTemperature": "",
            "teaWeight": "",
            "rating": None,
            "timesConsumed": 0,
            "lastConsumedDate": None,
        }
        data.update(overrides)
        return Tea.model_validate(data)

    return _make
