"""Tests for the shared-password AuthGate and the login endpoint."""
from fastapi.testclient import TestClient
from starlette.requests import Request

from imagehost.auth.service import COOKIE_NAME, AuthGate
from imagehost.config import AppConfig, AuthSettings, StorageSettings
from imagehost.main import create_app


def _request(cookie_header=None) -> Request:
    headers = []
    if cookie_header is not None:
        headers.append((b"cookie", cookie_header.encode("latin-1")))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


class TestAuthGate:
    """Tests for AuthGate cookie and password checks."""

    def test_cookie_name(self):
        assert COOKIE_NAME == "token"

    def test_valid_cookie_is_authenticated(self):
        gate = AuthGate("abc")
        assert gate.is_authenticated(_request("token=abc")) is True

    def test_cookie_among_others(self):
        gate = AuthGate("abc")
        assert gate.is_authenticated(_request("theme=dark; token=abc; lang=en")) is True

    def test_missing_cookie(self):
        gate = AuthGate("abc")
        assert gate.is_authenticated(_request()) is False
        assert gate.is_authenticated(_request("other=abc")) is False

    def test_wrong_or_partial_cookie(self):
        gate = AuthGate("abc")
        assert gate.is_authenticated(_request("token=abcd")) is False
        assert gate.is_authenticated(_request("token=ab")) is False
        assert gate.is_authenticated(_request("token=")) is False

    def test_check_password(self):
        gate = AuthGate("abc")
        assert gate.check_password("abc") is True
        assert gate.check_password("ABC") is False
        assert gate.check_password("") is False
        assert gate.check_password(None) is False

    def test_check_password_non_ascii(self):
        gate = AuthGate("pässwörd")
        assert gate.check_password("pässwörd") is True
        assert gate.check_password("passwort") is False

    def test_session_cookie_format(self):
        gate = AuthGate("abc", cookie_max_age=60)
        assert gate.session_cookie() == "token=abc; Path=/; HttpOnly; SameSite=Strict; Max-Age=60"


class TestLoginEndpoint:
    """Tests for POST /login."""

    def test_login_success_sets_cookie_and_redirects(self, api_client, password):
        response = api_client.post("/login", data={"password": password})

        assert response.status_code == 302
        assert response.headers["location"] == "/"
        assert response.headers["set-cookie"] == (
            f"token={password}; Path=/; HttpOnly; SameSite=Strict; Max-Age=86400"
        )

    def test_login_failure_renders_error_without_cookie(self, api_client):
        response = api_client.post("/login", data={"password": "wrong"})

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "Invalid password" in response.text
        assert "set-cookie" not in response.headers

    def test_login_without_password_field(self, api_client):
        response = api_client.post("/login", data={})

        assert response.status_code == 200
        assert "Invalid password" in response.text
        assert "set-cookie" not in response.headers

    def test_cookie_from_login_opens_gallery(self, api_client, password):
        login = api_client.post("/login", data={"password": password})
        assert login.status_code == 302

        response = api_client.get("/")
        assert response.status_code == 200
        assert 'action="/upload"' in response.text


class TestLoginWithPunctuatedPassword:
    """Login round trip for a password using the full cookie-safe punctuation set."""

    PASSWORD = "P@ss!#$%&'()*+-./:<=>?[]^_`{|}~"

    def test_login_cookie_opens_gallery(self, tmp_path):
        config = AppConfig(
            storage=StorageSettings(image_dir=str(tmp_path / "images")),
            auth=AuthSettings(password=self.PASSWORD),
        )
        client = TestClient(create_app(config), follow_redirects=False)

        login = client.post("/login", data={"password": self.PASSWORD})
        assert login.status_code == 302
        assert login.headers["set-cookie"].startswith(f"token={self.PASSWORD}; ")

        gallery = client.get("/", headers={"Cookie": f"token={self.PASSWORD}"})
        assert 'action="/upload"' in gallery.text
