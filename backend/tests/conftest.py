"""Shared test fixtures and configuration for backend tests."""
import pytest
from fastapi.testclient import TestClient

from imagehost.config import AppConfig, AuthSettings, StorageSettings
from imagehost.main import create_app
from imagehost.storage.service import ImageStore

TEST_PASSWORD = "s3cret-test-password"


@pytest.fixture
def password():
    return TEST_PASSWORD


@pytest.fixture
def image_root(tmp_path):
    """Storage root inside a parent dir, so escapes have somewhere to land."""
    root = tmp_path / "images"
    root.mkdir()
    return root


@pytest.fixture
def config(image_root):
    return AppConfig(
        storage=StorageSettings(image_dir=str(image_root), max_upload_bytes=1024),
        auth=AuthSettings(password=TEST_PASSWORD),
    )


@pytest.fixture
def store(image_root):
    return ImageStore(image_root, max_upload_bytes=1024)


@pytest.fixture
def api_client(config):
    """Anonymous TestClient for an app built over the temp storage root."""
    return TestClient(create_app(config), follow_redirects=False)


@pytest.fixture
def auth_client(config):
    """TestClient carrying a valid session cookie."""
    return TestClient(
        create_app(config),
        follow_redirects=False,
        headers={"Cookie": f"token={TEST_PASSWORD}"},
    )
