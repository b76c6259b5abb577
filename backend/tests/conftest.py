"""Shared test fixtures and configuration for backend tests."""
import pytest
from fastapi.testclient import TestClient

from imagedrop.config import AppConfig, AuthSettings, StorageSettings
from imagedrop.main import create_app

API_KEY = "test-api-key"


@pytest.fixture
def upload_dir(tmp_path):
    """Storage directory for one test, created by the app on startup."""
    return tmp_path / "uploads"


@pytest.fixture
def app_config(upload_dir):
    """Config injected into the app instead of reading the environment."""
    return AppConfig(
        storage=StorageSettings(upload_dir=str(upload_dir)),
        auth=AuthSettings(api_key=API_KEY),
        public_hostname="http://localhost:3000",
    )


@pytest.fixture
def api_client(app_config):
    """Provide a TestClient with lifespan events run.

    Entering the client creates the upload directory and sentinel; leaving it
    waits for background sweeps.
    """
    with TestClient(create_app(app_config)) as client:
        yield client


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {API_KEY}"}
