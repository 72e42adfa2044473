"""
Shared fixtures: fake store and object storage, and a fully wired Flask
application.
"""
import json
from datetime import datetime, timezone

import pytest

from config_manager import ConfigManager
from app.main import create_app
from fakes import FakeObjectStorage, make_store


@pytest.fixture
def store():
    return make_store()


@pytest.fixture
def object_storage():
    return FakeObjectStorage()


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
    for name in ("JWT_SECRET", "IMAGE_URL", "S3_PUBLIC_BASE_URL", "MAX_UPLOAD_MB",
                 "LOOKUP_BATCH_SIZE", "LOOKUP_WORKERS", "APP_PORT", "APP_HOST", "APP_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    config_file = tmp_path / "cms_config.json"
    config_file.write_text(json.dumps({
        "auth": {"jwt_secret": "test-secret-key-with-at-least-32-bytes"},
        "storage": {"public_base_url": "https://cdn.example.com", "max_upload_mb": 1},
        "analytics": {"image_base_url": "https://img.example.com/"},
    }))
    return ConfigManager(str(config_file))


@pytest.fixture
def app(config_manager, store, object_storage):
    flask_app = create_app(
        config_manager,
        store_client=store,
        object_storage=object_storage,
        view_runner=lambda target, *args: target(*args),
        bcrypt_rounds=4,
    )
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    auth_service = app.extensions["cms_modules"]["auth"]["service"]
    token = auth_service.issue_token(
        {"user_id": 7, "email": "jane@example.com"}, now=datetime.now(timezone.utc)
    )
    return {"Authorization": f"Bearer {token}"}
