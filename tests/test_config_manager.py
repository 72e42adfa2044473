"""
Test cases for the configuration management system.
Tests config loading, environment overrides, and section access.
"""

import json
from pathlib import Path

import pytest

from config_manager import (
    AnalyticsConfig,
    AppConfig,
    AuthConfig,
    ConfigManager,
    StorageConfig,
)

ENV_VARS = (
    "APP_HOST", "APP_PORT", "APP_DEBUG", "SUPABASE_URL", "SUPABASE_KEY",
    "S3_ENDPOINT_URL", "S3_ACCESS_KEY", "S3_SECRET_KEY", "S3_REGION", "S3_BUCKET",
    "S3_PUBLIC_BASE_URL", "MAX_UPLOAD_MB", "JWT_SECRET", "TOKEN_TTL_MINUTES",
    "LOOKUP_BATCH_SIZE", "LOOKUP_WORKERS", "IMAGE_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestConfigManager:
    """Test the ConfigManager class functionality."""

    def test_defaults_without_file(self, tmp_path):
        manager = ConfigManager(str(tmp_path / "missing.json"))

        app_config = manager.get_app_config()
        assert isinstance(app_config, AppConfig)
        assert app_config.port == 3000
        assert app_config.api_prefix == "/api"

        storage = manager.get_storage_config()
        assert isinstance(storage, StorageConfig)
        assert storage.bucket == "portal-bucket"
        assert storage.max_upload_mb == 10

        analytics = manager.get_analytics_config()
        assert isinstance(analytics, AnalyticsConfig)
        assert analytics.lookup_batch_size == 100
        assert analytics.lookup_workers == 1
        assert analytics.default_platform_id == "xyzonemedia"

    def test_load_config_from_file(self, tmp_path):
        config_file = tmp_path / "cms_config.json"
        config_file.write_text(json.dumps({
            "app": {"port": 8080},
            "auth": {"jwt_secret": "from-file", "token_ttl_minutes": 5},
        }))
        manager = ConfigManager(str(config_file))

        app_config = manager.get_app_config()
        assert app_config.port == 8080
        assert app_config.host == "0.0.0.0"

        auth = manager.get_auth_config()
        assert isinstance(auth, AuthConfig)
        assert auth.jwt_secret == "from-file"
        assert auth.token_ttl_minutes == 5
        assert auth.jwt_algorithm == "HS256"

    def test_invalid_json_keeps_defaults(self, tmp_path):
        config_file = tmp_path / "cms_config.json"
        config_file.write_text("{not json")
        manager = ConfigManager(str(config_file))
        assert manager.get_app_config().port == 3000

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "cms_config.json"
        config_file.write_text(json.dumps({"app": {"port": 8080}}))
        monkeypatch.setenv("APP_PORT", "9000")
        monkeypatch.setenv("APP_DEBUG", "TRUE")
        monkeypatch.setenv("SUPABASE_URL", "https://db.example.com")
        monkeypatch.setenv("LOOKUP_BATCH_SIZE", "25")
        monkeypatch.setenv("IMAGE_URL", "https://img.example.com/")

        manager = ConfigManager(str(config_file))

        assert manager.get_app_config().port == 9000
        assert manager.get_app_config().debug is True
        assert manager.get_database_config().supabase_url == "https://db.example.com"
        assert manager.get_analytics_config().lookup_batch_size == 25
        assert manager.get_analytics_config().image_base_url == "https://img.example.com/"

    def test_invalid_batch_size(self, tmp_path):
        config_file = tmp_path / "cms_config.json"
        config_file.write_text(json.dumps({"analytics": {"lookup_batch_size": 0}}))
        manager = ConfigManager(str(config_file))

        with pytest.raises(ValueError):
            manager.get_analytics_config()

    def test_save_and_reload(self, tmp_path):
        config_file = tmp_path / "cms_config.json"
        manager = ConfigManager(str(config_file))
        manager._config["app"]["port"] = 4000
        manager.save_config()

        saved = json.loads(Path(config_file).read_text())
        assert saved["app"]["port"] == 4000

        reloaded = ConfigManager(str(config_file))
        assert reloaded.get_app_config().port == 4000

    def test_sections_are_copies(self, tmp_path):
        manager = ConfigManager(str(tmp_path / "missing.json"))
        manager.get_app_config().port = 1
        assert manager.get_app_config().port == 3000
