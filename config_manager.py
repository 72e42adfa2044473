"""
Configuration management for the newsroom CMS backend.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool
    api_prefix: str


@dataclass
class DatabaseConfig:
    """Managed Postgres (Supabase/PostgREST) settings."""
    supabase_url: str
    supabase_key: str


@dataclass
class StorageConfig:
    """S3-compatible object storage settings."""
    endpoint_url: Optional[str]
    access_key: str
    secret_key: str
    region: str
    bucket: str
    public_base_url: Optional[str]
    max_upload_mb: int


@dataclass
class AuthConfig:
    """Token signing settings."""
    jwt_secret: str
    jwt_algorithm: str
    token_ttl_minutes: int


@dataclass
class AnalyticsConfig:
    """Analytics reporting settings."""
    lookup_batch_size: int
    lookup_workers: int
    default_range_days: int
    image_base_url: str
    default_platform_id: str


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "cms_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        self._config = self._get_default_config()

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app": {
                "host": "0.0.0.0",
                "port": 3000,
                "debug": False,
                "api_prefix": "/api"
            },
            "database": {
                "supabase_url": "",
                "supabase_key": ""
            },
            "storage": {
                "endpoint_url": None,
                "access_key": "",
                "secret_key": "",
                "region": "us-east-1",
                "bucket": "portal-bucket",
                "public_base_url": None,
                "max_upload_mb": 10
            },
            "auth": {
                "jwt_secret": "",
                "jwt_algorithm": "HS256",
                "token_ttl_minutes": 720
            },
            "analytics": {
                "lookup_batch_size": 100,
                "lookup_workers": 1,
                "default_range_days": 30,
                "image_base_url": "",
                "default_platform_id": "xyzonemedia"
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config:
                if isinstance(values, dict):
                    self._config[section].update(values)
                else:
                    self._config[section] = values
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        # Database settings
        if os.getenv("SUPABASE_URL"):
            self._config["database"]["supabase_url"] = os.getenv("SUPABASE_URL")

        if os.getenv("SUPABASE_KEY"):
            self._config["database"]["supabase_key"] = os.getenv("SUPABASE_KEY")

        # Object storage settings
        if os.getenv("S3_ENDPOINT_URL"):
            self._config["storage"]["endpoint_url"] = os.getenv("S3_ENDPOINT_URL")

        if os.getenv("S3_ACCESS_KEY"):
            self._config["storage"]["access_key"] = os.getenv("S3_ACCESS_KEY")

        if os.getenv("S3_SECRET_KEY"):
            self._config["storage"]["secret_key"] = os.getenv("S3_SECRET_KEY")

        if os.getenv("S3_REGION"):
            self._config["storage"]["region"] = os.getenv("S3_REGION")

        if os.getenv("S3_BUCKET"):
            self._config["storage"]["bucket"] = os.getenv("S3_BUCKET")

        if os.getenv("S3_PUBLIC_BASE_URL"):
            self._config["storage"]["public_base_url"] = os.getenv("S3_PUBLIC_BASE_URL")

        if os.getenv("MAX_UPLOAD_MB"):
            self._config["storage"]["max_upload_mb"] = int(os.getenv("MAX_UPLOAD_MB"))

        # Auth settings
        if os.getenv("JWT_SECRET"):
            self._config["auth"]["jwt_secret"] = os.getenv("JWT_SECRET")

        if os.getenv("TOKEN_TTL_MINUTES"):
            self._config["auth"]["token_ttl_minutes"] = int(os.getenv("TOKEN_TTL_MINUTES"))

        # Analytics settings
        if os.getenv("LOOKUP_BATCH_SIZE"):
            self._config["analytics"]["lookup_batch_size"] = int(os.getenv("LOOKUP_BATCH_SIZE"))

        if os.getenv("LOOKUP_WORKERS"):
            self._config["analytics"]["lookup_workers"] = int(os.getenv("LOOKUP_WORKERS"))

        if os.getenv("IMAGE_URL"):
            self._config["analytics"]["image_base_url"] = os.getenv("IMAGE_URL")

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"],
            api_prefix=app_config["api_prefix"]
        )

    def get_database_config(self) -> DatabaseConfig:
        """Get database configuration."""
        db_config = self._config["database"]
        return DatabaseConfig(
            supabase_url=db_config["supabase_url"],
            supabase_key=db_config["supabase_key"]
        )

    def get_storage_config(self) -> StorageConfig:
        """Get object storage configuration."""
        storage_config = self._config["storage"]
        return StorageConfig(
            endpoint_url=storage_config["endpoint_url"],
            access_key=storage_config["access_key"],
            secret_key=storage_config["secret_key"],
            region=storage_config["region"],
            bucket=storage_config["bucket"],
            public_base_url=storage_config["public_base_url"],
            max_upload_mb=storage_config["max_upload_mb"]
        )

    def get_auth_config(self) -> AuthConfig:
        """Get auth configuration."""
        auth_config = self._config["auth"]
        return AuthConfig(
            jwt_secret=auth_config["jwt_secret"],
            jwt_algorithm=auth_config["jwt_algorithm"],
            token_ttl_minutes=auth_config["token_ttl_minutes"]
        )

    def get_analytics_config(self) -> AnalyticsConfig:
        """Get analytics configuration."""
        analytics_config = self._config["analytics"]
        batch_size = int(analytics_config["lookup_batch_size"])
        if batch_size < 1:
            raise ValueError("analytics.lookup_batch_size must be at least 1")
        return AnalyticsConfig(
            lookup_batch_size=batch_size,
            lookup_workers=max(1, int(analytics_config["lookup_workers"])),
            default_range_days=analytics_config["default_range_days"],
            image_base_url=analytics_config["image_base_url"],
            default_platform_id=analytics_config["default_platform_id"]
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)
