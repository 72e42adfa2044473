import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

# Import configuration management
sys.path.append(str(Path(__file__).parent.parent))
from config_manager import ConfigManager

from analytics_core.joiner import EntityLookup
from analytics_core.logging_config import setup_logging
from analytics_core.store import create_store_client

from app.analytics.factory import create_analytics_module
from app.articles.factory import create_articles_module
from app.auth.factory import create_auth_module
from app.categories.factory import create_categories_module
from app.curation.factory import create_curation_module
from app.platforms.factory import create_platforms_module
from app.responses import failure
from app.upload.factory import create_upload_module
from app.users.factory import create_users_module

logger = logging.getLogger(__name__)


def create_app(
    config_manager: Optional[ConfigManager] = None,
    store_client=None,
    object_storage=None,
    view_runner=None,
    bcrypt_rounds: Optional[int] = None,
) -> Flask:
    """Build the CMS application.

    Args:
        config_manager: Configuration source (defaults to cms_config.json + environment)
        store_client: Supabase client; created from the database config when omitted
        object_storage: boto3 S3 client; created from the storage config when omitted
        view_runner: Scheduler for article view increments (defaults to a daemon thread)
        bcrypt_rounds: Optional bcrypt rounds (for testing)

    Returns:
        Configured Flask application
    """
    config_manager = config_manager or ConfigManager()
    app_config = config_manager.get_app_config()
    analytics_config = config_manager.get_analytics_config()

    if store_client is None:
        store_client = create_store_client(config_manager.get_database_config())

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1, x_prefix=1)
    app.json.sort_keys = False
    app.config["MAX_CONTENT_LENGTH"] = (config_manager.get_storage_config().max_upload_mb + 1) * 1024 * 1024

    lookup = EntityLookup(
        store_client,
        batch_size=analytics_config.lookup_batch_size,
        workers=analytics_config.lookup_workers,
    )

    auth_module = create_auth_module(store_client, config_manager.get_auth_config(), bcrypt_rounds=bcrypt_rounds)
    auth_required = auth_module["auth_required"]

    modules = {
        "auth": auth_module,
        "analytics": create_analytics_module(store_client, lookup, analytics_config, view_runner=view_runner),
        "articles": create_articles_module(store_client, lookup, auth_required),
        "categories": create_categories_module(store_client, analytics_config, auth_required),
        "users": create_users_module(store_client, auth_module),
        "curation": create_curation_module(store_client, lookup, analytics_config),
        "platforms": create_platforms_module(store_client, lookup),
        "upload": create_upload_module(
            config_manager.get_storage_config(), auth_required, object_storage=object_storage
        ),
    }

    for module in modules.values():
        app.register_blueprint(module["blueprint"], url_prefix=app_config.api_prefix)
    app.extensions["cms_modules"] = modules

    @app.errorhandler(404)
    def not_found(_error):
        return failure("Route not found", None, 404)

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return failure("Method not allowed", None, 405)

    @app.errorhandler(413)
    def too_large(_error):
        return failure("File too large", None, 413)

    @app.route("/health")
    def health():
        return {"status": "ok"}

    logger.info(f"Registered {len(modules)} modules under {app_config.api_prefix}")
    return app


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(description="News CMS backend with visitor analytics")
    parser.add_argument("--port", type=int, help="Port to run the server on")
    parser.add_argument("--host", type=str, help="Host to bind the server to")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("--config", type=str, default="cms_config.json", help="Path to the JSON config file")
    args = parser.parse_args()

    config_manager = ConfigManager(args.config)
    app_config = config_manager.get_app_config()

    # Override configuration with command line arguments
    if args.port:
        app_config.port = args.port
    if args.host:
        app_config.host = args.host
    if args.debug:
        app_config.debug = args.debug

    setup_logging(debug=app_config.debug)
    app = create_app(config_manager)
    logger.info(f"Serving on {app_config.host}:{app_config.port}")
    app.run(host=app_config.host, port=app_config.port, debug=app_config.debug)


if __name__ == "__main__":
    main()
