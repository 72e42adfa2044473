"""
Factory for creating the categories module.
"""
from .routes import create_category_blueprint
from .services import CategoryService


def create_categories_module(store_client, analytics_config, auth_required) -> dict:
    """Create categories module with service and routes."""
    service = CategoryService(store_client, default_platform_id=analytics_config.default_platform_id)
    blueprint = create_category_blueprint(service, auth_required)

    return {
        "service": service,
        "blueprint": blueprint
    }
