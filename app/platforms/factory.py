"""
Factory for creating the platforms module.
"""
from .routes import create_platform_blueprint
from .services import PlatformService


def create_platforms_module(store_client, lookup) -> dict:
    """Create platforms module with service and routes."""
    service = PlatformService(store_client, lookup)
    blueprint = create_platform_blueprint(service)

    return {
        "service": service,
        "blueprint": blueprint
    }
