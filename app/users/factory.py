"""
Factory for creating the users module.
"""
from .routes import create_user_blueprint
from .services import UserService


def create_users_module(store_client, auth_module: dict) -> dict:
    """Create users module with service and routes.

    Args:
        store_client: Store client shared by the application
        auth_module: Module dict from create_auth_module

    Returns:
        Dictionary containing the service and blueprint
    """
    service = UserService(store_client, auth_module["service"])
    blueprint = create_user_blueprint(service, auth_module["auth_required"])

    return {
        "service": service,
        "blueprint": blueprint
    }
