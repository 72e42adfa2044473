"""
Factory for creating the auth module.
"""
from .guards import create_auth_required
from .routes import create_auth_blueprint
from .services import AuthService


def create_auth_module(store_client, auth_config, bcrypt_rounds=None) -> dict:
    """Create auth module with service, routes and the bearer-token guard.

    Returns:
        Dictionary containing the service, blueprint and ``auth_required`` decorator
    """
    service = AuthService(store_client, auth_config, bcrypt_rounds=bcrypt_rounds)
    blueprint = create_auth_blueprint(service)

    return {
        "service": service,
        "blueprint": blueprint,
        "auth_required": create_auth_required(service),
    }
