"""
Factory for creating the curation module.
"""
from .routes import create_curation_blueprint
from .services import CurationService


def create_curation_module(store_client, lookup, analytics_config) -> dict:
    """Create curation module (headlines, editor choices, most views)."""
    service = CurationService(store_client, lookup, image_base_url=analytics_config.image_base_url)
    blueprint = create_curation_blueprint(service)

    return {
        "service": service,
        "blueprint": blueprint
    }
