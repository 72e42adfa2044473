"""
Factory for creating the articles module.
"""
from .routes import create_article_blueprint
from .services import ArticleService


def create_articles_module(store_client, lookup, auth_required) -> dict:
    """Create articles module with service and routes."""
    service = ArticleService(store_client, lookup)
    blueprint = create_article_blueprint(service, auth_required)

    return {
        "service": service,
        "blueprint": blueprint
    }
