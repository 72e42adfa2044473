"""
Factory for creating the analytics module.
"""
from .services import AnalyticsService
from .routes import create_analytics_blueprint
from .view_counter import ViewCounter


def create_analytics_module(store_client, lookup, analytics_config, view_runner=None) -> dict:
    """Create analytics module with service and routes.

    Args:
        store_client: Store client shared by the application
        lookup: EntityLookup for batched joins
        analytics_config: AnalyticsConfig section
        view_runner: Optional scheduler for view increments (defaults to a daemon thread)

    Returns:
        Dictionary containing the service and blueprint
    """
    view_counter = ViewCounter(store_client, runner=view_runner)
    service = AnalyticsService(
        store_client,
        lookup=lookup,
        view_counter=view_counter,
        default_range_days=analytics_config.default_range_days,
    )
    blueprint = create_analytics_blueprint(service)

    return {
        "service": service,
        "blueprint": blueprint
    }
