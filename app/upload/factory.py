"""
Factory for creating the upload module.
"""
from .routes import create_upload_blueprint
from .services import UploadService, create_object_storage


def create_upload_module(storage_config, auth_required, object_storage=None) -> dict:
    """Create upload module with service and routes.

    Args:
        storage_config: StorageConfig section
        auth_required: Bearer-token guard
        object_storage: Optional pre-built S3 client (created from config when omitted)

    Returns:
        Dictionary containing the service and blueprint
    """
    s3_client = object_storage if object_storage is not None else create_object_storage(storage_config)
    service = UploadService(s3_client, storage_config)
    blueprint = create_upload_blueprint(service, auth_required)

    return {
        "service": service,
        "blueprint": blueprint
    }
