"""
Upload Routes
"""

from flask import Blueprint, request

from ..responses import json_endpoint, success
from .services import UploadService


def create_upload_blueprint(upload_service: UploadService, auth_required) -> Blueprint:
    """Create upload blueprint with routes."""
    bp = Blueprint('upload', __name__)

    @bp.route('/upload', methods=['POST'])
    @auth_required
    @json_endpoint("Upload failed")
    def upload():
        """Store the multipart ``file`` field and return its public URL."""
        url = upload_service.upload(request.files.get("file"))
        return success("Image uploaded successfully", {"url": url}, url=url)

    @bp.route('/gallery-upload', methods=['POST'])
    @auth_required
    @json_endpoint("Upload failed")
    def gallery_upload():
        url = upload_service.upload(request.files.get("file"))
        return success("Image uploaded successfully", {"url": url}, url=url)

    @bp.route('/gallery', methods=['GET'])
    @json_endpoint("Failed to fetch gallery")
    def gallery():
        """List stored images with their public URLs, newest first."""
        images = upload_service.list_objects()
        return success("Gallery retrieved successfully", images, images=images)

    return bp
