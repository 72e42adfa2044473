"""
Platform Routes
"""

from flask import Blueprint, request

from ..responses import json_endpoint, success
from .services import PlatformService


def create_platform_blueprint(platform_service: PlatformService) -> Blueprint:
    """Create blueprint for /platforms and /platform-access."""
    bp = Blueprint('platforms', __name__)

    @bp.route('/platforms', methods=['GET'])
    @json_endpoint("Failed to fetch platforms.")
    def list_platforms():
        return success("Platforms fetched.", platform_service.list_platforms())

    @bp.route('/platforms/<platform_id>', methods=['GET'])
    @json_endpoint("Failed to fetch platform.")
    def get_platform(platform_id):
        return success("Platform fetched.", platform_service.get_platform(platform_id))

    @bp.route('/platforms', methods=['POST'])
    @json_endpoint("Failed to create platform.")
    def create_platform():
        return success("Platform created.", platform_service.create_platform(request.get_json(silent=True)), 201)

    @bp.route('/platforms/<platform_id>', methods=['PUT'])
    @json_endpoint("Failed to update platform.")
    def update_platform(platform_id):
        return success("Platform updated.", platform_service.update_platform(platform_id, request.get_json(silent=True)))

    @bp.route('/platforms/<platform_id>', methods=['DELETE'])
    @json_endpoint("Failed to delete platform.")
    def delete_platform(platform_id):
        platform_service.delete_platform(platform_id)
        return success("Platform deleted.")

    @bp.route('/platform-access', methods=['GET'])
    @json_endpoint("Failed to fetch platform access.")
    def list_access():
        return success("Platform access fetched.", platform_service.list_access())

    @bp.route('/platform-access/<access_id>', methods=['GET'])
    @json_endpoint("Failed to fetch platform access.")
    def get_access(access_id):
        return success("Platform access fetched.", platform_service.get_access(access_id))

    @bp.route('/platform-access', methods=['POST'])
    @json_endpoint("Failed to grant platform access.")
    def grant_access():
        return success("Platform access granted.", platform_service.grant_access(request.get_json(silent=True)), 201)

    @bp.route('/platform-access/<access_id>', methods=['PUT'])
    @json_endpoint("Failed to update platform access.")
    def update_access(access_id):
        return success("Platform access updated.", platform_service.update_access(access_id, request.get_json(silent=True)))

    @bp.route('/platform-access/<access_id>', methods=['DELETE'])
    @json_endpoint("Failed to revoke platform access.")
    def revoke_access(access_id):
        platform_service.revoke_access(access_id)
        return success("Platform access revoked.")

    return bp
