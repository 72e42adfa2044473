"""
User Routes
"""

from flask import Blueprint

from ..responses import json_body, json_endpoint, success
from .services import UserService


def create_user_blueprint(user_service: UserService, auth_required) -> Blueprint:
    """Create user blueprint with routes."""
    bp = Blueprint('users', __name__)

    @bp.route('/users', methods=['POST'])
    @auth_required
    @json_endpoint("Failed to create user")
    def create_user():
        return success("User created successfully", user_service.create_user(json_body()), 201)

    @bp.route('/users', methods=['GET'])
    @json_endpoint("Failed to fetch users")
    def list_users():
        return success("Users fetched", user_service.list_users())

    @bp.route('/users/<user_id>', methods=['GET'])
    @json_endpoint("Failed to fetch user")
    def get_user(user_id):
        return success("User fetched", user_service.get_user(user_id))

    @bp.route('/users/<user_id>', methods=['PUT'])
    @auth_required
    @json_endpoint("Failed to update user")
    def update_user(user_id):
        return success("User updated successfully", user_service.update_user(user_id, json_body()))

    @bp.route('/users/<user_id>', methods=['DELETE'])
    @auth_required
    @json_endpoint("Failed to delete user")
    def delete_user(user_id):
        user_service.delete_user(user_id)
        return success("User deleted successfully")

    return bp
