"""
Category Routes
"""

from flask import Blueprint

from ..responses import json_body, json_endpoint, success
from .services import CategoryService


def create_category_blueprint(category_service: CategoryService, auth_required) -> Blueprint:
    """Create category blueprint with routes."""
    bp = Blueprint('categories', __name__)

    @bp.route('/categories', methods=['GET'])
    @json_endpoint("Failed to fetch categories")
    def list_categories():
        return success("Categories fetched", category_service.list_categories())

    @bp.route('/categories/<category_id>', methods=['GET'])
    @json_endpoint("Failed to fetch category")
    def get_category(category_id):
        return success("Category fetched", category_service.get_category(category_id))

    @bp.route('/categories', methods=['POST'])
    @json_endpoint("Failed to create category")
    def create_category():
        return success("Category created successfully", category_service.create_category(json_body()), 201)

    @bp.route('/categories/<category_id>', methods=['PUT'])
    @auth_required
    @json_endpoint("Failed to update category")
    def update_category(category_id):
        return success("Category updated successfully", category_service.update_category(category_id, json_body()))

    @bp.route('/categories/<category_id>', methods=['DELETE'])
    @json_endpoint("Failed to delete category")
    def delete_category(category_id):
        return success("Category deleted successfully", category_service.delete_category(category_id))

    return bp
