"""
Curation Routes
"""

from flask import Blueprint, request

from analytics_core.errors import RequestValidationError

from ..responses import json_body, json_endpoint, parse_model, success
from .models import EditorChoiceBatch, HeadlineBatch
from .services import CurationService


def _platform_id() -> str:
    platform_id = request.args.get("platform_id", "").strip()
    if not platform_id:
        raise RequestValidationError("platform_id is required")
    return platform_id


def create_curation_blueprint(curation_service: CurationService) -> Blueprint:
    """Create curation blueprint with routes."""
    bp = Blueprint('curation', __name__)

    @bp.route('/headlines', methods=['GET'])
    @json_endpoint("Failed to fetch headlines")
    def list_headlines():
        return success("success", curation_service.list_headlines())

    @bp.route('/headlines', methods=['POST'])
    @json_endpoint("Failed to process headlines")
    def save_headlines():
        """Upsert headline placements; query parameter platform_id is required."""
        platform_id = _platform_id()
        batch = parse_model(HeadlineBatch, json_body())
        results = curation_service.save_headlines(platform_id, batch.headlines)
        return success("Headlines processed successfully", results, 201)

    @bp.route('/editor-choices', methods=['GET'])
    @json_endpoint("Failed to fetch editor choices")
    def list_editor_choices():
        return success("success", curation_service.list_editor_choices())

    @bp.route('/editor-choices', methods=['POST'])
    @json_endpoint("Failed to process editor choices")
    def save_editor_choices():
        platform_id = _platform_id()
        batch = parse_model(EditorChoiceBatch, json_body())
        results = curation_service.save_editor_choices(platform_id, batch.headlines)
        return success("Editor choices processed successfully", results, 201)

    @bp.route('/most-views', methods=['GET'])
    @json_endpoint("Failed to fetch most views")
    def most_views():
        return success("success", curation_service.most_viewed())

    return bp
