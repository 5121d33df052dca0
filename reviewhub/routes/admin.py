"""
Admin Routes

FLOW OVERVIEW
- /api/admin/analytics [GET]
  • Admin gate; click/view totals and top clicked products over `days`.
- /api/admin/analytics/events [POST]
  • Public; front end reports a view or click event.
- /api/admin/config [GET, PUT]
  • Admin gate; read / update site key-value settings.
- /api/admin/generate [POST]
  • Admin gate; run the review content generator once.
"""

from flask import Blueprint, jsonify, request, current_app

from ..models import AnalyticsEvent, SiteConfig, db
from ..utils.analytics_tracker import analytics_tracker
from ..utils.api_utils import request_validator
from ..utils.content_generator import generate_content
from ..utils.error_handlers import error_response
from ..utils.validators import sanitize_input
from .auth import admin_required

admin_bp = Blueprint('admin', __name__)

MAX_ANALYTICS_DAYS = 365


@admin_bp.route('/analytics', methods=['GET'])
@admin_required
def analytics_summary():
    days = request.args.get('days', 30, type=int) or 30
    days = min(max(days, 1), MAX_ANALYTICS_DAYS)
    return jsonify(AnalyticsEvent.summary(days=days))


@admin_bp.route('/analytics/events', methods=['POST'])
def record_event():
    """Record a view/click reported by the front end"""
    is_valid, data, error = request_validator.validate_json_request()
    if not is_valid:
        return jsonify(error), 400

    event_type = data.get('event_type')
    if event_type not in AnalyticsEvent.EVENT_TYPES:
        return error_response(
            f"event_type must be one of: {', '.join(AnalyticsEvent.EVENT_TYPES)}", 400, 'VALIDATION_ERROR')

    ids = {}
    for field in ('product_id', 'article_id'):
        value = data.get(field)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            return error_response(f"{field} must be an integer", 400, 'VALIDATION_ERROR')
        ids[field] = value

    event = analytics_tracker.track_event(
        event_type,
        product_id=ids['product_id'],
        article_id=ids['article_id'],
        path=sanitize_input(data.get('path') or '', 500) or None
    )
    if event is None:
        return error_response('Failed to record event', 500, 'SERVER_ERROR')

    return jsonify({'recorded': True, 'id': event.id}), 201


@admin_bp.route('/config', methods=['GET'])
@admin_required
def get_config():
    return jsonify({'config': SiteConfig.as_dict()})


@admin_bp.route('/config', methods=['PUT'])
@admin_required
def update_config():
    is_valid, data, error = request_validator.validate_json_request()
    if not is_valid:
        return jsonify(error), 400

    for key, value in data.items():
        if not isinstance(key, str) or not key.strip() or len(key) > 100:
            return error_response('Config keys must be non-empty strings (max 100 characters)',
                                  400, 'VALIDATION_ERROR')
        if value is not None and not isinstance(value, (str, int, float, bool)):
            return error_response(f"Config value for {key} must be a scalar", 400, 'VALIDATION_ERROR')

    for key, value in data.items():
        SiteConfig.set_value(key.strip(), value)
    db.session.commit()

    current_app.logger.info(f"Site config updated: {', '.join(sorted(data))}")
    return jsonify({'config': SiteConfig.as_dict()})


@admin_bp.route('/generate', methods=['POST'])
@admin_required
def run_generator():
    """Run the review generator; body is optional"""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return error_response('Request data must be a JSON object.', 400, 'INVALID_DATA_TYPE')

    limit = data.get('limit')
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= 10):
        return error_response('limit must be an integer between 1 and 10', 400, 'VALIDATION_ERROR')

    result = generate_content(
        category=sanitize_input(data.get('category') or '', 100) or None,
        keywords=sanitize_input(data.get('keywords') or '', 200) or None,
        limit=limit
    )
    return jsonify({'result': result.to_dict()})
