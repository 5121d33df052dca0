"""
Main Routes

FLOW OVERVIEW
- /health [GET]
  • JSON health check.
- /go/<product_id> [GET]
  • Record a click and redirect to the product's affiliate link.
"""

from datetime import datetime

from flask import Blueprint, jsonify, redirect, current_app

from ..models import Product, SiteConfig, db
from ..utils.affiliate import build_affiliate_link, resolve_affiliate_tag
from ..utils.analytics_tracker import analytics_tracker
from ..utils.error_handlers import error_response

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    """Health check endpoint"""
    return jsonify({'status': 'healthy', 'timestamp': datetime.utcnow().isoformat()})


@main_bp.route('/go/<int:product_id>')
def affiliate_redirect(product_id):
    """Outbound affiliate redirect with click tracking"""
    product = db.session.get(Product, product_id)
    if product is None:
        return error_response('Product not found', 404, 'NOT_FOUND')

    tag = resolve_affiliate_tag(current_app.config, SiteConfig.get_value('affiliate_tag'))
    try:
        target = build_affiliate_link(product.affiliate_url, tag)
    except ValueError:
        current_app.logger.warning(f"Product {product_id} has no usable affiliate link")
        return error_response('Product has no affiliate link', 404, 'NO_AFFILIATE_LINK')

    analytics_tracker.track_click(product)
    return redirect(target, code=302)
