"""
API Routes

FLOW OVERVIEW
- /api/products [GET, POST]
  • List (category, q, pagination) / admin create.
- /api/products/<id> [GET, PUT, DELETE]
  • Fetch / admin update / admin delete.
- /api/articles [GET, POST]
  • List published (admins may include drafts) / admin create.
- /api/articles/<slug> [GET]
  • Full article; drafts only visible to admins.
- /api/articles/<id> [PUT, DELETE]
  • Admin update / delete.
- /api/categories [GET]
  • Distinct categories across products and articles.
- /api/status, /api/metrics [GET]
  • Service status and Prometheus exposition.
"""

import os

from flask import Blueprint, jsonify, request, current_app, Response, g
from sqlalchemy.exc import IntegrityError

from ..models import Product, Article, db
from ..models.utils import slugify
from ..utils.api_utils import request_validator, response_formatter
from ..utils.error_handlers import error_response
from ..utils.prom_metrics import metrics_latest, CONTENT_TYPE_LATEST
from ..utils.validators import validate_product_payload, validate_article_payload
from .auth import admin_required, current_admin

api_bp = Blueprint('api', __name__)


def _read_payload(validate, partial=False):
    """Return (cleaned, None) or (None, error response tuple)."""
    ok, size_error = request_validator.validate_request_size()
    if not ok:
        return None, (jsonify(size_error), 413)

    is_valid, data, error = request_validator.validate_json_request()
    if not is_valid:
        return None, (jsonify(error), 400)

    result = validate(data, partial=partial)
    if not result.is_valid:
        return None, error_response(result.error_message, 400, 'VALIDATION_ERROR')

    return result.sanitized_value, None


# --- Products -------------------------------------------------------------

@api_bp.route('/products', methods=['GET'])
def list_products():
    """List products"""
    page, per_page = request_validator.parse_pagination()
    category = (request.args.get('category') or '').strip() or None
    search = (request.args.get('q') or '').strip() or None

    items, total = Product.list_products(category=category, search=search,
                                         page=page, per_page=per_page)
    return jsonify(response_formatter.format_list_response(
        [p.to_dict() for p in items], page, per_page, total))


@api_bp.route('/products', methods=['POST'])
@admin_required
def create_product():
    """Create a product"""
    cleaned, error = _read_payload(validate_product_payload)
    if error:
        return error

    product = Product(source='manual')
    product.update_from_dict(cleaned)
    db.session.add(product)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return error_response('A product with this external_id already exists', 409, 'DUPLICATE_PRODUCT')

    current_app.logger.info(f"Product {product.id} created")
    return jsonify({'product': product.to_dict()}), 201


@api_bp.route('/products/<int:product_id>', methods=['GET'])
def get_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        return error_response('Product not found', 404, 'NOT_FOUND')
    return jsonify({'product': product.to_dict()})


@api_bp.route('/products/<int:product_id>', methods=['PUT'])
@admin_required
def update_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        return error_response('Product not found', 404, 'NOT_FOUND')

    cleaned, error = _read_payload(validate_product_payload, partial=True)
    if error:
        return error

    product.update_from_dict(cleaned)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return error_response('A product with this external_id already exists', 409, 'DUPLICATE_PRODUCT')

    return jsonify({'product': product.to_dict()})


@api_bp.route('/products/<int:product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        return error_response('Product not found', 404, 'NOT_FOUND')

    db.session.delete(product)
    db.session.commit()
    current_app.logger.info(f"Product {product_id} deleted")
    return jsonify({'deleted': True, 'id': product_id})


# --- Articles -------------------------------------------------------------

@api_bp.route('/articles', methods=['GET'])
def list_articles():
    """List articles; body content is omitted from list items"""
    page, per_page = request_validator.parse_pagination()
    category = (request.args.get('category') or '').strip() or None

    include_drafts = request_validator.parse_bool_arg('include_drafts')
    published_only = not (include_drafts and current_admin() is not None)

    items, total = Article.list_articles(category=category, published_only=published_only,
                                         page=page, per_page=per_page)
    return jsonify(response_formatter.format_list_response(
        [a.to_dict(include_content=False) for a in items], page, per_page, total))


@api_bp.route('/articles', methods=['POST'])
@admin_required
def create_article():
    """Create an article"""
    cleaned, error = _read_payload(validate_article_payload)
    if error:
        return error

    slug = cleaned.get('slug') or slugify(cleaned['title'])
    if not slug:
        return error_response('Could not derive a slug from the title; provide one', 400, 'VALIDATION_ERROR')
    if Article.slug_exists(slug):
        return error_response('An article with this slug already exists', 409, 'DUPLICATE_SLUG')
    cleaned['slug'] = slug

    article = Article(source='manual')
    article.update_from_dict(cleaned)
    if not article.author:
        article.author = g.current_user.email
    db.session.add(article)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return error_response('An article with this slug already exists', 409, 'DUPLICATE_SLUG')

    current_app.logger.info(f"Article {article.slug} created")
    return jsonify({'article': article.to_dict()}), 201


@api_bp.route('/articles/<slug>', methods=['GET'])
def get_article(slug):
    article = Article.get_by_slug(slug)
    if article is None or (not article.published and current_admin() is None):
        return error_response('Article not found', 404, 'NOT_FOUND')
    return jsonify({'article': article.to_dict()})


@api_bp.route('/articles/<int:article_id>', methods=['PUT'])
@admin_required
def update_article(article_id):
    article = db.session.get(Article, article_id)
    if article is None:
        return error_response('Article not found', 404, 'NOT_FOUND')

    cleaned, error = _read_payload(validate_article_payload, partial=True)
    if error:
        return error

    if 'slug' in cleaned and Article.slug_exists(cleaned['slug'], exclude_id=article.id):
        return error_response('An article with this slug already exists', 409, 'DUPLICATE_SLUG')

    article.update_from_dict(cleaned)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return error_response('An article with this slug already exists', 409, 'DUPLICATE_SLUG')

    return jsonify({'article': article.to_dict()})


@api_bp.route('/articles/<int:article_id>', methods=['DELETE'])
@admin_required
def delete_article(article_id):
    article = db.session.get(Article, article_id)
    if article is None:
        return error_response('Article not found', 404, 'NOT_FOUND')

    db.session.delete(article)
    db.session.commit()
    current_app.logger.info(f"Article {article_id} deleted")
    return jsonify({'deleted': True, 'id': article_id})


# --- Misc -----------------------------------------------------------------

@api_bp.route('/categories')
def list_categories():
    categories = sorted(set(Product.categories()) | set(Article.categories()))
    return jsonify({'categories': categories})


@api_bp.route('/status')
def api_status():
    """API status endpoint"""
    return jsonify({
        'status': 'operational',
        'version': current_app.config.get('VERSION', '1.0.0'),
        'environment': os.getenv('FLASK_ENV', 'development'),
        'marketplace_configured': bool(
            current_app.config.get('MARKETPLACE_ACCESS_KEY')
            and current_app.config.get('MARKETPLACE_SECRET_KEY')
            and current_app.config.get('MARKETPLACE_PARTNER_TAG')
        )
    })


@api_bp.route('/metrics')
def metrics():
    return Response(metrics_latest(), mimetype=CONTENT_TYPE_LATEST)
