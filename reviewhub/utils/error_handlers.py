"""
Error Handlers

This module contains error handling utilities and functions. Every error leaves
the API as a JSON body `{error, error_code}`.
"""

import logging
from flask import jsonify

logger = logging.getLogger(__name__)


def error_response(message, status_code, error_code=None):
    """Build a JSON error response tuple"""
    body = {'error': message}
    if error_code:
        body['error_code'] = error_code
    return jsonify(body), status_code


def register_error_handlers(app):
    """Register error handlers with the Flask app"""

    @app.errorhandler(400)
    def bad_request(error):
        return error_response('Bad request.', 400, 'BAD_REQUEST')

    @app.errorhandler(404)
    def not_found(error):
        return error_response('The requested resource does not exist.', 404, 'NOT_FOUND')

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('Method not allowed.', 405, 'METHOD_NOT_ALLOWED')

    @app.errorhandler(500)
    def internal_error(error):
        from ..models import db
        db.session.rollback()
        logger.error(f"Unhandled server error: {error}")
        return error_response('Something went wrong on our end. Please try again later.',
                              500, 'SERVER_ERROR')
