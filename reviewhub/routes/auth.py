"""
Authentication Routes

FLOW OVERVIEW
- /api/auth/login [POST]
  • Validate JSON credentials → authenticate → return a signed bearer token.
- /api/auth/me [GET]
  • Admin gate; return the account behind the token.

admin_required and current_admin are used by the api and admin blueprints to
protect write routes and reveal drafts.
"""

from functools import wraps

from flask import Blueprint, request, jsonify, current_app, g

from ..utils.auth_utils import (
    authenticate_user, generate_jwt_token, extract_bearer_token, get_user_from_token
)
from ..utils.api_utils import request_validator, client_ip
from ..utils.error_handlers import error_response

auth_bp = Blueprint('auth', __name__)


def admin_required(f):
    """Decorator to require a valid admin bearer token"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = extract_bearer_token(request)
        if not token:
            return error_response('Unauthorized. Bearer token required.', 401, 'MISSING_TOKEN')

        user = get_user_from_token(token)
        if user is None:
            return error_response('Unauthorized. Invalid or expired token.', 401, 'INVALID_TOKEN')

        if not user.is_active() or not user.is_admin():
            return error_response('Forbidden. Admin access required.', 403, 'FORBIDDEN')

        g.current_user = user
        return f(*args, **kwargs)
    return decorated_function


def current_admin():
    """Return the admin behind the request's bearer token, or None (no error)."""
    token = extract_bearer_token(request)
    if not token:
        return None
    user = get_user_from_token(token)
    if user and user.is_active() and user.is_admin():
        return user
    return None


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange email/password for a bearer token"""
    is_valid, data, error = request_validator.validate_json_request()
    if not is_valid:
        return jsonify(error), 400

    email = data.get('email')
    password = data.get('password')

    if not isinstance(email, str) or not isinstance(password, str):
        return error_response('Email and password are required', 400, 'MISSING_CREDENTIALS')

    email = email.strip().lower()
    if not email or not password:
        return error_response('Email and password are required', 400, 'MISSING_CREDENTIALS')

    user = authenticate_user(email, password)
    if user is None:
        current_app.logger.info(f"Failed login for {email} from {client_ip()}")
        return error_response('Invalid email or password', 401, 'INVALID_CREDENTIALS')

    expires_in = current_app.config.get('JWT_ACCESS_TOKEN_EXPIRES', 3600)
    token = generate_jwt_token(user, expires_in=expires_in)
    current_app.logger.info(f"User {user.user_id} logged in")

    return jsonify({
        'token': token,
        'token_type': 'Bearer',
        'expires_in': expires_in,
        'user': user.to_dict()
    })


@auth_bp.route('/me')
@admin_required
def me():
    """Return the authenticated admin"""
    return jsonify({'user': g.current_user.to_dict()})
