"""
Authentication Utilities

This module contains password hashing (bcrypt), admin account creation,
credential checks and JWT sign/verify for the admin API.
"""

import logging
from datetime import datetime, timedelta

import bcrypt
import jwt
from flask import current_app

from ..models import db, User
from .validators import validate_email, validate_password_strength

logger = logging.getLogger(__name__)

JWT_ALGORITHM = 'HS256'


def hash_password(password):
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password, password_hash):
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False


def create_user(email, password, role='admin'):
    """Create a new account; raises ValueError on invalid input or duplicate email"""
    email_validation = validate_email(email)
    if not email_validation.is_valid:
        raise ValueError(email_validation.error_message)

    password_validation = validate_password_strength(password)
    if not password_validation.is_valid:
        raise ValueError(password_validation.error_message)

    email = email_validation.sanitized_value
    if User.query.filter_by(email=email).first():
        raise ValueError("User with this email already exists")

    user = User(email=email, password_hash=hash_password(password), role=role)
    db.session.add(user)
    db.session.commit()

    logger.info(f"Created {role} account {user.user_id}")
    return user


def authenticate_user(email, password):
    """Authenticate user with email and password"""
    if not email or not password:
        return None

    user = User.query.filter_by(email=email.strip().lower()).first()

    # Only active users can authenticate
    if user and user.is_active() and verify_password(password, user.password_hash):
        user.update_last_login()
        return user

    return None


def generate_jwt_token(user, expires_in=None):
    """Generate a signed JWT for an authenticated user"""
    if expires_in is None:
        expires_in = current_app.config.get('JWT_ACCESS_TOKEN_EXPIRES', 3600)

    now = datetime.utcnow()
    payload = {
        'user_id': user.user_id,
        'role': user.role,
        'iat': now,
        'exp': now + timedelta(seconds=int(expires_in))
    }
    return jwt.encode(payload, current_app.config['JWT_SECRET_KEY'], algorithm=JWT_ALGORITHM)


def verify_jwt_token(token):
    """Verify and decode a JWT token; None when expired or invalid"""
    if not token:
        return None
    try:
        return jwt.decode(token, current_app.config['JWT_SECRET_KEY'], algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired JWT")
        return None
    except jwt.InvalidTokenError:
        logger.info("Rejected invalid JWT")
        return None


def extract_bearer_token(request):
    """Return the token from an `Authorization: Bearer <token>` header, or None"""
    auth_header = (request.headers.get('Authorization') or '').strip()
    if auth_header.lower().startswith('bearer '):
        token = auth_header.split(' ', 1)[1].strip()
        return token or None
    return None


def get_user_from_token(token):
    """Resolve the user referenced by a valid token"""
    payload = verify_jwt_token(token)
    if not payload or 'user_id' not in payload:
        return None
    return User.query.filter_by(user_id=payload['user_id']).first()
