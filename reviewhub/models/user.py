"""
User Model

Admin/editor accounts used to sign in to the admin API. The email address is
the login identifier and is the only uniqueness rule enforced on users.
"""

from datetime import datetime
from .database import db
from .utils import generate_user_id, isoformat


class User(db.Model):
    """User model for authentication of admin routes"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(12), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), default='admin')  # admin, editor
    status = db.Column(db.String(20), default='active')  # active, disabled
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_login = db.Column(db.DateTime)

    ROLES = ('admin', 'editor')

    def __init__(self, email, password_hash, role='admin'):
        """Initialize a new user with input validation"""
        # Import validators here to avoid circular imports
        from ..utils.validators import validate_email, validate_password_hash

        email_validation = validate_email(email)
        if not email_validation.is_valid:
            raise ValueError(email_validation.error_message)

        hash_validation = validate_password_hash(password_hash)
        if not hash_validation.is_valid:
            raise ValueError(hash_validation.error_message)

        if role not in self.ROLES:
            raise ValueError(f"Role must be one of: {', '.join(self.ROLES)}")

        self.email = email_validation.sanitized_value
        self.password_hash = hash_validation.sanitized_value
        self.user_id = generate_user_id()
        self.role = role
        self.status = 'active'

    def __repr__(self):
        return f'<User {self.email} ({self.role})>'

    def is_active(self):
        """Check if user account is active"""
        return self.status == 'active'

    def is_admin(self):
        """Check if user may call admin routes"""
        return self.role == 'admin'

    def update_last_login(self):
        """Update the last login timestamp"""
        self.last_login = datetime.utcnow()
        db.session.commit()

    def to_dict(self):
        """Public representation; never includes the password hash."""
        return {
            'user_id': self.user_id,
            'email': self.email,
            'role': self.role,
            'status': self.status,
            'created_at': isoformat(self.created_at),
            'last_login': isoformat(self.last_login)
        }
