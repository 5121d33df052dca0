#!/usr/bin/env python3
"""
Create an admin (or editor) account.

Usage: python create_admin.py <email> <password> [admin|editor]
"""

import sys

from reviewhub import create_app
from reviewhub.utils.auth_utils import create_user


def create_admin(email, password, role='admin'):
    """Create an account in the configured database"""
    app = create_app()

    with app.app_context():
        user = create_user(email, password, role=role)
        print(f"User {user.email} created")
        print(f"   User ID: {user.user_id}")
        print(f"   Role: {user.role}")
        return user


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4):
        print("Usage: python create_admin.py <email> <password> [admin|editor]")
        sys.exit(1)

    role = sys.argv[3] if len(sys.argv) == 4 else 'admin'
    try:
        create_admin(sys.argv[1], sys.argv[2], role)
    except ValueError as e:
        print(f"Could not create user: {e}")
        sys.exit(1)
