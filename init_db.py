#!/usr/bin/env python3
"""
Install script: create tables, seed default site settings and, when
ADMIN_EMAIL / ADMIN_PASSWORD are set, the first admin account.

Usage: python init_db.py
"""

import sys

from reviewhub import create_app
from reviewhub.models import db, User, SiteConfig
from reviewhub.utils.auth_utils import create_user


def init_db(app):
    """Create schema and seed data; returns the number of config keys added"""
    with app.app_context():
        db.create_all()
        added = SiteConfig.seed_defaults()
        print(f"Database ready at {app.config['SQLALCHEMY_DATABASE_URI']} ({added} settings seeded)")

        email = app.config.get('ADMIN_EMAIL')
        password = app.config.get('ADMIN_PASSWORD')
        if email and password:
            if User.query.filter_by(email=email.strip().lower()).first():
                print(f"Admin {email} already exists")
            else:
                user = create_user(email, password, role='admin')
                print(f"Admin {user.email} created (user_id {user.user_id})")
        else:
            print("ADMIN_EMAIL/ADMIN_PASSWORD not set; run create_admin.py to add an admin")
        return added


if __name__ == "__main__":
    try:
        init_db(create_app())
    except ValueError as e:
        print(f"Initialization failed: {e}")
        sys.exit(1)
