#!/usr/bin/env python3
"""
ReviewHub application entry point.

This module selects configuration based on environment variables, creates the
Flask application via `create_app`, and creates tables eagerly for in-memory
databases. When executed directly, it runs the development server. In
production, a WSGI server should import `app` from this module.

Environment variables of interest:
- FLASK_ENV: if set to 'testing', enables in-memory DB and testing flags.
- DATABASE_URL: database URI; 'sqlite:///:memory:' forces table creation here.
- SECRET_KEY, JWT_SECRET_KEY, MARKETPLACE_*: consumed by `create_app`.
"""

import os
from reviewhub import create_app
from reviewhub.models import db, SiteConfig

if os.getenv('FLASK_ENV') == 'testing':
    test_config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': os.getenv('DATABASE_URL', 'sqlite:///:memory:'),
        'SECRET_KEY': os.getenv('SECRET_KEY', 'test-secret-key'),
        'JWT_SECRET_KEY': os.getenv('JWT_SECRET_KEY', 'test-jwt-secret-key'),
    }
    app = create_app(test_config)
else:
    app = create_app()

if app.config['SQLALCHEMY_DATABASE_URI'] == 'sqlite:///:memory:':
    with app.app_context():
        db.create_all()
        SiteConfig.seed_defaults()
        app.logger.info("In-memory database initialized")

if __name__ == '__main__':
    app.run(debug=os.getenv('FLASK_ENV') != 'production', host='0.0.0.0',
            port=int(os.getenv('PORT', 5000)))
