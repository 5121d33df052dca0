"""
Test configuration and shared fixtures for ReviewHub tests.

This file contains:
- Centralized test configuration
- Shared fixtures used across multiple test files
- Common test utilities
"""

import pytest
from decimal import Decimal
from reviewhub import create_app
from reviewhub.models import db, User, Product, Article
from reviewhub.utils.auth_utils import hash_password, generate_jwt_token


# Centralized test configuration
TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SECRET_KEY': 'test-secret-key',
    'JWT_SECRET_KEY': 'test-jwt-secret-key',
    'JWT_ACCESS_TOKEN_EXPIRES': 3600,
    'MARKETPLACE_API_URL': 'https://marketplace.example.test/paapi5',
    'MARKETPLACE_ACCESS_KEY': None,
    'MARKETPLACE_SECRET_KEY': None,
    'MARKETPLACE_PARTNER_TAG': None,
    'AFFILIATE_TAG': 'reviewhub-20',
    'SITE_NAME': 'ReviewHub',
    'CONTENT_DEFAULT_CATEGORY': 'electronics',
    'CONTENT_DEFAULT_KEYWORDS': 'best sellers',
    'CONTENT_ITEM_COUNT': 5,
    'LOG_LEVEL': 'WARNING'
}

ADMIN_PASSWORD = 'AdminPass123!'


@pytest.fixture
def app():
    """Create and configure a new app instance for each test."""
    app = create_app(TEST_CONFIG)
    return app


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def app_context(app):
    """Create an application context for database operations."""
    with app.app_context():
        yield


@pytest.fixture
def db_session(app_context):
    """Create a database session and clean up after tests."""
    db.create_all()
    yield db.session
    db.session.remove()
    db.drop_all()


@pytest.fixture
def admin_user(db_session):
    """Create an active admin account."""
    user = User(email='admin@example.com', password_hash=hash_password(ADMIN_PASSWORD))
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def editor_user(db_session):
    """Create an active non-admin account."""
    user = User(email='editor@example.com', password_hash=hash_password(ADMIN_PASSWORD), role='editor')
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def auth_headers(admin_user):
    """Authorization header carrying a valid admin token."""
    token = generate_jwt_token(admin_user)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def sample_product(db_session):
    """Create a stored product with an affiliate link."""
    product = Product(
        name='Acme Noise Cancelling Headphones',
        description='Active noise cancelling\n30 hour battery\nUSB-C charging',
        price=Decimal('199.99'),
        currency='USD',
        rating=4.6,
        review_count=1250,
        image_url='https://images.example.test/acme-headphones.jpg',
        affiliate_url='https://www.amazon.com/dp/B0TEST0001',
        category='electronics'
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture
def sample_article(db_session):
    """Create a published article."""
    article = Article(
        title='Best Budget Headphones',
        content='<p>Our picks.</p>',
        excerpt='Our picks for every budget.',
        category='electronics',
        published=True
    )
    db_session.add(article)
    db_session.commit()
    return article


@pytest.fixture
def draft_article(db_session):
    """Create an unpublished article."""
    article = Article(
        title='Upcoming Laptop Guide',
        content='<p>Work in progress.</p>',
        category='computers',
        published=False
    )
    db_session.add(article)
    db_session.commit()
    return article
