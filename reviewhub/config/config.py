"""
Application Configuration

FLOW OVERVIEW
- Config.__init__
  • Reads FLASK_ENV to select which .env file to load (dev/prod). Testing bypasses file load.
- Properties expose configuration values, defaulting to sensible development-safe defaults.
- Marketplace credentials default to None: with any of them missing the content
  generator runs in fallback mode against stored products.
"""

import os
from dotenv import load_dotenv


class Config:
    """Base configuration class"""

    def __init__(self):
        # Load environment variables based on FLASK_ENV
        env_file = os.getenv('FLASK_ENV', 'development')
        if env_file == 'testing':
            # For testing, don't load config files, use environment variables directly
            pass
        elif env_file == 'production':
            load_dotenv('config.prod.env')
        else:
            load_dotenv('config.env')  # Default to development

    @property
    def SECRET_KEY(self):
        """Application secret key"""
        return os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        """Database connection URI"""
        return os.getenv('DATABASE_URL', 'sqlite:///reviewhub.db')

    @property
    def SQLALCHEMY_TRACK_MODIFICATIONS(self):
        """SQLAlchemy track modifications setting"""
        return False

    @property
    def JWT_SECRET_KEY(self):
        """JWT signing secret"""
        return os.getenv('JWT_SECRET_KEY', 'jwt-secret-key-change-in-production')

    @property
    def JWT_ACCESS_TOKEN_EXPIRES(self):
        """JWT access token expiration time in seconds"""
        return int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 3600))

    @property
    def MARKETPLACE_API_URL(self):
        """Base URL of the marketplace product API"""
        return os.getenv('MARKETPLACE_API_URL', 'https://webservices.amazon.com/paapi5')

    @property
    def MARKETPLACE_ACCESS_KEY(self):
        """Marketplace API access key"""
        return os.getenv('MARKETPLACE_ACCESS_KEY')

    @property
    def MARKETPLACE_SECRET_KEY(self):
        """Marketplace API secret key"""
        return os.getenv('MARKETPLACE_SECRET_KEY')

    @property
    def MARKETPLACE_PARTNER_TAG(self):
        """Partner tag sent with marketplace search requests"""
        return os.getenv('MARKETPLACE_PARTNER_TAG')

    @property
    def MARKETPLACE_TIMEOUT(self):
        """Marketplace request timeout in seconds"""
        return float(os.getenv('MARKETPLACE_TIMEOUT', 10))

    @property
    def AFFILIATE_TAG(self):
        """Tracking identifier appended to outbound affiliate links"""
        return os.getenv('AFFILIATE_TAG') or os.getenv('MARKETPLACE_PARTNER_TAG')

    @property
    def SITE_NAME(self):
        """Public site name used in generated articles"""
        return os.getenv('SITE_NAME', 'ReviewHub')

    @property
    def SITE_URL(self):
        """Public site URL"""
        return os.getenv('SITE_URL', 'http://localhost:3000')

    @property
    def CONTENT_DEFAULT_CATEGORY(self):
        """Category used by the content generator when none is given"""
        return os.getenv('CONTENT_DEFAULT_CATEGORY', 'electronics')

    @property
    def CONTENT_DEFAULT_KEYWORDS(self):
        """Search keywords used by the content generator when none are given"""
        return os.getenv('CONTENT_DEFAULT_KEYWORDS', 'best sellers')

    @property
    def CONTENT_ITEM_COUNT(self):
        """Number of marketplace items requested per generation run"""
        return int(os.getenv('CONTENT_ITEM_COUNT', 10))

    @property
    def ADMIN_EMAIL(self):
        """Bootstrap admin email used by init_db.py"""
        return os.getenv('ADMIN_EMAIL')

    @property
    def ADMIN_PASSWORD(self):
        """Bootstrap admin password used by init_db.py"""
        return os.getenv('ADMIN_PASSWORD')

    @property
    def LOG_LEVEL(self):
        """Root log level"""
        return os.getenv('LOG_LEVEL', 'INFO').upper()
