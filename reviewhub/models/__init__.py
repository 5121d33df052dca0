"""
Database Models Package

FLOW OVERVIEW
- Centralizes SQLAlchemy DB instance and model imports for convenient usage.
- Exposes: db, User, Product, Article, AnalyticsEvent, SiteConfig.
"""

from .database import db
from .user import User
from .product import Product
from .article import Article
from .analytics import AnalyticsEvent
from .site_config import SiteConfig

__all__ = [
    'db',
    'User',
    'Product',
    'Article',
    'AnalyticsEvent',
    'SiteConfig'
]
