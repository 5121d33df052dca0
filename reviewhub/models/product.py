"""
Product Model

FLOW OVERVIEW
- Store affiliate products, entered by admins or pulled from the marketplace API.
- list_products(...): filtered, paginated listing for the public API.
- categories(): distinct non-empty category strings.
- upsert_from_marketplace(item): insert or refresh a row keyed by external_id.
"""

from datetime import datetime
from .database import db
from .utils import isoformat


class Product(db.Model):
    """Affiliate product listed on the site"""
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    external_id = db.Column(db.String(64), unique=True, nullable=True)  # marketplace item id (ASIN)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2))
    currency = db.Column(db.String(3), default='USD')
    rating = db.Column(db.Float)
    review_count = db.Column(db.Integer, default=0)
    image_url = db.Column(db.String(500))
    affiliate_url = db.Column(db.String(1000))
    category = db.Column(db.String(100), index=True)
    source = db.Column(db.String(20), default='manual')  # manual, marketplace
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    EDITABLE_FIELDS = (
        'external_id', 'name', 'description', 'price', 'currency', 'rating',
        'review_count', 'image_url', 'affiliate_url', 'category'
    )

    def __repr__(self):
        return f'<Product {self.id} {self.name!r}>'

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'external_id': self.external_id,
            'name': self.name,
            'description': self.description,
            'price': float(self.price) if self.price is not None else None,
            'currency': self.currency,
            'rating': self.rating,
            'review_count': self.review_count,
            'image_url': self.image_url,
            'affiliate_url': self.affiliate_url,
            'category': self.category,
            'source': self.source,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }

    def update_from_dict(self, data):
        """Apply already-validated fields; unknown keys are ignored."""
        for field in self.EDITABLE_FIELDS:
            if field in data:
                setattr(self, field, data[field])
        return self

    @classmethod
    def list_products(cls, category=None, search=None, page=1, per_page=20):
        """Return (items, total) for one page of products, newest first."""
        query = cls.query
        if category:
            query = query.filter(cls.category == category)
        if search:
            query = query.filter(cls.name.ilike(f'%{search}%'))

        total = query.count()
        items = (query.order_by(cls.created_at.desc(), cls.id.desc())
                 .offset((page - 1) * per_page)
                 .limit(per_page)
                 .all())
        return items, total

    @classmethod
    def categories(cls):
        """Distinct product categories."""
        rows = db.session.query(cls.category).filter(cls.category.isnot(None)).distinct().all()
        return sorted(row[0] for row in rows if row[0])

    @classmethod
    def upsert_from_marketplace(cls, item):
        """Insert or refresh the row for a marketplace item. Does not commit."""
        product = cls.query.filter_by(external_id=item.external_id).first()
        if product is None:
            product = cls(external_id=item.external_id, source='marketplace')
            db.session.add(product)

        product.name = item.name
        product.description = item.description
        product.price = item.price
        product.currency = item.currency or 'USD'
        product.rating = item.rating
        product.review_count = item.review_count or 0
        product.image_url = item.image_url
        product.affiliate_url = item.detail_url
        product.category = item.category
        return product
