"""
Article Model

FLOW OVERVIEW
- Store articles written by admins or by the content generator ("review" posts).
- Slug is derived from the title when not supplied and is unique per article.
- list_articles(...): category filter, draft visibility, pagination.
- get_by_slug / slug_exists: lookup helpers for the public API and the generator.
"""

from datetime import datetime
from .database import db
from .utils import slugify, isoformat


class Article(db.Model):
    """Content article; related to products only through the category string"""
    __tablename__ = 'articles'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(200), unique=True, nullable=False)
    excerpt = db.Column(db.String(500))
    content = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(100), index=True)
    featured_image = db.Column(db.String(500))
    author = db.Column(db.String(120))
    published = db.Column(db.Boolean, default=True, nullable=False)
    source = db.Column(db.String(20), default='manual')  # manual, generated
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    EDITABLE_FIELDS = (
        'title', 'slug', 'excerpt', 'content', 'category',
        'featured_image', 'author', 'published'
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.slug and self.title:
            self.slug = slugify(self.title)

    def __repr__(self):
        return f'<Article {self.slug}>'

    def to_dict(self, include_content=True):
        """Convert model to dictionary."""
        data = {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'excerpt': self.excerpt,
            'category': self.category,
            'featured_image': self.featured_image,
            'author': self.author,
            'published': self.published,
            'source': self.source,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
        if include_content:
            data['content'] = self.content
        return data

    def update_from_dict(self, data):
        """Apply already-validated fields; unknown keys are ignored."""
        for field in self.EDITABLE_FIELDS:
            if field in data:
                setattr(self, field, data[field])
        return self

    @classmethod
    def list_articles(cls, category=None, published_only=True, page=1, per_page=20):
        """Return (items, total) for one page of articles, newest first."""
        query = cls.query
        if published_only:
            query = query.filter(cls.published.is_(True))
        if category:
            query = query.filter(cls.category == category)

        total = query.count()
        items = (query.order_by(cls.created_at.desc(), cls.id.desc())
                 .offset((page - 1) * per_page)
                 .limit(per_page)
                 .all())
        return items, total

    @classmethod
    def get_by_slug(cls, slug):
        return cls.query.filter_by(slug=slug).first()

    @classmethod
    def slug_exists(cls, slug, exclude_id=None):
        query = cls.query.filter_by(slug=slug)
        if exclude_id is not None:
            query = query.filter(cls.id != exclude_id)
        return db.session.query(query.exists()).scalar()

    @classmethod
    def categories(cls):
        rows = db.session.query(cls.category).filter(cls.category.isnot(None)).distinct().all()
        return sorted(row[0] for row in rows if row[0])
