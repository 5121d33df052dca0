"""
Site Configuration Model

Key/value settings editable from the admin API (site name, tagline, default
affiliate tag, default generator category).
"""

from datetime import datetime
from .database import db


class SiteConfig(db.Model):
    """Single site setting."""

    __tablename__ = 'site_config'

    DEFAULTS = {
        'site_name': 'ReviewHub',
        'tagline': 'Honest reviews of the products worth buying',
        'affiliate_tag': '',
        'default_category': 'electronics',
    }

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), unique=True, nullable=False)
    value = db.Column(db.Text, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<SiteConfig {self.key}={self.value!r}>'

    @classmethod
    def get_value(cls, key, default=None):
        row = cls.query.filter_by(key=key).first()
        if row is None or row.value is None:
            return default
        return row.value

    @classmethod
    def set_value(cls, key, value):
        """Insert or update a setting. Does not commit."""
        row = cls.query.filter_by(key=key).first()
        if row is None:
            row = cls(key=key)
            db.session.add(row)
        row.value = None if value is None else str(value)
        return row

    @classmethod
    def as_dict(cls):
        return {row.key: row.value for row in cls.query.order_by(cls.key).all()}

    @classmethod
    def seed_defaults(cls):
        """Insert default settings that are missing; existing values are kept."""
        existing = {row.key for row in cls.query.all()}
        added = 0
        for key, value in cls.DEFAULTS.items():
            if key not in existing:
                db.session.add(cls(key=key, value=value))
                added += 1
        db.session.commit()
        return added
