"""
Analytics Event Model

FLOW OVERVIEW
- Persists affiliate link clicks and page views reported by the front end.
- record(...): helper to construct a new event (caller commits).
- summary(days): totals by event type and top clicked products in a date window.

product_id / article_id are plain integers; events survive deletion of the
product or article they refer to.
"""

from datetime import datetime, timedelta
from sqlalchemy import Column, Integer, String, Text, DateTime, Index, func
from .database import db
from .utils import isoformat


class AnalyticsEvent(db.Model):
    """Single click or view event."""

    __tablename__ = 'analytics_events'

    EVENT_TYPES = ('click', 'view')

    id = Column(Integer, primary_key=True)
    event_type = Column(String(20), nullable=False)
    product_id = Column(Integer, nullable=True, index=True)
    article_id = Column(Integer, nullable=True, index=True)
    path = Column(String(500), nullable=True)
    referrer = Column(String(500), nullable=True)
    client_ip = Column(String(45), nullable=True)  # IPv4 or IPv6
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_analytics_type_time', 'event_type', 'created_at'),
    )

    def __repr__(self):
        return f'<AnalyticsEvent {self.id}: {self.event_type} at {self.created_at}>'

    def to_dict(self):
        return {
            'id': self.id,
            'event_type': self.event_type,
            'product_id': self.product_id,
            'article_id': self.article_id,
            'path': self.path,
            'referrer': self.referrer,
            'client_ip': self.client_ip,
            'user_agent': self.user_agent,
            'created_at': isoformat(self.created_at)
        }

    @classmethod
    def record(cls, event_type, product_id=None, article_id=None, path=None,
               referrer=None, client_ip=None, user_agent=None):
        """Create a new analytics event."""
        if event_type not in cls.EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type}")

        event = cls(
            event_type=event_type,
            product_id=product_id,
            article_id=article_id,
            path=path,
            referrer=referrer,
            client_ip=client_ip,
            user_agent=user_agent
        )
        db.session.add(event)
        return event

    @classmethod
    def summary(cls, days=30, top=10):
        """Aggregate events over the last `days` days."""
        start_date = datetime.utcnow() - timedelta(days=days)

        totals = dict(
            db.session.query(cls.event_type, func.count(cls.id))
            .filter(cls.created_at >= start_date)
            .group_by(cls.event_type)
            .all()
        )

        click_count = func.count(cls.id).label('clicks')
        top_rows = (
            db.session.query(cls.product_id, click_count)
            .filter(cls.event_type == 'click',
                    cls.product_id.isnot(None),
                    cls.created_at >= start_date)
            .group_by(cls.product_id)
            .order_by(click_count.desc(), cls.product_id)
            .limit(top)
            .all()
        )

        return {
            'days': days,
            'total_clicks': totals.get('click', 0),
            'total_views': totals.get('view', 0),
            'top_products': [
                {'product_id': product_id, 'clicks': clicks}
                for product_id, clicks in top_rows
            ]
        }
