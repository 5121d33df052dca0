"""
Analytics Tracker

FLOW OVERVIEW
- track_click(product)
  • Persist an `AnalyticsEvent` of type click for the product and bump the
    Prometheus click counter. Used by the /go/<id> affiliate redirect.

- track_event(event_type, product_id, article_id, path)
  • Persist a view/click event reported by the front end.

Tracking never blocks the visitor: persistence errors are logged, the session
is rolled back and None is returned.
"""

import logging
from typing import Optional
from flask import request
from sqlalchemy.exc import SQLAlchemyError
from ..models import AnalyticsEvent, db
from .api_utils import client_ip, user_agent
from .prom_metrics import observe_affiliate_click


class AnalyticsTracker:
    """Records click and view events."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def track_click(self, product) -> Optional[AnalyticsEvent]:
        observe_affiliate_click(product.category)
        return self.track_event('click', product_id=product.id, path=request.path)

    def track_event(self, event_type: str, product_id: int = None, article_id: int = None,
                    path: str = None) -> Optional[AnalyticsEvent]:
        """
        Persist one analytics event.

        Raises:
            ValueError: unknown event type (caller input error)
        """
        try:
            event = AnalyticsEvent.record(
                event_type,
                product_id=product_id,
                article_id=article_id,
                path=(path or '')[:500] or None,
                referrer=(request.referrer or '')[:500] or None,
                client_ip=client_ip(),
                user_agent=user_agent()
            )
            db.session.commit()
            self.logger.debug(f"Tracked {event_type} product={product_id} article={article_id}")
            return event
        except SQLAlchemyError as e:
            db.session.rollback()
            self.logger.error(f"Failed to record analytics event: {str(e)}")
            return None


# Global instance
analytics_tracker = AnalyticsTracker()
