"""
Marketplace API client.

Searches the external marketplace product API (PA-API style JSON search) and
normalizes the returned items into `MarketplaceItem` records.

Requests are signed with HMAC-SHA256 over `timestamp.METHOD.path` using the
secret key; the access key and partner tag travel in headers/body. There is no
retry: any transport error, non-2xx status or malformed body raises
`MarketplaceError` and the caller decides what to do.
"""

import hashlib
import hmac
import json
import logging
import time
from base64 import b64encode
from dataclasses import dataclass, asdict
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

SEARCH_PATH = '/searchitems'

SEARCH_RESOURCES = [
    'ItemInfo.Title',
    'ItemInfo.Features',
    'Offers.Listings.Price',
    'Images.Primary.Large',
    'CustomerReviews.StarRating',
    'CustomerReviews.Count',
]


class MarketplaceError(Exception):
    """Marketplace API call failed or returned unusable data."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class MarketplaceItem:
    """Normalized marketplace search result"""
    external_id: str
    name: str
    detail_url: str
    description: Optional[str] = None
    price: Optional[Decimal] = None
    currency: Optional[str] = None
    rating: Optional[float] = None
    review_count: int = 0
    image_url: Optional[str] = None
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['price'] = float(self.price) if self.price is not None else None
        return data


class MarketplaceClient:
    """Client for the marketplace product search API.

    Usage:
        client = MarketplaceClient.from_config(current_app.config)
        if client.is_configured():
            items = client.search_items('noise cancelling headphones', 'electronics')
    """

    def __init__(self, api_url: str, access_key: str = None, secret_key: str = None,
                 partner_tag: str = None, timeout: float = 10):
        self.api_url = (api_url or '').rstrip('/')
        self.access_key = access_key
        self.secret_key = secret_key
        self.partner_tag = partner_tag
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> 'MarketplaceClient':
        return cls(
            api_url=config.get('MARKETPLACE_API_URL'),
            access_key=config.get('MARKETPLACE_ACCESS_KEY'),
            secret_key=config.get('MARKETPLACE_SECRET_KEY'),
            partner_tag=config.get('MARKETPLACE_PARTNER_TAG'),
            timeout=config.get('MARKETPLACE_TIMEOUT', 10),
        )

    def is_configured(self) -> bool:
        return bool(self.api_url and self.access_key and self.secret_key and self.partner_tag)

    def search_items(self, keywords: str, category: str = None, item_count: int = 10) -> List[MarketplaceItem]:
        """
        Search the marketplace.

        Args:
            keywords: Free-text search keywords
            category: Marketplace search index; 'All' when omitted
            item_count: Number of items to request (1-10)

        Returns:
            Normalized items; items without an id, title or URL are dropped

        Raises:
            MarketplaceError: on missing credentials or any failed call
        """
        if not self.is_configured():
            raise MarketplaceError('Marketplace credentials are not configured')

        body = {
            'Keywords': keywords,
            'SearchIndex': category or 'All',
            'ItemCount': max(1, min(int(item_count), 10)),
            'PartnerTag': self.partner_tag,
            'PartnerType': 'Associates',
            'Resources': SEARCH_RESOURCES,
        }
        payload = json.dumps(body)
        timestamp = str(int(time.time() * 1000))
        headers = {
            'Content-Type': 'application/json; charset=UTF-8',
            'X-Timestamp': timestamp,
            'X-Access-Key': self.access_key,
            'X-Signature': self._generate_signature(timestamp, 'POST', SEARCH_PATH),
        }
        masked_key = f"***{self.access_key[-4:]}" if len(self.access_key) >= 4 else "***"

        logger.info(json.dumps({
            'event': 'marketplace_request_start',
            'keywords': keywords,
            'category': category,
            'item_count': body['ItemCount'],
            'access_key_last4': masked_key,
        }))

        started_at = time.time()
        try:
            resp = requests.post(
                f"{self.api_url}{SEARCH_PATH}",
                data=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            self._log_error(str(e), None, keywords)
            raise MarketplaceError(f"Marketplace request failed: {e}") from e

        elapsed_ms = int((time.time() - started_at) * 1000)

        if not 200 <= resp.status_code < 300:
            self._log_error(resp.text[:500], resp.status_code, keywords)
            if resp.status_code == 401 or resp.status_code == 403:
                message = 'Marketplace authentication failed'
            elif resp.status_code == 429:
                message = 'Marketplace rate limit exceeded'
            else:
                message = f'Marketplace returned HTTP {resp.status_code}'
            raise MarketplaceError(message, status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            self._log_error('invalid JSON body', resp.status_code, keywords)
            raise MarketplaceError('Marketplace returned invalid JSON') from e

        if not isinstance(data, dict):
            raise MarketplaceError('Marketplace response is not a JSON object')

        if data.get('Errors'):
            first = data['Errors'][0] if isinstance(data['Errors'], list) and data['Errors'] else {}
            message = first.get('Message') if isinstance(first, dict) else None
            self._log_error(message or 'API error', resp.status_code, keywords)
            raise MarketplaceError(f"Marketplace error: {message or 'unknown error'}")

        items = self._parse_items(data, category)

        logger.info(json.dumps({
            'event': 'marketplace_request_success',
            'elapsed_ms': elapsed_ms,
            'items': len(items),
            'access_key_last4': masked_key,
        }))
        return items

    def _parse_items(self, data: Dict[str, Any], category: Optional[str]) -> List[MarketplaceItem]:
        search_result = data.get('SearchResult') or {}
        if not isinstance(search_result, dict):
            raise MarketplaceError('Marketplace response has malformed SearchResult')

        raw_items = search_result.get('Items') or []
        if not isinstance(raw_items, list):
            raise MarketplaceError('Marketplace response has malformed SearchResult.Items')

        items = []
        for raw in raw_items:
            try:
                item = self._parse_item(raw, category)
            except (TypeError, ValueError, AttributeError, KeyError, IndexError) as e:
                raise MarketplaceError(f'Malformed marketplace item: {e}') from e
            if item is not None:
                items.append(item)
        return items

    @staticmethod
    def _parse_item(raw: Dict[str, Any], category: Optional[str]) -> Optional[MarketplaceItem]:
        if not isinstance(raw, dict):
            return None

        external_id = raw.get('ASIN')
        detail_url = raw.get('DetailPageURL')
        item_info = raw.get('ItemInfo') or {}
        title = (item_info.get('Title') or {}).get('DisplayValue')
        if not (external_id and detail_url and title):
            return None

        features = (item_info.get('Features') or {}).get('DisplayValues') or []
        description = '\n'.join(str(f) for f in features) or None

        price = None
        currency = None
        listings = (raw.get('Offers') or {}).get('Listings') or []
        if not isinstance(listings, list):
            raise ValueError('Offers.Listings is not a list')
        if listings:
            price_info = listings[0].get('Price') or {}
            if price_info.get('Amount') is not None:
                try:
                    price = Decimal(str(price_info['Amount'])).quantize(Decimal('0.01'))
                except InvalidOperation:
                    price = None
            currency = price_info.get('Currency')

        reviews = raw.get('CustomerReviews') or {}
        rating = (reviews.get('StarRating') or {}).get('Value')
        review_count = reviews.get('Count') or 0

        image_url = (((raw.get('Images') or {}).get('Primary') or {}).get('Large') or {}).get('URL')

        return MarketplaceItem(
            external_id=str(external_id),
            name=str(title)[:200],
            detail_url=detail_url,
            description=description,
            price=price,
            currency=currency,
            rating=float(rating) if rating is not None else None,
            review_count=int(review_count),
            image_url=image_url,
            category=category,
        )

    def _generate_signature(self, timestamp: str, method: str, path: str) -> str:
        """Generate HMAC-SHA256 signature for API auth."""
        message = f"{timestamp}.{method}.{path}"
        sign = hmac.new(
            self.secret_key.encode('utf-8'),
            message.encode('utf-8'),
            hashlib.sha256,
        ).digest()
        return b64encode(sign).decode('utf-8')

    @staticmethod
    def _log_error(error_text: str, status: Optional[int], keywords: str) -> None:
        logger.error(json.dumps({
            'event': 'marketplace_request_error',
            'status': status,
            'keywords': keywords,
            'error': (error_text or '')[:500],
        }))
