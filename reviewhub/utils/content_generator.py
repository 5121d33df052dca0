"""
Review content generator.

FLOW OVERVIEW
1) acquire_products(category, keywords, limit)
   • Marketplace credentials present → search the marketplace, upsert the
     returned items as Product rows and use them (source "marketplace").
   • Credentials absent, any MarketplaceError, or an empty result → full read
     of locally stored products (source "fallback").
2) render_review(product, ...)
   • Render the Jinja2 review template with the product facts and its
     affiliate link; returns title/slug/excerpt/content.
3) generate(...)
   • One review article per product. Products whose review slug already
     exists, or that have no usable affiliate link, are skipped, so re-running
     the generator does not duplicate articles.

Driven by generate_content.py (cron) and POST /api/admin/generate.
"""

import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app, render_template

from ..models import db, Product, Article, SiteConfig
from ..models.utils import slugify
from .affiliate import build_affiliate_link, resolve_affiliate_tag
from .marketplace_client import MarketplaceClient, MarketplaceError
from .prom_metrics import observe_generation, observe_marketplace_error

SOURCE_MARKETPLACE = 'marketplace'
SOURCE_FALLBACK = 'fallback'


@dataclass
class GenerationResult:
    """Outcome of one generator run"""
    source: str
    products_considered: int = 0
    articles_created: int = 0
    articles_skipped: int = 0
    created_slugs: List[str] = field(default_factory=list)
    marketplace_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def review_slug(product) -> str:
    return slugify(f"{product.name} review")


def verdict_for(rating: Optional[float]) -> str:
    if rating is None:
        return "Buyers have not rated this one yet, so weigh the features and price carefully."
    if rating >= 4.5:
        return "Highly recommended: buyers rate it among the best in its class."
    if rating >= 4.0:
        return "Recommended: a solid pick that most buyers are happy with."
    if rating >= 3.0:
        return "Worth considering, but compare alternatives before you buy."
    return "Proceed with caution: buyer ratings are below average."


def format_price(product) -> Optional[str]:
    if product.price is None:
        return None
    currency = product.currency or 'USD'
    if currency == 'USD':
        return f"${product.price:,.2f}"
    return f"{product.price:,.2f} {currency}"


class ContentGenerator:
    """Fetches products (or falls back to stored ones) and writes review articles."""

    def __init__(self, client: MarketplaceClient = None):
        self.logger = logging.getLogger(__name__)
        self._client = client

    @property
    def client(self) -> MarketplaceClient:
        if self._client is None:
            self._client = MarketplaceClient.from_config(current_app.config)
        return self._client

    def acquire_products(self, category: str = None, keywords: str = None,
                         limit: int = 10) -> Tuple[List[Product], str, Optional[str]]:
        """
        Return (products, source, marketplace_error).

        No retry and no partial success: a failed marketplace call is replaced
        wholesale by the stored products.
        """
        error = None

        if self.client.is_configured():
            try:
                items = self.client.search_items(keywords, category, limit)
            except MarketplaceError as e:
                observe_marketplace_error()
                error = str(e)
                self.logger.warning(f"Marketplace fetch failed, using stored products: {error}")
            else:
                if items:
                    products = [Product.upsert_from_marketplace(item) for item in items]
                    db.session.commit()
                    self.logger.info(f"Fetched {len(products)} products from marketplace")
                    return products, SOURCE_MARKETPLACE, None
                self.logger.info("Marketplace returned no items, using stored products")
        else:
            self.logger.info("Marketplace credentials not configured, running in fallback mode")

        products = Product.query.order_by(Product.id).all()
        return products, SOURCE_FALLBACK, error

    def render_review(self, product, site_name: str, affiliate_tag: str = None) -> Dict[str, str]:
        """
        Render a review article for one product.

        Raises:
            ValueError: product has no usable affiliate URL
        """
        affiliate_link = build_affiliate_link(product.affiliate_url, affiliate_tag)
        features = [line.strip() for line in (product.description or '').splitlines() if line.strip()][:8]

        content = render_template(
            'articles/review.html',
            product=product,
            affiliate_link=affiliate_link,
            features=features,
            price=format_price(product),
            verdict=verdict_for(product.rating),
            site_name=site_name,
        )

        return {
            'title': f"{product.name} Review ({datetime.utcnow().year})"[:255],
            'slug': review_slug(product),
            'excerpt': (f"Our look at the {product.name}: key features, price and "
                        f"whether it is worth buying.")[:500],
            'content': content,
        }

    def generate(self, category: str = None, keywords: str = None, limit: int = None) -> GenerationResult:
        config = current_app.config
        category = category or SiteConfig.get_value('default_category') or config.get('CONTENT_DEFAULT_CATEGORY')
        keywords = keywords or config.get('CONTENT_DEFAULT_KEYWORDS') or category
        limit = limit or config.get('CONTENT_ITEM_COUNT', 10)
        site_name = SiteConfig.get_value('site_name') or config.get('SITE_NAME', 'ReviewHub')
        affiliate_tag = resolve_affiliate_tag(config, SiteConfig.get_value('affiliate_tag'))

        products, source, error = self.acquire_products(category, keywords, limit)
        result = GenerationResult(source=source, products_considered=len(products),
                                  marketplace_error=error)

        seen = set()
        for product in products:
            slug = review_slug(product)
            if not slug or slug in seen or Article.slug_exists(slug):
                result.articles_skipped += 1
                continue

            try:
                review = self.render_review(product, site_name, affiliate_tag)
            except ValueError as e:
                self.logger.warning(f"Skipping product {product.id}: {e}")
                result.articles_skipped += 1
                continue

            article = Article(
                title=review['title'],
                slug=review['slug'],
                excerpt=review['excerpt'],
                content=review['content'],
                category=product.category,
                featured_image=product.image_url,
                author=f"{site_name} Editorial",
                published=True,
                source='generated',
            )
            db.session.add(article)
            seen.add(slug)
            result.created_slugs.append(slug)
            result.articles_created += 1

        db.session.commit()
        observe_generation(source, result.articles_created)

        self.logger.info(
            f"Content generation finished: source={source} considered={result.products_considered} "
            f"created={result.articles_created} skipped={result.articles_skipped}"
        )
        return result


def generate_content(category: str = None, keywords: str = None, limit: int = None,
                     client: MarketplaceClient = None) -> GenerationResult:
    """Run one generation pass inside the current app context."""
    return ContentGenerator(client).generate(category=category, keywords=keywords, limit=limit)
