"""
Affiliate link helpers.

An affiliate link is the marketplace product URL carrying our tracking
identifier in the `tag` query parameter.
"""

from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

TRACKING_PARAM = 'tag'


def build_affiliate_link(url, tag=None):
    """
    Return `url` with the tracking tag applied.

    Existing query parameters are kept; an existing `tag` value is replaced.
    Without a tag the URL is returned unchanged.

    Raises:
        ValueError: if `url` is not an absolute http(s) URL
    """
    if not url:
        raise ValueError("Affiliate URL is empty")

    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError(f"Not an http(s) URL: {url}")

    if not tag:
        return urlunparse(parsed)

    query = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != TRACKING_PARAM]
    query.append((TRACKING_PARAM, tag))
    return urlunparse(parsed._replace(query=urlencode(query)))


def resolve_affiliate_tag(config, site_tag=None):
    """Site-configured tag wins over the environment tag."""
    return site_tag or config.get('AFFILIATE_TAG') or None
