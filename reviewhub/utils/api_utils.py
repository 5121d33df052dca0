"""
API Utilities Module

FLOW OVERVIEW
- APIRequestValidator
  • validate_json_request → parse/validate JSON and return (ok, data, error).
  • parse_pagination → read page/per_page query args with bounds.
  • validate_request_size → enforce body size limit.

- APIResponseFormatter
  • format_list_response → paginated `{items, page, per_page, total, has_more}`.
  • format_error → `{error, error_code}` payload.

- client_ip() / user_agent() → request metadata used by analytics.

Used by the api and admin blueprints to avoid code duplication.
"""

import logging
from typing import Dict, Any, Tuple, Optional, List
from flask import request


MAX_PER_PAGE = 100
DEFAULT_PER_PAGE = 20
MAX_BODY_BYTES = 512 * 1024  # article bodies can be long
MAX_IP_LENGTH = 45  # AnalyticsEvent.client_ip column size


class APIRequestValidator:
    """Handles common request validation logic."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def validate_json_request(self) -> Tuple[bool, Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """
        Validate and parse JSON request.

        Returns:
            Tuple of (is_valid, data, error_response)
        """
        data = request.get_json(silent=True)

        if data is None:
            self.logger.warning(f"Invalid or missing JSON from {client_ip()}")
            return False, None, APIResponseFormatter.format_error(
                'INVALID_JSON', 'Invalid request format. JSON payload required.')

        if not isinstance(data, dict):
            self.logger.warning(f"Invalid data type from {client_ip()}: {type(data)}")
            return False, None, APIResponseFormatter.format_error(
                'INVALID_DATA_TYPE', 'Request data must be a JSON object.')

        return True, data, None

    def validate_request_size(self) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """
        Validate request size limits.

        Returns:
            Tuple of (is_valid, error_response)
        """
        content_length = request.content_length or 0
        if content_length > MAX_BODY_BYTES:
            self.logger.warning(f"Large request blocked from {client_ip()}: {content_length} bytes")
            return False, APIResponseFormatter.format_error(
                'REQUEST_TOO_LARGE', 'Request too large. Maximum 512KB allowed.')

        return True, None

    @staticmethod
    def parse_pagination() -> Tuple[int, int]:
        """Read `page` and `per_page`; out-of-range values are clamped."""
        page = request.args.get('page', 1, type=int) or 1
        per_page = request.args.get('per_page', DEFAULT_PER_PAGE, type=int) or DEFAULT_PER_PAGE
        return max(page, 1), min(max(per_page, 1), MAX_PER_PAGE)

    @staticmethod
    def parse_bool_arg(name: str, default: bool = False) -> bool:
        value = request.args.get(name)
        if value is None:
            return default
        return value.strip().lower() in ('1', 'true', 'yes', 'on')


class APIResponseFormatter:
    """Handles common response formatting logic."""

    @staticmethod
    def format_list_response(items: List[Dict[str, Any]], page: int, per_page: int, total: int) -> Dict[str, Any]:
        return {
            'items': items,
            'page': page,
            'per_page': per_page,
            'total': total,
            'has_more': page * per_page < total
        }

    @staticmethod
    def format_error(error_code: str, message: str) -> Dict[str, Any]:
        return {
            'error': message,
            'error_code': error_code
        }


def client_ip() -> str:
    """Originating client address; only the first X-Forwarded-For hop is kept."""
    forwarded = request.environ.get('HTTP_X_FORWARDED_FOR', '')
    ip = forwarded.split(',')[0].strip() or request.environ.get('REMOTE_ADDR') or 'unknown'
    return ip[:MAX_IP_LENGTH]


def user_agent() -> str:
    return request.headers.get('User-Agent', 'unknown')


# Global instances
request_validator = APIRequestValidator()
response_formatter = APIResponseFormatter()
