"""
Input Validation Utilities

FLOW OVERVIEW
- validate_email(email)
  • Syntax and length checks; returns sanitized lowercased value.
- validate_password_hash(hash)
  • Enforce bcrypt hash format.
- validate_password_strength(password)
  • Enforce length and character variety.
- validate_url / validate_slug / sanitize_input
  • Field-level helpers shared by the payload validators.
- validate_product_payload / validate_article_payload(data, partial)
  • Validate an admin JSON body and return the cleaned field dict.
    `partial=True` is used for PUT, where required fields may be omitted.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional
from dataclasses import dataclass
from urllib.parse import urlparse


@dataclass
class ValidationResult:
    """Result of validation operation"""
    is_valid: bool
    error_message: Optional[str] = None
    sanitized_value: Optional[Any] = None


class InputValidator:
    """Input validation for user accounts and admin payloads"""

    EMAIL_PATTERN = re.compile(
        r'^[a-zA-Z0-9.!#$%&\'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$'
    )

    BCRYPT_HASH_PATTERN = re.compile(r'^\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}$')

    SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')

    CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}$')

    XSS_PATTERNS = [
        r'<script[^>]*>.*?</script>',
        r'javascript:',
        r'on\w+\s*=',
        r'<iframe[^>]*>',
        r'<svg[^>]*>',
        r'data:text/html',
        r'vbscript:',
    ]

    @classmethod
    def validate_email(cls, email: str) -> ValidationResult:
        """
        Validate email address

        Args:
            email: Email address to validate

        Returns:
            ValidationResult with validation status and sanitized value
        """
        if not email or not isinstance(email, str):
            return ValidationResult(False, "Email must be a non-empty string")

        email = email.strip()
        if email == "":
            return ValidationResult(False, "Email cannot be empty")

        # RFC 5321 limits
        if len(email) > 254:
            return ValidationResult(False, "Email address too long (max 254 characters)")

        if not cls.EMAIL_PATTERN.match(email):
            return ValidationResult(False, "Invalid email format")

        local_part, domain = email.split('@')
        if len(local_part) > 64:
            return ValidationResult(False, "Email local part too long (max 64 characters)")

        if local_part.startswith('.') or local_part.endswith('.') or '..' in local_part:
            return ValidationResult(False, "Invalid email format")

        if '.' not in domain:
            return ValidationResult(False, "Email domain must contain a dot")

        return ValidationResult(True, sanitized_value=email.lower())

    @classmethod
    def validate_password_hash(cls, password_hash: str) -> ValidationResult:
        """Validate that a stored password hash is a bcrypt hash"""
        if not password_hash or not isinstance(password_hash, str):
            return ValidationResult(False, "Password hash must be a non-empty string")

        password_hash = password_hash.strip()
        if not cls.BCRYPT_HASH_PATTERN.match(password_hash):
            return ValidationResult(False, "Invalid password hash format: expected a bcrypt hash")

        return ValidationResult(True, sanitized_value=password_hash)

    @classmethod
    def validate_password_strength(cls, password: str) -> ValidationResult:
        """
        Validate password strength requirements

        Args:
            password: Password to validate

        Returns:
            ValidationResult with validation status
        """
        if not password or not isinstance(password, str):
            return ValidationResult(False, "Password must be a non-empty string")

        if len(password) < 8:
            return ValidationResult(False, "Password must be at least 8 characters long")

        # bcrypt only uses the first 72 bytes
        if len(password.encode('utf-8')) > 72:
            return ValidationResult(False, "Password too long (max 72 bytes)")

        weak_passwords = {
            'password', '12345678', 'qwertyui', 'password1', 'password123',
            'admin123', 'letmein1', 'welcome1'
        }
        if password.lower() in weak_passwords:
            return ValidationResult(False, "Password is too common, choose a stronger password")

        has_upper = any(c.isupper() for c in password)
        has_lower = any(c.islower() for c in password)
        has_digit = any(c.isdigit() for c in password)
        if not (has_upper and has_lower and has_digit):
            return ValidationResult(False, "Password must contain uppercase, lowercase, and numeric characters")

        return ValidationResult(True)

    @classmethod
    def validate_url(cls, url: str, field: str = 'url') -> ValidationResult:
        """Accept absolute http(s) URLs only"""
        if not url or not isinstance(url, str):
            return ValidationResult(False, f"{field} must be a non-empty string")

        url = url.strip()
        if len(url) > 1000:
            return ValidationResult(False, f"{field} too long (max 1000 characters)")

        parsed = urlparse(url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            return ValidationResult(False, f"{field} must be an absolute http(s) URL")

        return ValidationResult(True, sanitized_value=url)

    @classmethod
    def validate_slug(cls, slug: str) -> ValidationResult:
        if not slug or not isinstance(slug, str):
            return ValidationResult(False, "Slug must be a non-empty string")

        slug = slug.strip()
        if len(slug) > 200:
            return ValidationResult(False, "Slug too long (max 200 characters)")

        if not cls.SLUG_PATTERN.match(slug):
            return ValidationResult(False, "Slug may only contain lowercase letters, digits and single hyphens")

        return ValidationResult(True, sanitized_value=slug)

    @classmethod
    def sanitize_input(cls, input_string: str, max_length: int = 1000) -> str:
        """
        Sanitize free-text input

        Args:
            input_string: Input string to sanitize
            max_length: Maximum allowed length

        Returns:
            Sanitized string
        """
        if not input_string:
            return ""

        sanitized = str(input_string).strip()

        if len(sanitized) > max_length:
            sanitized = sanitized[:max_length]

        sanitized = sanitized.replace('\x00', '')
        sanitized = sanitized.replace('\r\n', '\n').replace('\r', '\n')

        return sanitized

    @classmethod
    def _contains_xss(cls, text: str) -> bool:
        """Check if text contains XSS patterns"""
        for pattern in cls.XSS_PATTERNS:
            if re.search(pattern, text, re.IGNORECASE):
                return True
        return False

    @classmethod
    def _clean_label(cls, data: Dict[str, Any], field: str, max_length: int,
                     cleaned: Dict[str, Any], required: bool, nullable: bool = True) -> Optional[str]:
        """
        Validate a short single-line text field into `cleaned`; return an error message.

        `required` demands the key; `nullable=False` rejects null or blank values
        whenever the key is present (NOT NULL columns on partial updates).
        """
        if field not in data or data[field] is None:
            if required or (field in data and not nullable):
                return f"{field} is required"
            if field in data:
                cleaned[field] = None
            return None

        if not isinstance(data[field], str):
            return f"{field} must be a string"

        value = cls.sanitize_input(data[field], max_length)
        if (required or not nullable) and not value:
            return f"{field} is required"
        if cls._contains_xss(value):
            return f"{field} contains invalid characters"

        cleaned[field] = value or None
        return None

    @classmethod
    def validate_product_payload(cls, data: Dict[str, Any], partial: bool = False) -> ValidationResult:
        """Validate a product create/update body"""
        if not isinstance(data, dict):
            return ValidationResult(False, "Request data must be a JSON object")

        cleaned: Dict[str, Any] = {}

        for field, max_length, required in (('name', 200, not partial),
                                            ('category', 100, False),
                                            ('external_id', 64, False)):
            error = cls._clean_label(data, field, max_length, cleaned, required,
                                     nullable=field != 'name')
            if error:
                return ValidationResult(False, error)

        if 'description' in data:
            cleaned['description'] = cls.sanitize_input(data['description'], 5000) or None

        for field in ('affiliate_url', 'image_url'):
            if data.get(field):
                url_result = cls.validate_url(data[field], field)
                if not url_result.is_valid:
                    return url_result
                cleaned[field] = url_result.sanitized_value
            elif field in data:
                cleaned[field] = None

        if data.get('price') is not None:
            try:
                price = Decimal(str(data['price']))
            except (InvalidOperation, ValueError):
                return ValidationResult(False, "price must be a number")
            if not price.is_finite() or price < 0:
                return ValidationResult(False, "price must be a non-negative number")
            cleaned['price'] = price.quantize(Decimal('0.01'))
        elif 'price' in data:
            cleaned['price'] = None

        if data.get('currency'):
            currency = str(data['currency']).strip().upper()
            if not cls.CURRENCY_PATTERN.match(currency):
                return ValidationResult(False, "currency must be a 3-letter ISO code")
            cleaned['currency'] = currency

        if data.get('rating') is not None:
            if isinstance(data['rating'], bool):
                return ValidationResult(False, "rating must be a number")
            try:
                rating = float(data['rating'])
            except (TypeError, ValueError):
                return ValidationResult(False, "rating must be a number")
            if not 0 <= rating <= 5:
                return ValidationResult(False, "rating must be between 0 and 5")
            cleaned['rating'] = rating
        elif 'rating' in data:
            cleaned['rating'] = None

        if data.get('review_count') is not None:
            review_count = data['review_count']
            if isinstance(review_count, bool) or not isinstance(review_count, int) or review_count < 0:
                return ValidationResult(False, "review_count must be a non-negative integer")
            cleaned['review_count'] = review_count

        if partial and not cleaned:
            return ValidationResult(False, "No updatable fields supplied")

        return ValidationResult(True, sanitized_value=cleaned)

    @classmethod
    def validate_article_payload(cls, data: Dict[str, Any], partial: bool = False) -> ValidationResult:
        """Validate an article create/update body"""
        if not isinstance(data, dict):
            return ValidationResult(False, "Request data must be a JSON object")

        cleaned: Dict[str, Any] = {}

        for field, max_length, required in (('title', 255, not partial),
                                            ('category', 100, False),
                                            ('author', 120, False)):
            error = cls._clean_label(data, field, max_length, cleaned, required,
                                     nullable=field != 'title')
            if error:
                return ValidationResult(False, error)

        if 'content' in data or not partial:
            content = data.get('content')
            if not isinstance(content, str) or not content.strip():
                return ValidationResult(False, "content is required")
            # Article bodies are admin-authored HTML; only null bytes are stripped
            cleaned['content'] = content.replace('\x00', '')

        if 'excerpt' in data:
            cleaned['excerpt'] = cls.sanitize_input(data['excerpt'], 500) or None

        if data.get('slug'):
            slug_result = cls.validate_slug(data['slug'])
            if not slug_result.is_valid:
                return slug_result
            cleaned['slug'] = slug_result.sanitized_value

        if data.get('featured_image'):
            url_result = cls.validate_url(data['featured_image'], 'featured_image')
            if not url_result.is_valid:
                return url_result
            cleaned['featured_image'] = url_result.sanitized_value
        elif 'featured_image' in data:
            cleaned['featured_image'] = None

        if 'published' in data:
            if not isinstance(data['published'], bool):
                return ValidationResult(False, "published must be a boolean")
            cleaned['published'] = data['published']

        if partial and not cleaned:
            return ValidationResult(False, "No updatable fields supplied")

        return ValidationResult(True, sanitized_value=cleaned)


# Convenience functions for common validations
def validate_email(email: str) -> ValidationResult:
    """Validate email address"""
    return InputValidator.validate_email(email)


def validate_password_hash(password_hash: str) -> ValidationResult:
    """Validate password hash"""
    return InputValidator.validate_password_hash(password_hash)


def validate_password_strength(password: str) -> ValidationResult:
    """Validate password strength"""
    return InputValidator.validate_password_strength(password)


def validate_url(url: str, field: str = 'url') -> ValidationResult:
    return InputValidator.validate_url(url, field)


def validate_product_payload(data: Dict[str, Any], partial: bool = False) -> ValidationResult:
    return InputValidator.validate_product_payload(data, partial)


def validate_article_payload(data: Dict[str, Any], partial: bool = False) -> ValidationResult:
    return InputValidator.validate_article_payload(data, partial)


def sanitize_input(input_string: str, max_length: int = 1000) -> str:
    """Sanitize user input"""
    return InputValidator.sanitize_input(input_string, max_length)
