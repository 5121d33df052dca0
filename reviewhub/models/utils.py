"""
Model Utilities

This module contains utility functions for the models package.
"""

import re
import secrets
import string
import unicodedata


def generate_user_id():
    """Generate a unique 12-character user ID"""
    return ''.join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(12))


def slugify(value, max_length=200):
    """Turn a title into a lowercase, hyphen-separated URL slug"""
    if not value:
        return ''
    value = unicodedata.normalize('NFKD', str(value)).encode('ascii', 'ignore').decode('ascii')
    value = re.sub(r'[^\w\s-]', '', value.lower())
    value = re.sub(r'[-\s_]+', '-', value).strip('-')
    return value[:max_length].rstrip('-')


def isoformat(value):
    """Serialize a datetime column, tolerating NULL"""
    return value.isoformat() if value else None
