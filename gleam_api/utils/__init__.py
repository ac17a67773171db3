# gleam_api/utils/__init__.py
"""
Helpers shared across the API packages: UTC date handling and request sanitizers.
"""

from .datetime_utils import DateTimeUtils
from .sanitizers import (
    sanitize_tags, sanitize_takeaways, sanitize_tag_history, normalize_history
)

__all__ = [
    'DateTimeUtils',
    'sanitize_tags', 'sanitize_takeaways', 'sanitize_tag_history', 'normalize_history'
]
