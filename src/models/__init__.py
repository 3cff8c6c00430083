"""
Data models module.

Defines content items, rating events and the localized item view.
"""

from src.models.content_item import ContentItem, normalize_language, truncate_text
from src.models.rating import RatingEvent, is_valid_rating_value
from src.models.localization import LocalizedView, localize

__all__ = [
    "ContentItem",
    "normalize_language",
    "truncate_text",
    "RatingEvent",
    "is_valid_rating_value",
    "LocalizedView",
    "localize",
]
