"""
Score updater.

Applies one rating to one item: score += value, votes += 1.
"""

from src.models.content_item import ContentItem
from src.models.rating import is_valid_rating_value
from src.rating.errors import InvalidInput


def apply_rating(item: ContentItem, value: int) -> ContentItem:
    """
    Apply a +1/-1 rating to an item in place.

    The caller is responsible for persisting the item together with the
    matching ledger entry.

    Args:
        item: The item to update.
        value: 1 or -1.

    Returns:
        The same item, for chaining.

    Raises:
        InvalidInput: If value is not exactly 1 or -1.
    """
    if not is_valid_rating_value(value):
        raise InvalidInput(f"rating value must be 1 or -1, got {value!r}", code="invalid_value")

    item.score = (item.score or 0) + value
    item.votes = (item.votes or 0) + 1
    return item
