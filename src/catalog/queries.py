"""
Read-only catalog queries over the item list.

Listing with pagination and sorting, leaderboards, lookups and aggregate
statistics. Every function takes the items (and ratings) as arguments so
the web layer and the CLI can share them without touching storage.
"""

from collections import Counter
from datetime import datetime
import random
from typing import List, Optional, Tuple

from src.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from src.models.content_item import ContentItem, normalize_language
from src.models.rating import RatingEvent

SORT_TOP = "top"
SORT_NEW = "new"

DEFAULT_LEADERBOARD_SIZE = 10


def _parse_int(value, default: int) -> Optional[int]:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def sanitize_limit(value, default: int = DEFAULT_PAGE_SIZE, maximum: int = MAX_PAGE_SIZE) -> int:
    """Out-of-range or unparsable limits fall back to the default."""
    limit = _parse_int(value, default)
    if limit is None or limit < 1 or limit > maximum:
        return default
    return limit


def sanitize_offset(value) -> int:
    offset = _parse_int(value, 0)
    if offset is None or offset < 0:
        return 0
    return offset


def _published_timestamp(item: ContentItem) -> Optional[float]:
    if not item.published:
        return None
    try:
        return datetime.fromisoformat(item.published.replace("Z", "+00:00")).timestamp()
    except (TypeError, ValueError):
        return None


def sort_items(items: List[ContentItem], sort: str = SORT_NEW) -> List[ContentItem]:
    """
    Sort a copy of `items`.

    "top" orders by score descending. Anything else is "new": published
    date descending, items without a parsable date last.
    """
    if sort == SORT_TOP:
        return sorted(items, key=lambda i: i.score, reverse=True)

    dated = [(i, _published_timestamp(i)) for i in items]
    with_date = [pair for pair in dated if pair[1] is not None]
    without_date = [i for i, ts in dated if ts is None]
    with_date.sort(key=lambda pair: pair[1], reverse=True)
    return [i for i, _ in with_date] + without_date


def filter_by_lang(items: List[ContentItem], lang: Optional[str]) -> List[ContentItem]:
    """Exact language filter; no filter when lang is empty."""
    code = normalize_language(lang)
    if not code:
        return list(items)
    return [i for i in items if i.lang == code]


def list_items(
    items: List[ContentItem],
    lang: Optional[str] = None,
    sort: str = SORT_NEW,
    limit=None,
    offset=None,
) -> Tuple[int, List[ContentItem]]:
    """
    Filter, sort and paginate.

    Returns:
        (total matching items, requested page)
    """
    filtered = sort_items(filter_by_lang(items, lang), sort or SORT_NEW)
    start = sanitize_offset(offset)
    size = sanitize_limit(limit)
    return len(filtered), filtered[start:start + size]


def leaderboard(
    items: List[ContentItem],
    limit=DEFAULT_LEADERBOARD_SIZE,
    lang: Optional[str] = None,
    category: Optional[str] = None,
) -> List[ContentItem]:
    """
    Top items by score, optionally restricted to one language and category.

    Limits above MAX_PAGE_SIZE are capped; invalid ones use the default.
    """
    size = _parse_int(limit, DEFAULT_LEADERBOARD_SIZE)
    if size is None or size < 1:
        size = DEFAULT_LEADERBOARD_SIZE
    size = min(size, MAX_PAGE_SIZE)
    selected = filter_by_lang(items, lang)
    if category:
        selected = [i for i in selected if i.category == category]
    return sort_items(selected, SORT_TOP)[:size]


def find_item(items: List[ContentItem], item_id: str) -> Optional[ContentItem]:
    for item in items:
        if item.id == item_id:
            return item
    return None


def random_item(items: List[ContentItem], rng: Optional[random.Random] = None) -> Optional[ContentItem]:
    if not items:
        return None
    return (rng or random).choice(items)


def most_common_type(items: List[ContentItem], ratings: List[RatingEvent]) -> Optional[str]:
    """Type with the most ratings; ties go to the first type encountered."""
    by_id = {item.id: item for item in items}
    counts = Counter()
    for rating in ratings:
        item = by_id.get(rating.item_id)
        if item is not None and item.type:
            counts[item.type] += 1
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def catalog_stats(items: List[ContentItem], ratings: List[RatingEvent]) -> dict:
    """
    Aggregate statistics for the whole catalog.

    Returns:
        Dict with totalItems, totalRatings, averageScore (2 decimals),
        mostRatedType, categories (item count per category) and
        diversityIndex ((unique categories + unique types) / 2, capped at 10).
    """
    total_items = len(items)
    average = round(sum(i.score for i in items) / total_items, 2) if total_items else 0.0

    categories = Counter(i.category for i in items if i.category)
    unique_categories = len({i.category for i in items})
    unique_types = len({i.type for i in items})
    diversity = round(min(10.0, (unique_categories + unique_types) / 2), 2) if total_items else 0.0

    return {
        "totalItems": total_items,
        "totalRatings": len(ratings),
        "averageScore": average,
        "mostRatedType": most_common_type(items, ratings),
        "categories": dict(categories),
        "diversityIndex": diversity,
    }
