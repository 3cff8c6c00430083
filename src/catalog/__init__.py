"""
Catalog module.

Listing, leaderboard and statistics queries.
"""

from src.catalog.queries import (
    SORT_TOP,
    SORT_NEW,
    sanitize_limit,
    sanitize_offset,
    sort_items,
    filter_by_lang,
    list_items,
    leaderboard,
    find_item,
    random_item,
    most_common_type,
    catalog_stats,
)

__all__ = [
    "SORT_TOP",
    "SORT_NEW",
    "sanitize_limit",
    "sanitize_offset",
    "sort_items",
    "filter_by_lang",
    "list_items",
    "leaderboard",
    "find_item",
    "random_item",
    "most_common_type",
    "catalog_stats",
]
