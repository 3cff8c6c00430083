"""
Tests for catalog queries: listing, leaderboards and statistics.
"""

import random
import pytest

from src.catalog import (
    catalog_stats,
    filter_by_lang,
    find_item,
    leaderboard,
    list_items,
    most_common_type,
    random_item,
    sanitize_limit,
    sanitize_offset,
    sort_items,
)
from src.models.rating import RatingEvent
from tests.test_config import EXPECTED


def ids(items):
    return [i.id for i in items]


class TestPaginationParams:
    """Tests for sanitize_limit() and sanitize_offset()."""

    @pytest.mark.parametrize("raw, expected", [
        (None, 20), ("", 20), ("5", 5), (1, 1), ("100", 100),
        ("0", 20), ("101", 20), ("-3", 20), ("abc", 20),
    ])
    def test_limit(self, raw, expected):
        assert sanitize_limit(raw) == expected

    @pytest.mark.parametrize("raw, expected", [(None, 0), ("4", 4), ("-1", 0), ("x", 0)])
    def test_offset(self, raw, expected):
        assert sanitize_offset(raw) == expected


class TestSorting:
    """Tests for sort_items() and filter_by_lang()."""

    def test_new_sorts_by_published_with_bad_dates_last(self, sample_items):
        assert ids(sort_items(sample_items, "new")) == ["item-ro-facts", "item-ai-news", "item-ua-offer"]

    def test_top_sorts_by_score(self, sample_items):
        assert ids(sort_items(sample_items, "top")) == ["item-ro-facts", "item-ai-news", "item-ua-offer"]

    def test_unknown_sort_behaves_like_new(self, make_item):
        items = [make_item("old", published="2020-01-01T00:00:00Z"), make_item("none"),
                 make_item("recent", published="2024-06-01T00:00:00.000Z")]

        assert ids(sort_items(items, "whatever")) == ["recent", "old", "none"]

    def test_input_not_reordered(self, sample_items):
        before = ids(sample_items)

        sort_items(sample_items, "top")

        assert ids(sample_items) == before

    def test_lang_filter_is_exact(self, sample_items, make_item):
        items = sample_items + [make_item("neutral")]

        assert ids(filter_by_lang(items, "ua")) == ["item-ua-offer"]
        assert ids(filter_by_lang(items, "en")) == ["item-ai-news"]
        assert len(filter_by_lang(items, None)) == 4


class TestListing:
    """Tests for list_items(), leaderboard() and lookups."""

    def test_list_returns_total_and_page(self, sample_items):
        total, page = list_items(sample_items, sort="top", limit="2", offset="1")

        assert total == 3
        assert ids(page) == ["item-ai-news", "item-ua-offer"]

    def test_list_with_language(self, sample_items):
        total, page = list_items(sample_items, lang="ro")

        assert total == 1
        assert ids(page) == ["item-ro-facts"]

    def test_leaderboard_filters_and_orders(self, make_item):
        items = [make_item(f"i{n}", category="tech" if n % 2 else "ads", score=n, lang="en") for n in range(6)]

        board = leaderboard(items, limit=2, lang="en", category="tech")

        assert ids(board) == ["i5", "i3"]

    def test_leaderboard_limit_capped(self, make_item):
        items = [make_item(f"i{n}", score=n) for n in range(150)]

        assert len(leaderboard(items, limit=500)) == EXPECTED["config"]["max_page_size"]

    @pytest.mark.parametrize("limit", [None, "0", "-1", "nope"])
    def test_leaderboard_invalid_limit_uses_default(self, make_item, limit):
        items = [make_item(f"i{n}", score=n) for n in range(30)]

        assert len(leaderboard(items, limit=limit)) == 10

    def test_find_item(self, sample_items):
        assert find_item(sample_items, "item-ro-facts").lang == "ro"
        assert find_item(sample_items, "nope") is None

    def test_random_item(self, sample_items):
        rng = random.Random(7)

        assert random_item(sample_items, rng) in sample_items
        assert random_item([], rng) is None


class TestStats:
    """Tests for catalog_stats() and most_common_type()."""

    def test_catalog_stats(self, sample_items):
        ratings = [
            RatingEvent(item_id="item-ro-facts", value=1),
            RatingEvent(item_id="item-ro-facts", value=1),
            RatingEvent(item_id="item-ai-news", value=-1),
        ]

        stats = catalog_stats(sample_items, ratings)

        assert stats == {
            "totalItems": 3,
            "totalRatings": 3,
            "averageScore": 0.33,
            "mostRatedType": "facts",
            "categories": {"tech": 1, "science": 1, "ads": 1},
            "diversityIndex": 3.0,
        }

    def test_empty_catalog(self):
        stats = catalog_stats([], [])

        assert stats["totalItems"] == 0
        assert stats["averageScore"] == 0.0
        assert stats["mostRatedType"] is None
        assert stats["diversityIndex"] == 0.0

    def test_diversity_capped_at_ten(self, make_item):
        items = [make_item(f"i{n}", category=f"c{n}", type=f"t{n}") for n in range(15)]

        assert catalog_stats(items, [])["diversityIndex"] == 10.0

    def test_most_common_type_ignores_unknown_items(self, sample_items):
        ratings = [RatingEvent(item_id="ghost", value=1), RatingEvent(item_id="item-ua-offer", value=-1)]

        assert most_common_type(sample_items, ratings) == "offers"
        assert most_common_type(sample_items, []) is None
