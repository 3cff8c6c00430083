"""
Rating session view-model.

Holds everything one viewer's client keeps between requests: the loaded
items, the position in them, the locale, and the rating and view history.
Navigation and rating go through methods on this object instead of a
shared global state.

Usage:
    session = RatingSession(storage.read_items(), language="ro")
    session.show_current()
    session.rate(1, service)
    print(session.personal_stats())
"""

from collections import Counter
from dataclasses import dataclass, field
import logging
import random
from typing import Callable, List, Optional

from src.catalog.queries import most_common_type
from src.models.content_item import ContentItem, normalize_language
from src.models.rating import RatingEvent, utc_now_iso
from src.selection import SelectionRequest, WeightedPreferenceStrategy

logger = logging.getLogger(__name__)


@dataclass
class ViewRecord:
    """One item shown to the viewer."""
    item_id: str
    viewed_at: str = field(default_factory=utc_now_iso)


@dataclass
class SessionStats:
    """Running counters for the viewer's own ratings."""
    total_ratings: int = 0
    positive_ratings: int = 0
    negative_ratings: int = 0
    rated_categories: Counter = field(default_factory=Counter)

    def record(self, value: int, category: Optional[str]) -> None:
        self.total_ratings += 1
        if value == 1:
            self.positive_ratings += 1
        else:
            self.negative_ratings += 1
        if category:
            self.rated_categories[category] += 1


class RatingSession:
    """
    One viewer's browsing and rating session.

    Args:
        items: Items loaded for this viewer (display order).
        language: Viewer's locale ("ua" is accepted for "uk").
        user_id: Optional UUID forwarded with every rating.
        fallback: Strategy used when the server suggests no next item.
    """

    def __init__(
        self,
        items: List[ContentItem] = None,
        language: Optional[str] = None,
        user_id: Optional[str] = None,
        fallback: Optional[WeightedPreferenceStrategy] = None,
        rng: Optional[random.Random] = None,
    ):
        self.items: List[ContentItem] = list(items or [])
        self.current_index = 0
        self.language = normalize_language(language) or "en"
        self.user_id = user_id
        self.rating_history: List[RatingEvent] = []
        self.view_history: List[ViewRecord] = []
        self.stats = SessionStats()
        self.fallback = fallback or WeightedPreferenceStrategy(rng=rng)

    # =========================================================================
    # Navigation
    # =========================================================================

    def current(self) -> Optional[ContentItem]:
        if not self.items:
            return None
        return self.items[self.current_index]

    def show_current(self) -> Optional[ContentItem]:
        """Clamp the index into range, record a view and return the item."""
        if not self.items:
            self.current_index = 0
            return None

        self.current_index = max(0, min(self.current_index, len(self.items) - 1))
        item = self.items[self.current_index]
        self.view_history.append(ViewRecord(item_id=item.id))
        return item

    def previous(self) -> Optional[ContentItem]:
        if self.current_index > 0:
            self.current_index -= 1
        else:
            logger.debug("Already at the first item")
        return self.show_current()

    def skip(self) -> Optional[ContentItem]:
        """Move on without rating."""
        if self.current_index < len(self.items) - 1:
            self.current_index += 1
        return self.show_current()

    def set_language(self, language: str) -> None:
        self.language = normalize_language(language) or "en"

    # =========================================================================
    # Rating
    # =========================================================================

    def record_rating(self, item: ContentItem, value: int) -> RatingEvent:
        """Append to the rating history and update counters."""
        event = RatingEvent(item_id=item.id, value=value, user_id=self.user_id)
        self.rating_history.append(event)
        self.stats.record(value, item.category)
        return event

    def _submit(self, value: int, service: Callable):
        item = self.current()
        if item is None:
            return None, None

        result = service(item.id, value, user_id=self.user_id, lang=self.language)
        item.score = result.item.score
        item.votes = result.item.votes
        self.record_rating(item, value)
        return item, result

    def rate(self, value: int, service: Callable) -> Optional[ContentItem]:
        """
        Rate the current item and move to the next one.

        The server's suggestion is used when present; otherwise the weighted
        strategy picks from the local history. The chosen item is inserted
        right after the current position. With no suggestion at all the
        session simply advances.

        Args:
            value: 1 or -1.
            service: RatingService or any callable with the same signature.

        Returns:
            The item now shown, or None when there are no items.
        """
        item, result = self._submit(value, service)
        if item is None:
            return None

        next_item = result.next_item or self.fallback.select(SelectionRequest(
            candidates=self.items,
            current_item=item,
            want_similar=value == 1,
            history=self.rating_history,
            language=self.language,
        ))

        if next_item is not None:
            self.items.insert(self.current_index + 1, next_item)
            self.current_index += 1
        elif self.current_index < len(self.items) - 1:
            self.current_index += 1
        return self.show_current()

    def quick_rate(self, value: int, service: Callable) -> Optional[ContentItem]:
        """Rate the current item without navigating."""
        item, _ = self._submit(value, service)
        return item

    # =========================================================================
    # Statistics
    # =========================================================================

    def personal_stats(self) -> dict:
        favorite_category = None
        if self.stats.rated_categories:
            favorite_category = self.stats.rated_categories.most_common(1)[0][0]

        if self.items:
            engagement = f"{len(self.rating_history) / len(self.items) * 100:.2f}%"
        else:
            engagement = "0%"

        return {
            "totalRatings": self.stats.total_ratings,
            "positiveRatings": self.stats.positive_ratings,
            "negativeRatings": self.stats.negative_ratings,
            "favoriteCategory": favorite_category,
            "favoriteType": most_common_type(self.items, self.rating_history),
            "engagementRate": engagement,
        }

    def public_stats(self) -> dict:
        """Catalog-wide figures as seen from the loaded items."""
        total = len(self.items)
        average = round(sum(i.score for i in self.items) / total, 2) if total else 0.0
        return {
            "totalItems": total,
            "totalRatings": len(self.rating_history),
            "averageScore": average,
            "mostRatedType": most_common_type(self.items, self.rating_history),
        }
