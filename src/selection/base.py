"""
Base next-item strategy abstraction for Topper.

After a vote, a strategy decides which item to present next. Strategies are
pure: they perform no I/O and hold no shared mutable state, so they are
safe to call concurrently. Randomness comes from an injectable
random.Random instance.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional
import random

from src.models.content_item import ContentItem
from src.models.rating import RatingEvent


@dataclass
class SelectionRequest:
    """
    Input to a next-item strategy.

    Attributes:
        candidates: Item pool in store order.
        current_item: The item that was just rated (None when unknown).
        want_similar: True after an upvote, False after a downvote.
        history: The user's rating events in chronological order.
        language: The viewer's current locale.
    """
    candidates: List[ContentItem]
    current_item: Optional[ContentItem] = None
    want_similar: bool = True
    history: List[RatingEvent] = field(default_factory=list)
    language: Optional[str] = None


class NextItemStrategy(ABC):
    """
    Abstract base class for next-item selection strategies.

    Returning None means "no next item" - a valid terminal state for an
    empty pool, never an error.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this strategy (used in config and logs)."""
        pass

    @abstractmethod
    def select(self, request: SelectionRequest) -> Optional[ContentItem]:
        """
        Pick the next item to present.

        Args:
            request: Current item, direction, pool and history.

        Returns:
            The chosen ContentItem, or None when nothing can be chosen.
        """
        pass

    def _pick_random(self, items: List[ContentItem]) -> Optional[ContentItem]:
        """Uniform random pick; None for an empty list."""
        if not items:
            return None
        return items[self.rng.randrange(len(items))]

    def __str__(self) -> str:
        return f"NextItemStrategy({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
