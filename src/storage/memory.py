"""
In-memory storage for testing and development.

Use this when no data directory should be touched. Data is stored in memory
and lost when the process ends.
"""

import copy
from typing import List

from src.models.content_item import ContentItem
from src.models.rating import RatingEvent
from src.storage.base import PersistError, Storage, check_append_only


class InMemoryStorage(Storage):
    """
    In-memory storage backend.

    Reads return deep copies so callers can mutate freely without touching
    the stored state until they write or commit.
    """

    def __init__(self, items: List[ContentItem] = None, ratings: List[RatingEvent] = None):
        self._items: List[ContentItem] = copy.deepcopy(list(items or []))
        self._ratings: List[RatingEvent] = list(ratings or [])
        self.fail_writes = False
        self.write_count = 0

    @property
    def name(self) -> str:
        return "memory"

    def _check_writable(self) -> None:
        if self.fail_writes:
            raise PersistError("storage is not writable")

    def read_items(self) -> List[ContentItem]:
        return copy.deepcopy(self._items)

    def write_items(self, items: List[ContentItem]) -> None:
        self._check_writable()
        self._items = copy.deepcopy(list(items))
        self.write_count += 1

    def read_ratings(self) -> List[RatingEvent]:
        return list(self._ratings)

    def write_ratings(self, ratings: List[RatingEvent]) -> None:
        self._check_writable()
        check_append_only(self._ratings, ratings)
        self._ratings = list(ratings)
        self.write_count += 1

    def commit(self, items: List[ContentItem], ratings: List[RatingEvent]) -> None:
        self._check_writable()
        check_append_only(self._ratings, ratings)
        self._items = copy.deepcopy(list(items))
        self._ratings = list(ratings)
        self.write_count += 1

    def reset(self, items: List[ContentItem], ratings: List[RatingEvent]) -> None:
        self._check_writable()
        self._items = copy.deepcopy(list(items))
        self._ratings = list(ratings)
        self.write_count += 1

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._items.clear()
        self._ratings.clear()

    def count(self) -> int:
        """Return number of stored items (for testing)."""
        return len(self._items)
