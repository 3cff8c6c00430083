"""
Base storage abstraction for Topper.

Defines the abstract interface that all storage backends must implement:
an item store (read/write the full item list) and an append-only rating
ledger. The rating flow commits both together through `commit()`.
"""

from abc import ABC, abstractmethod
from typing import List

from src.models.content_item import ContentItem
from src.models.rating import RatingEvent


class PersistError(Exception):
    """Raised when items and/or ratings could not be written durably."""


class Storage(ABC):
    """
    Abstract base class for all storage backends.

    Implementations must provide methods for:
    - Reading and writing the full item list
    - Reading and writing the rating ledger
    - Committing both in one step (all or nothing)

    The ledger is append-only: implementations must refuse to write a
    ratings list that drops or changes previously stored events.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.

        Used for logging and debugging.
        """
        pass

    @abstractmethod
    def read_items(self) -> List[ContentItem]:
        """
        Read all items in store order.

        Returns:
            List of ContentItem instances (empty when nothing is stored).
        """
        pass

    @abstractmethod
    def write_items(self, items: List[ContentItem]) -> None:
        """
        Replace the stored item list.

        Raises:
            PersistError: If the write fails.
        """
        pass

    @abstractmethod
    def read_ratings(self) -> List[RatingEvent]:
        """
        Read the rating ledger in insertion order.

        Returns:
            List of RatingEvent instances.
        """
        pass

    @abstractmethod
    def write_ratings(self, ratings: List[RatingEvent]) -> None:
        """
        Replace the stored rating ledger.

        Raises:
            PersistError: If the write fails or would drop existing events.
        """
        pass

    @abstractmethod
    def commit(self, items: List[ContentItem], ratings: List[RatingEvent]) -> None:
        """
        Write items and ratings together.

        Either both writes become visible or neither does.

        Raises:
            PersistError: If either write fails.
        """
        pass

    @abstractmethod
    def reset(self, items: List[ContentItem], ratings: List[RatingEvent]) -> None:
        """
        Replace items and ledger wholesale, skipping the append-only check.

        Only for seeding a fresh data set.

        Raises:
            PersistError: If either write fails.
        """
        pass

    def find_item(self, item_id: str):
        """
        Retrieve a single item by id.

        Default implementation scans read_items().

        Returns:
            ContentItem if found, None otherwise.
        """
        for item in self.read_items():
            if item.id == item_id:
                return item
        return None

    def __str__(self) -> str:
        return f"Storage({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


def check_append_only(previous: List[RatingEvent], new: List[RatingEvent]) -> None:
    """
    Verify that `new` extends `previous` without touching existing events.

    Raises:
        PersistError: If an existing event is missing or changed.
    """
    if len(new) < len(previous):
        raise PersistError(
            f"rating ledger is append-only: refusing to shrink from {len(previous)} to {len(new)} events"
        )
    for index, (old, current) in enumerate(zip(previous, new)):
        if old != current:
            raise PersistError(f"rating ledger is append-only: event #{index} ({old.id}) was modified")
