"""
Tag-overlap next-item strategy (server side).

Simple, order-dependent selection used by the rating endpoint:
- after an upvote, the first item in store order sharing a tag with the
  rated item;
- after a downvote, the first item sharing no tag with it;
- otherwise a uniform random item from the pool.
"""

from dataclasses import dataclass
from typing import List, Optional

from src.models.content_item import ContentItem
from src.selection.base import NextItemStrategy, SelectionRequest


@dataclass
class TagOverlapResult:
    """Selected item and whether it came from the first-match scan."""
    item: Optional[ContentItem]
    matched: bool


class TagOverlapStrategy(NextItemStrategy):
    """Picks the next item by tag overlap with the item just rated."""

    @property
    def name(self) -> str:
        return "tag_overlap"

    @staticmethod
    def candidate_pool(request: SelectionRequest) -> List[ContentItem]:
        """All candidates except the current item, in store order."""
        if request.current_item is None:
            return list(request.candidates)
        return [c for c in request.candidates if c.id != request.current_item.id]

    def select_with_reason(self, request: SelectionRequest) -> TagOverlapResult:
        """
        Select the next item and report which branch produced it.

        Returns:
            TagOverlapResult; matched is False for the random fallback and
            for an empty pool.
        """
        pool = self.candidate_pool(request)
        if not pool:
            return TagOverlapResult(item=None, matched=False)

        current_tags = set(request.current_item.tags) if request.current_item else set()

        for candidate in pool:
            shares = bool(current_tags & set(candidate.tags))
            if shares == request.want_similar:
                return TagOverlapResult(item=candidate, matched=True)

        return TagOverlapResult(item=self._pick_random(pool), matched=False)

    def select(self, request: SelectionRequest) -> Optional[ContentItem]:
        return self.select_with_reason(request).item
