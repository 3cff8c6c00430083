"""
Rating request handler.

Accepts one vote, applies it to the item, appends it to the ledger,
persists both together and picks the next item to show.

Usage:
    service = RatingService(JsonFileStorage())
    result = service.submit("item-42", 1, lang="ro")
    payload = result.to_dict("ro")
"""

from dataclasses import dataclass
import logging
import threading
from typing import Optional

from src.config import NEXT_ITEM_STRATEGY
from src.models.content_item import ContentItem
from src.models.localization import localize
from src.models.rating import RatingEvent
from src.rating.errors import ItemNotFound, PersistFailed, RateLimited
from src.rating.score_updater import apply_rating
from src.rating.validation import validate_rating_request
from src.selection import NextItemStrategy, SelectionRequest, get_strategy
from src.services.rate_limiter import RateLimiter
from src.storage.base import PersistError, Storage

logger = logging.getLogger(__name__)

# Serializes the read-modify-write cycle for every service in this process
_WRITE_LOCK = threading.Lock()


@dataclass
class RatingResult:
    """Outcome of a successful submission."""
    rating: RatingEvent
    item: ContentItem
    next_item: Optional[ContentItem] = None

    def to_dict(self, lang: Optional[str] = None) -> dict:
        """Wire shape: {rating, item: {id, score}, nextItem?}."""
        payload = {
            "rating": self.rating.to_dict(),
            "item": {"id": self.item.id, "score": self.item.score},
        }
        if self.next_item is not None:
            payload["nextItem"] = localize(self.next_item, lang).to_dict()
        return payload


class RatingService:
    """
    Handles rating submissions against a Storage backend.

    Args:
        storage: Item store and rating ledger.
        strategy: Next-item strategy (defaults to NEXT_ITEM_STRATEGY).
        rate_limiter: Optional limiter keyed by client_key.
    """

    def __init__(
        self,
        storage: Storage,
        strategy: Optional[NextItemStrategy] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.storage = storage
        self.strategy = strategy or get_strategy(NEXT_ITEM_STRATEGY)
        self.rate_limiter = rate_limiter

    def submit(
        self,
        item_id,
        value,
        user_id=None,
        lang: Optional[str] = None,
        client_key: Optional[str] = None,
    ) -> RatingResult:
        """
        Record one vote and choose the next item.

        Raises:
            RateLimited: Client exceeded the submission rate.
            InvalidInput: Malformed item id, value or user id.
            ItemNotFound: No item with this id.
            PersistFailed: Items and ledger could not be written.
        """
        if self.rate_limiter is not None and client_key is not None:
            limit = self.rate_limiter.check(client_key)
            if not limit.allowed:
                logger.info("Rating rate limit hit for %s", client_key)
                raise RateLimited(limit.retry_after)

        request = validate_rating_request(item_id, value, user_id)

        with _WRITE_LOCK:
            items = self.storage.read_items()
            ratings = self.storage.read_ratings()

            item = next((i for i in items if i.id == request.item_id), None)
            if item is None:
                raise ItemNotFound(request.item_id)

            apply_rating(item, request.value)
            rating = RatingEvent(
                item_id=request.item_id,
                value=request.value,
                user_id=request.user_id,
            )
            ratings.append(rating)

            try:
                self.storage.commit(items, ratings)
            except PersistError as e:
                logger.error("Failed to persist rating for %s: %s", request.item_id, e)
                raise PersistFailed(str(e)) from e

        logger.debug("Recorded %+d for %s (score=%d)", rating.value, item.id, item.score)

        if request.user_id:
            history = [r for r in ratings if r.user_id == request.user_id]
        else:
            history = [rating]

        next_item = self.strategy.select(SelectionRequest(
            candidates=items,
            current_item=item,
            want_similar=request.value == 1,
            history=history,
            language=lang,
        ))
        return RatingResult(rating=rating, item=item, next_item=next_item)

    def __call__(self, *args, **kwargs) -> RatingResult:
        return self.submit(*args, **kwargs)
