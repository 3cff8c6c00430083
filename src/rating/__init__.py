"""
Rating module.

Validation, score updates and the submission handler.
"""

from src.rating.errors import (
    RatingError,
    InvalidInput,
    ItemNotFound,
    RateLimited,
    PersistFailed,
)
from src.rating.validation import (
    RatingRequest,
    validate_rating_request,
    parse_rating_payload,
    is_valid_item_id,
    is_valid_user_id,
)
from src.rating.score_updater import apply_rating
from src.rating.handler import RatingService, RatingResult

__all__ = [
    "RatingError",
    "InvalidInput",
    "ItemNotFound",
    "RateLimited",
    "PersistFailed",
    "RatingRequest",
    "validate_rating_request",
    "parse_rating_payload",
    "is_valid_item_id",
    "is_valid_user_id",
    "apply_rating",
    "RatingService",
    "RatingResult",
]
