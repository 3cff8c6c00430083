"""
Input validation for rating submissions.

Item ids are restricted to an allow-list pattern so they can never carry
path or query fragments into a store lookup.
"""

from dataclasses import dataclass
import re
from typing import Any, Optional

from src.models.rating import is_valid_rating_value
from src.rating.errors import InvalidInput

ITEM_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
MAX_ITEM_ID_LENGTH = 128

UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class RatingRequest:
    """A validated rating submission."""
    item_id: str
    value: int
    user_id: Optional[str] = None


def is_valid_item_id(item_id: Any) -> bool:
    return (
        isinstance(item_id, str)
        and 0 < len(item_id) <= MAX_ITEM_ID_LENGTH
        and ITEM_ID_PATTERN.fullmatch(item_id) is not None
    )


def is_valid_user_id(user_id: Any) -> bool:
    return isinstance(user_id, str) and UUID_PATTERN.fullmatch(user_id) is not None


def validate_rating_request(item_id: Any, value: Any, user_id: Any = None) -> RatingRequest:
    """
    Validate raw submission fields.

    Args:
        item_id: Must match ^[A-Za-z0-9_-]+$ (max 128 chars).
        value: Exactly the integer 1 or -1.
        user_id: None, or a UUID string.

    Returns:
        RatingRequest with the validated fields.

    Raises:
        InvalidInput: With code invalid_item_id, invalid_value or
            invalid_user_id_format.
    """
    if not is_valid_item_id(item_id):
        raise InvalidInput(f"invalid item id: {item_id!r}", code="invalid_item_id")

    if not is_valid_rating_value(value):
        raise InvalidInput(f"rating value must be 1 or -1, got {value!r}", code="invalid_value")

    if user_id is not None and not is_valid_user_id(user_id):
        raise InvalidInput(f"user id must be a UUID, got {user_id!r}", code="invalid_user_id_format")

    return RatingRequest(item_id=item_id, value=value, user_id=user_id.lower() if user_id else None)


def parse_rating_payload(payload: Any) -> RatingRequest:
    """
    Validate a decoded JSON body {itemId, value, userId?}.

    Raises:
        InvalidInput: invalid_payload for a non-object or missing fields,
            otherwise the field-specific codes of validate_rating_request.
    """
    if not isinstance(payload, dict) or "itemId" not in payload or "value" not in payload:
        raise InvalidInput("body must be an object with itemId and value")

    return validate_rating_request(
        payload.get("itemId"),
        payload.get("value"),
        payload.get("userId"),
    )
