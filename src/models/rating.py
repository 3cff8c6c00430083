"""
Rating event model.

A RatingEvent is an immutable record of one +1/-1 vote on one item. Events
are appended to the rating ledger and never modified afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
import secrets
import time

ALLOWED_VALUES = (1, -1)

# Keys owned by RatingEvent.to_dict(); anything else on disk goes to `extra`
_KNOWN_KEYS = {"id", "userId", "itemId", "value", "createdAt"}

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_rating_id() -> str:
    """Generate a unique rating id: rating_<base36 millis>_<random hex>."""
    return f"rating_{_to_base36(int(time.time() * 1000))}_{secrets.token_hex(8)}"


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_valid_rating_value(value) -> bool:
    """True for exactly the integers 1 and -1 (booleans excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value in ALLOWED_VALUES


@dataclass(frozen=True)
class RatingEvent:
    """
    One vote on one item.

    Attributes:
        item_id: Id of the rated ContentItem.
        value: +1 or -1.
        user_id: Optional UUID of the voter (None = anonymous).
        id: Unique event id.
        created_at: ISO-8601 creation time.
        extra: Unknown keys read from disk, written back unchanged.
    """

    item_id: str
    value: int
    user_id: Optional[str] = None
    id: str = field(default_factory=generate_rating_id)
    created_at: str = field(default_factory=utc_now_iso)
    extra: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not is_valid_rating_value(self.value):
            raise ValueError(f"rating value must be 1 or -1, got {self.value!r}")
        if not self.item_id:
            raise ValueError("rating item_id is required")

    @property
    def is_positive(self) -> bool:
        return self.value == 1

    def to_dict(self) -> dict:
        """Wire/on-disk shape: {id, userId, itemId, value, createdAt}."""
        return {
            **self.extra,
            "id": self.id,
            "userId": self.user_id,
            "itemId": self.item_id,
            "value": self.value,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RatingEvent":
        """
        Create from the on-disk shape (accepts "timestamp" for createdAt).

        Raises:
            ValueError: If the record has no id or no creation time. Stored
                events must read back identically every time.
        """
        if not data.get("id"):
            raise ValueError(f"rating record has no id: {data!r}")
        created_at = data.get("createdAt") or data.get("timestamp")
        if not created_at:
            raise ValueError(f"rating record {data['id']!r} has no createdAt or timestamp")
        return cls(
            item_id=str(data["itemId"]),
            value=data["value"],
            user_id=data.get("userId"),
            id=str(data["id"]),
            created_at=created_at,
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )
