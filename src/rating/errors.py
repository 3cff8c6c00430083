"""
Error taxonomy for rating submissions.

Every error carries a stable wire `code` and an HTTP-like `status` so the
web layer can render `{"error": code}` without knowing the details.
"""


class RatingError(Exception):
    """Base class for rating submission failures."""

    code = "internal_error"
    status = 500

    def __init__(self, message: str = "", code: str = None):
        super().__init__(message or self.code)
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"error": self.code}


class InvalidInput(RatingError):
    """Malformed item id, value or user id. Nothing was mutated."""

    code = "invalid_payload"
    status = 400


class ItemNotFound(RatingError):
    """Well-formed item id that is not in the store. Nothing was mutated."""

    code = "item_not_found"
    status = 404

    def __init__(self, item_id: str):
        super().__init__(f"item {item_id!r} not found")
        self.item_id = item_id


class RateLimited(RatingError):
    """Caller exceeded the allowed submission rate; handler body never ran."""

    code = "rate_limit_exceeded"
    status = 429

    def __init__(self, retry_after: float):
        super().__init__(f"too many rating requests, retry in {retry_after:.0f}s")
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        return {"error": self.code, "retryAfter": round(self.retry_after, 3)}


class PersistFailed(RatingError):
    """
    The rating could not be written durably.

    The vote is not guaranteed to be recorded. Retrying may double count
    if an earlier attempt actually landed.
    """

    code = "persist_failed"
    status = 500
