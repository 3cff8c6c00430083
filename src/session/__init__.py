"""
Session module.

Per-viewer navigation and rating state.
"""

from src.session.session import RatingSession, SessionStats, ViewRecord

__all__ = [
    "RatingSession",
    "SessionStats",
    "ViewRecord",
]
