"""
Next-item selection module.

Preference weights and the two named next-item strategies.
"""

from typing import Optional
import random

from src.selection.base import NextItemStrategy, SelectionRequest
from src.selection.preferences import (
    PreferenceWeights,
    build_preference_weights,
    WEIGHT_CATEGORY,
    WEIGHT_TYPE,
    WEIGHT_TAG,
)
from src.selection.tag_overlap import TagOverlapStrategy, TagOverlapResult
from src.selection.weighted import (
    WeightedPreferenceStrategy,
    ScoredCandidate,
    filter_by_language,
    JITTER,
    NEGATIVE_SLICE_START,
)

STRATEGIES = {
    "tag_overlap": TagOverlapStrategy,
    "weighted": WeightedPreferenceStrategy,
}


def get_strategy(name: str, rng: Optional[random.Random] = None) -> NextItemStrategy:
    """
    Instantiate a strategy by name.

    Raises:
        ValueError: For an unknown strategy name.
    """
    try:
        strategy_cls = STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown next item strategy {name!r}; expected one of {', '.join(sorted(STRATEGIES))}"
        ) from None
    return strategy_cls(rng=rng)


__all__ = [
    "NextItemStrategy",
    "SelectionRequest",
    "PreferenceWeights",
    "build_preference_weights",
    "WEIGHT_CATEGORY",
    "WEIGHT_TYPE",
    "WEIGHT_TAG",
    "TagOverlapStrategy",
    "TagOverlapResult",
    "WeightedPreferenceStrategy",
    "ScoredCandidate",
    "filter_by_language",
    "JITTER",
    "NEGATIVE_SLICE_START",
    "STRATEGIES",
    "get_strategy",
]
