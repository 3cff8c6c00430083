"""
Preference model for next-item selection.

Derives per-category, per-type and per-tag weights from a user's rating
history. The weight map is transient: it is built fresh for every
recommendation and never persisted.

All functions are deterministic and do not mutate input data.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, List

from src.models.content_item import ContentItem
from src.models.rating import RatingEvent


# =============================================================================
# Scoring Configuration
# =============================================================================

# Multipliers applied to each dimension's accumulated weight
WEIGHT_CATEGORY: float = 2.0
WEIGHT_TYPE: float = 1.5
WEIGHT_TAG: float = 1.0


@dataclass
class PreferenceWeights:
    """
    Accumulated signed weights per dimension value.

    Attributes:
        categories: category name -> sum of rating values.
        types: type name -> sum of rating values.
        tags: tag -> sum of rating values.
    """
    categories: dict[str, int] = field(default_factory=dict)
    types: dict[str, int] = field(default_factory=dict)
    tags: dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.categories or self.types or self.tags)

    def category_weight(self, category: str) -> int:
        return self.categories.get(category, 0) if category else 0

    def type_weight(self, type_name: str) -> int:
        return self.types.get(type_name, 0) if type_name else 0

    def tag_weight(self, tag: str) -> int:
        return self.tags.get(tag, 0)

    def base_score(self, item: ContentItem) -> float:
        """
        Preference score of an item before direction and jitter.

        Formula:
            2 * category_weight + 1.5 * type_weight + sum(tag weights)

        Dimension values absent from the maps count as 0.
        """
        return (
            WEIGHT_CATEGORY * self.category_weight(item.category)
            + WEIGHT_TYPE * self.type_weight(item.type)
            + WEIGHT_TAG * sum(self.tag_weight(tag) for tag in item.tags)
        )


def build_preference_weights(
    history: Iterable[RatingEvent],
    items: List[ContentItem],
) -> PreferenceWeights:
    """
    Build preference weights from rating history.

    Each event contributes its value (+1 or -1) to the rated item's category,
    its type, and every one of its tags. Events whose item is not in `items`
    are skipped.

    Args:
        history: Rating events in chronological order.
        items: Items to resolve event item ids against.

    Returns:
        PreferenceWeights for this history.
    """
    by_id = {item.id: item for item in items}

    categories: dict[str, int] = defaultdict(int)
    types: dict[str, int] = defaultdict(int)
    tags: dict[str, int] = defaultdict(int)

    for event in history:
        item = by_id.get(event.item_id)
        if item is None:
            continue

        multiplier = 1 if event.value == 1 else -1

        if item.category:
            categories[item.category] += multiplier
        if item.type:
            types[item.type] += multiplier
        for tag in item.tags:
            tags[tag] += multiplier

    return PreferenceWeights(
        categories=dict(categories),
        types=dict(types),
        tags=dict(tags),
    )
