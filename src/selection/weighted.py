"""
Weighted preference next-item strategy (client side).

Scores every candidate in the viewer's language against preference weights
derived from the rating history, then:
- after an upvote, returns the best-scoring candidate;
- after a downvote, inverts the scores and samples from the bottom 30% of
  the ranking, so the result is clearly different from what the user likes
  without always being the single worst match.

Formula (per candidate):
    score = 2 * category_weight + 1.5 * type_weight + sum(tag weights)
    score = -score                    (downvote path)
    score += uniform jitter in [0, JITTER)
"""

from dataclasses import dataclass
import math
import random
from typing import List, Optional

from src.models.content_item import ContentItem, normalize_language
from src.selection.base import NextItemStrategy, SelectionRequest
from src.selection.preferences import PreferenceWeights, build_preference_weights


# Upper bound (exclusive) of the random tie-breaking jitter
JITTER: float = 0.1

# Downvote path samples from this fraction of the ranking onwards
NEGATIVE_SLICE_START: float = 0.7


@dataclass
class ScoredCandidate:
    """A candidate with its final (signed, jittered) score."""
    item: ContentItem
    score: float


def filter_by_language(items: List[ContentItem], language: Optional[str]) -> List[ContentItem]:
    """Items whose lang is unset or equal to `language`."""
    code = normalize_language(language)
    return [item for item in items if not item.lang or item.lang == code]


class WeightedPreferenceStrategy(NextItemStrategy):
    """Picks the next item from accumulated category/type/tag preferences."""

    def __init__(self, rng: Optional[random.Random] = None, jitter: float = JITTER):
        super().__init__(rng)
        self.jitter = jitter

    @property
    def name(self) -> str:
        return "weighted"

    def score_candidates(
        self,
        candidates: List[ContentItem],
        weights: PreferenceWeights,
        is_positive: bool,
    ) -> List[ScoredCandidate]:
        """
        Score and rank candidates, best first.

        Returns:
            ScoredCandidate list sorted by score descending (stable).
        """
        scored = []
        for item in candidates:
            score = weights.base_score(item)
            if not is_positive:
                score = -score
            if self.jitter:
                score += self.rng.random() * self.jitter
            scored.append(ScoredCandidate(item=item, score=score))

        scored.sort(key=lambda c: c.score, reverse=True)
        return scored

    def _pick_from_ranking(self, ranked: List[ScoredCandidate], is_positive: bool) -> Optional[ContentItem]:
        if not ranked:
            return None
        if is_positive:
            return ranked[0].item

        start_index = math.floor(len(ranked) * NEGATIVE_SLICE_START)
        end_index = len(ranked) - 1
        if start_index > end_index:
            return ranked[-1].item
        return ranked[self.rng.randint(start_index, end_index)].item

    def select(self, request: SelectionRequest) -> Optional[ContentItem]:
        all_items = request.candidates
        if not all_items:
            return None

        candidates = filter_by_language(all_items, request.language)
        if not candidates:
            # Nothing in the viewer's language: drop the constraint entirely
            return self._pick_random(all_items)

        if not request.history:
            return self._pick_random(candidates)

        weights = build_preference_weights(request.history, all_items)
        ranked = self.score_candidates(candidates, weights, request.want_similar)
        return self._pick_from_ranking(ranked, request.want_similar)
