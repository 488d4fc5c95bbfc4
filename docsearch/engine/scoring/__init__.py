"""Scoring engine for docsearch ranking.

This package provides context classification and tiered match scoring:
- Context classification from configuration-declared indicator terms
- Tier detection (exact title down to fuzzy partial)
- Static, term and context boosts with tier-band clamping

Usage:
    from docsearch.engine.scoring import (
        classify_context,
        score_candidates,
    )
"""

from .constants import (
    FTS_STOP_WORDS,
    MIXED_CONTEXT,
    TIER_FLOORS,
    TIER_ORDER,
    tier_ceiling,
    tier_floor,
)
from .context import classify_context, context_scores
from .match_scorer import (
    best_match,
    detect_tier,
    effective_multiplier,
    score_candidate,
    score_candidates,
    term_boost,
    tokenize,
)
from .similarity import edit_distance, similarity

__all__ = [
    # Constants
    "FTS_STOP_WORDS",
    "MIXED_CONTEXT",
    "TIER_FLOORS",
    "TIER_ORDER",
    "tier_ceiling",
    "tier_floor",
    # Context classifier
    "classify_context",
    "context_scores",
    # Scorer
    "best_match",
    "detect_tier",
    "effective_multiplier",
    "score_candidate",
    "score_candidates",
    "term_boost",
    "tokenize",
    # Similarity
    "edit_distance",
    "similarity",
]
