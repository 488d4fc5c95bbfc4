"""Scoring constants for the docsearch ranking pipeline.

This module contains all constants used by tier detection and scoring:
- Tier bands (floor/ceiling per match tier)
- Base points inside each band
- Word-overlap and fuzzy-match thresholds
- Stop words dropped from full-text queries
"""

from ...models.enums import MatchTier

# ---------------------------------------------------------------------------
# Context label used when no indicator term matched (or labels tied at zero).
# ---------------------------------------------------------------------------
MIXED_CONTEXT = "mixed"

# ---------------------------------------------------------------------------
# Tier bands. Each tier owns [floor, floor + TIER_BAND_WIDTH]; a final score is
# capped at its own tier's ceiling so boosts can never lift a result into a
# higher tier.
# ---------------------------------------------------------------------------
TIER_BAND_WIDTH = 99.0

TIER_FLOORS: dict[MatchTier, float] = {
    MatchTier.EXACT_TITLE: 600.0,
    MatchTier.HIGH_WORD_OVERLAP: 500.0,
    MatchTier.TITLE_CONTAINS_QUERY: 400.0,
    MatchTier.QUERY_CONTAINS_TITLE: 300.0,
    MatchTier.EXACT_KEYWORD: 200.0,
    MatchTier.CONTENT_CONTAINS_QUERY: 100.0,
    MatchTier.FUZZY_PARTIAL: 0.0,
}

# Precedence order, strongest first
TIER_ORDER: tuple[MatchTier, ...] = tuple(TIER_FLOORS)


def tier_ceiling(tier: MatchTier) -> float:
    return TIER_FLOORS[tier] + TIER_BAND_WIDTH


# Context penalties may push a matched result down through lower bands, but
# never into the fuzzy band: only fuzzy matches can score below this.
MATCHED_TIER_FLOOR = TIER_FLOORS[MatchTier.CONTENT_CONTAINS_QUERY]


def tier_floor(tier: MatchTier) -> float:
    if tier == MatchTier.FUZZY_PARTIAL:
        return 0.0
    return MATCHED_TIER_FLOOR


# ---------------------------------------------------------------------------
# Exact title: a document title outranks a same-text H2, which outranks H3 ...
# Keyed by heading level; None and 1 both mean a top-level document.
# ---------------------------------------------------------------------------
EXACT_TITLE_POINTS: dict[int, float] = {
    1: 665.0,
    2: 660.0,
    3: 655.0,
}
EXACT_TITLE_DEEP_POINTS = 652.0  # H4 and deeper

# ---------------------------------------------------------------------------
# Base points for the remaining tiers.
# ---------------------------------------------------------------------------
HIGH_OVERLAP_BASE = 540.0
HIGH_OVERLAP_RATIO_POINTS = 20.0  # scaled by overlap ratio
TITLE_CONTAINS_QUERY_POINTS = 435.0
QUERY_CONTAINS_TITLE_POINTS = 330.0
EXACT_CONTROL_NAME_POINTS = 248.0
EXACT_KEYWORD_POINTS = 246.0
KEYWORD_CONTAINS_QUERY_POINTS = 137.0
DESCRIPTION_CONTAINS_QUERY_POINTS = 125.0

# ---------------------------------------------------------------------------
# Thresholds.
# ---------------------------------------------------------------------------
MIN_TOKEN_LENGTH = 3  # query/title tokens must be longer than 2 characters
HIGH_OVERLAP_MIN_RATIO = 0.6
HIGH_OVERLAP_MIN_TOKENS = 2
MIN_CONTAINMENT_LENGTH = 6  # phrase/title must be longer than 5 characters
FUZZY_MIN_SIMILARITY = 50.0  # strictly greater than
FUZZY_TITLE_DISCOUNT = 0.7
FUZZY_DESCRIPTION_DISCOUNT = 0.6
FUZZY_DESCRIPTION_MIN_WORD_LENGTH = 4
FUZZY_MAX_DESCRIPTION_WORDS = 40

# ---------------------------------------------------------------------------
# Raw relevance contribution: RELEVANCE_BONUS_MAX * r / (1 + r), so the
# retrieval score breaks ties inside a tier without dominating it.
# ---------------------------------------------------------------------------
RELEVANCE_BONUS_MAX = 5.0

# ---------------------------------------------------------------------------
# Stop words dropped when converting a variant into an FTS MATCH expression.
# Bare terms are ANDed together, so "how to use the wizard" would otherwise
# require documents to contain "how", "to" and "the".
# ---------------------------------------------------------------------------
FTS_STOP_WORDS = frozenset(
    {
        "a",
        "an",
        "the",
        "to",
        "in",
        "on",
        "for",
        "and",
        "or",
        "of",
        "with",
        "from",
        "how",
        "what",
        "why",
        "when",
        "where",
        "which",
        "who",
        "whom",
        "does",
        "do",
        "is",
        "are",
    }
)
