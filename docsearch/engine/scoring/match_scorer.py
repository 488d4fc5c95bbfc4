"""Tiered match scoring.

Scores one candidate against the query variants:
- Tier detection (exact title > word overlap > containment > keyword > fuzzy)
- Relevance bonus from the retrieval score
- Static and term boosts of the candidate's source
- Context multiplier, waived by per-source override keywords
- Clamping into the tier's band
"""

import logging
import re
from collections.abc import Sequence

from ...models.enums import MatchTier
from ..core.document import CandidateDocument, ScoredResult
from ..core.metadata import RankingConfig
from .constants import (
    DESCRIPTION_CONTAINS_QUERY_POINTS,
    EXACT_CONTROL_NAME_POINTS,
    EXACT_KEYWORD_POINTS,
    EXACT_TITLE_DEEP_POINTS,
    EXACT_TITLE_POINTS,
    FUZZY_DESCRIPTION_DISCOUNT,
    FUZZY_DESCRIPTION_MIN_WORD_LENGTH,
    FUZZY_MAX_DESCRIPTION_WORDS,
    FUZZY_MIN_SIMILARITY,
    FUZZY_TITLE_DISCOUNT,
    HIGH_OVERLAP_BASE,
    HIGH_OVERLAP_MIN_RATIO,
    HIGH_OVERLAP_MIN_TOKENS,
    HIGH_OVERLAP_RATIO_POINTS,
    KEYWORD_CONTAINS_QUERY_POINTS,
    MIN_CONTAINMENT_LENGTH,
    MIN_TOKEN_LENGTH,
    QUERY_CONTAINS_TITLE_POINTS,
    RELEVANCE_BONUS_MAX,
    TITLE_CONTAINS_QUERY_POINTS,
    tier_ceiling,
    tier_floor,
)
from .similarity import similarity

logger = logging.getLogger(__name__)

_TOKEN_SPLIT_RE = re.compile(r"[^\w]+")


def tokenize(text: str, min_length: int = MIN_TOKEN_LENGTH) -> list[str]:
    """Lower-case word tokens of at least ``min_length`` characters."""
    return [t for t in _TOKEN_SPLIT_RE.split(text.lower()) if len(t) >= min_length]


def exact_title_points(heading_level: int | None) -> float:
    """Exact-title points by nesting depth: document > H2 > H3 > H4 and deeper."""
    return EXACT_TITLE_POINTS.get(heading_level or 1, EXACT_TITLE_DEEP_POINTS)


def _word_overlap(variant_tokens: list[str], title_tokens: list[str]) -> tuple[int, float]:
    if not variant_tokens or not title_tokens:
        return 0, 0.0
    matched = sum(
        1 for q in variant_tokens if any(q in t or t in q for t in title_tokens)
    )
    return matched, matched / len(variant_tokens)


def detect_tier(candidate: CandidateDocument, variant: str) -> tuple[MatchTier, float] | None:
    """Find the strongest non-fuzzy tier a single variant reaches.

    Args:
        candidate: Candidate document
        variant: One query variant

    Returns:
        (tier, base points) or None when no exact/containment tier applies
    """
    v = variant.strip().lower()
    if not v:
        return None
    title = candidate.title.strip().lower()

    if title and title == v:
        return MatchTier.EXACT_TITLE, exact_title_points(candidate.heading_level)

    matched, ratio = _word_overlap(tokenize(v), tokenize(title))
    if ratio >= HIGH_OVERLAP_MIN_RATIO and matched >= HIGH_OVERLAP_MIN_TOKENS:
        return MatchTier.HIGH_WORD_OVERLAP, HIGH_OVERLAP_BASE + ratio * HIGH_OVERLAP_RATIO_POINTS

    if len(v) >= MIN_CONTAINMENT_LENGTH and v in title:
        return MatchTier.TITLE_CONTAINS_QUERY, TITLE_CONTAINS_QUERY_POINTS

    if len(title) >= MIN_CONTAINMENT_LENGTH and title in v:
        return MatchTier.QUERY_CONTAINS_TITLE, QUERY_CONTAINS_TITLE_POINTS

    if candidate.control_name and candidate.control_name.lower() == v:
        return MatchTier.EXACT_KEYWORD, EXACT_CONTROL_NAME_POINTS
    keywords = [k.lower() for k in candidate.keywords]
    if v in keywords:
        return MatchTier.EXACT_KEYWORD, EXACT_KEYWORD_POINTS

    if len(v) >= MIN_TOKEN_LENGTH:
        if any(v in k for k in keywords):
            return MatchTier.CONTENT_CONTAINS_QUERY, KEYWORD_CONTAINS_QUERY_POINTS
        if v in candidate.description.lower():
            return MatchTier.CONTENT_CONTAINS_QUERY, DESCRIPTION_CONTAINS_QUERY_POINTS

    return None


def _best_similarity(parts: list[str], words: list[str]) -> float:
    best = 0.0
    for part in parts:
        for word in words:
            shorter, longer = sorted((len(part), len(word)))
            # Edit-distance similarity is bounded by shorter/longer
            contained = part in word or word in part
            if not contained and shorter * 100 <= longer * FUZZY_MIN_SIMILARITY:
                continue
            best = max(best, similarity(part, word))
    return best


def fuzzy_points(candidate: CandidateDocument, query: str) -> float:
    """Best discounted similarity between query parts and title/description words."""
    parts = tokenize(query)
    if not parts:
        return 0.0

    title_similarity = _best_similarity(parts, tokenize(candidate.title))
    description_words = list(
        dict.fromkeys(tokenize(candidate.description, FUZZY_DESCRIPTION_MIN_WORD_LENGTH))
    )[:FUZZY_MAX_DESCRIPTION_WORDS]
    description_similarity = _best_similarity(parts, description_words)

    points = 0.0
    if title_similarity > FUZZY_MIN_SIMILARITY:
        points = title_similarity * FUZZY_TITLE_DISCOUNT
    if description_similarity > FUZZY_MIN_SIMILARITY:
        points = max(points, description_similarity * FUZZY_DESCRIPTION_DISCOUNT)
    return points


def best_match(
    candidate: CandidateDocument, query: str, variants: Sequence[str]
) -> tuple[MatchTier, float, str] | None:
    """Evaluate the query and every variant, keeping the highest base points.

    The original query is evaluated first so it wins ties. Fuzzy matching is
    only tried against the original query, and only when no variant reached
    a stronger tier.
    """
    best: tuple[MatchTier, float, str] | None = None
    for variant in dict.fromkeys((query, *variants)):
        match = detect_tier(candidate, variant)
        if match and (best is None or match[1] > best[1]):
            best = (match[0], match[1], variant)
    if best is not None:
        return best

    points = fuzzy_points(candidate, query)
    if points > 0:
        return MatchTier.FUZZY_PARTIAL, points, query
    return None


def relevance_bonus(relevance: float) -> float:
    """Bounded bonus from the re-oriented retrieval score."""
    if relevance <= 0:
        return 0.0
    return RELEVANCE_BONUS_MAX * relevance / (1.0 + relevance)


def term_boost(config: RankingConfig, source_id: str, query: str) -> float:
    """Sum of the source's term boosts whose terms occur in the query."""
    source = config.source(source_id)
    if source is None:
        return 0.0
    query_lower = query.lower()
    return sum(
        entry.boost for entry in source.term_boosts if any(t in query_lower for t in entry.terms)
    )


def effective_multiplier(
    config: RankingConfig, context_label: str, source_id: str, query: str
) -> float:
    """Context multiplier for a source, with penalties waived by override keywords.

    A multiplier of 0 is an exclusion and is never waived.
    """
    multiplier = config.context_multiplier(context_label, source_id)
    if 0 < multiplier < 1.0:
        query_lower = query.lower()
        overrides = config.penalty_overrides_for(context_label, source_id)
        if any(keyword in query_lower for keyword in overrides):
            return 1.0
    return multiplier


def score_candidate(
    candidate: CandidateDocument,
    context_label: str,
    query: str,
    variants: Sequence[str],
    config: RankingConfig,
) -> ScoredResult | None:
    """Score one candidate.

    Args:
        candidate: Candidate document with canonical metadata
        context_label: Label chosen by the context classifier
        query: Original query
        variants: Expanded query variants
        config: Ranking configuration

    Returns:
        The scored result, or None when no tier matched or the source is
        excluded (multiplier 0) in this context.
    """
    match = best_match(candidate, query, variants)
    if match is None:
        return None
    tier, points, variant = match

    multiplier = effective_multiplier(config, context_label, candidate.source_id, query)
    if multiplier == 0:
        return None

    score = (
        points
        + relevance_bonus(candidate.relevance)
        + config.static_boost(candidate.source_id)
        + term_boost(config, candidate.source_id, query)
    ) * multiplier
    final_score = min(tier_ceiling(tier), max(tier_floor(tier), score))

    return ScoredResult(
        candidate=candidate,
        match_tier=tier,
        final_score=round(final_score, 4),
        context_label=context_label,
        matched_variant=variant,
    )


def score_candidates(
    candidates: Sequence[CandidateDocument],
    context_label: str,
    query: str,
    variants: Sequence[str],
    config: RankingConfig,
) -> list[ScoredResult]:
    """Score a candidate pool, dropping unmatched and excluded candidates."""
    scored: list[ScoredResult] = []
    for candidate in candidates:
        result = score_candidate(candidate, context_label, query, variants, config)
        if result is not None:
            scored.append(result)
    logger.debug(f"Scored {len(scored)}/{len(candidates)} candidates in context '{context_label}'")
    return scored
