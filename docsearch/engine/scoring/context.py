"""Context classification.

Assigns a single dominant domain label to a query by counting the
configuration-declared indicator terms found in the query and its variants.
"""

import logging
from collections.abc import Sequence

from ..core.metadata import RankingConfig
from .constants import MIXED_CONTEXT

logger = logging.getLogger(__name__)


def context_scores(
    original_query: str, variants: Sequence[str], config: RankingConfig
) -> dict[str, int]:
    """Count, per label, the indicator terms present in the query or any variant.

    Args:
        original_query: Query as typed by the caller
        variants: Expanded query variants
        config: Ranking configuration holding the indicator terms

    Returns:
        Label -> number of distinct indicator terms found, in declaration order
    """
    texts = [original_query.lower(), *(v.lower() for v in variants)]
    return {
        label: sum(1 for term in terms if any(term in text for text in texts))
        for label, terms in config.context_indicator_terms.items()
    }


def classify_context(original_query: str, variants: Sequence[str], config: RankingConfig) -> str:
    """Return the label with the strictly highest indicator count.

    Ties go to the label declared first; a query with no indicator terms at
    all is classified as ``MIXED_CONTEXT``.
    """
    scores = context_scores(original_query, variants, config)
    best_label = MIXED_CONTEXT
    best_score = 0
    for label, score in scores.items():
        if score > best_score:
            best_label, best_score = label, score
    logger.debug(f"Context scores {scores} -> {best_label}")
    return best_label
