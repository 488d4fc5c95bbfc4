"""Dialect (flavor) filtering.

Sources that share a ``dialect_group`` document near-identical subject
matter for mutually exclusive variants of one language or product. Only
the dialect the query asks for, or the group's default, is kept.
"""

import logging
import re
from collections.abc import Sequence

from ..core.document import ScoredResult
from ..core.metadata import RankingConfig

logger = logging.getLogger(__name__)


def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)", re.IGNORECASE)


def requested_dialects(query: str, config: RankingConfig) -> dict[str, set[str]]:
    """Dialects explicitly named in the query, per group.

    Keywords match case-insensitively on word boundaries, so "cloud" does not
    match "cloudy".
    """
    requested: dict[str, set[str]] = {}
    for group, per_dialect in config.dialect_keywords.items():
        for dialect, keywords in per_dialect.items():
            if any(_keyword_pattern(k).search(query) for k in keywords):
                requested.setdefault(group, set()).add(dialect)
    return requested


def allowed_dialects(query: str, config: RankingConfig) -> dict[str, set[str] | None]:
    """Allowed dialects per group; None means the whole group is kept."""
    requested = requested_dialects(query, config)
    groups = {s.dialect_group for s in config.sources if s.dialect_group}
    allowed: dict[str, set[str] | None] = {}
    for group in groups:
        if group in requested:
            allowed[group] = requested[group]
        elif group in config.dialect_defaults:
            allowed[group] = {config.dialect_defaults[group]}
        else:
            allowed[group] = None
    return allowed


def filter_dialects(
    results: Sequence[ScoredResult], query: str, config: RankingConfig
) -> list[ScoredResult]:
    """Drop results from dialects the query did not ask for.

    Results from sources outside every dialect group, or from sources the
    configuration does not know, are always kept.

    Args:
        results: Scored results
        query: Raw query as typed
        config: Ranking configuration

    Returns:
        Filtered results, order preserved
    """
    if not config.has_dialect_groups:
        return list(results)

    allowed = allowed_dialects(query, config)
    kept: list[ScoredResult] = []
    for result in results:
        source = config.source(result.source_id)
        if source is None or not source.dialect_group:
            kept.append(result)
            continue
        group_allowed = allowed.get(source.dialect_group)
        if group_allowed is None or source.dialect in group_allowed:
            kept.append(result)

    if len(kept) < len(results):
        logger.info(
            f"Dialect filter kept {len(kept)}/{len(results)} results (allowed: {allowed})"
        )
    return kept
