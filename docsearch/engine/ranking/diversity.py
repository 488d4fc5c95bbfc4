"""De-duplication and per-source diversity caps."""

import logging
from collections import Counter
from collections.abc import Sequence

from ...config import Settings
from ...config import settings as default_settings
from ..core.document import ScoredResult
from ..scoring.constants import MIXED_CONTEXT

logger = logging.getLogger(__name__)


def sort_key(result: ScoredResult) -> tuple[float, str, str]:
    """Score descending, then case-insensitive title, then id."""
    return (-result.final_score, result.title.casefold(), result.id)


def per_source_cap(context_label: str, cfg: Settings | None = None) -> int:
    """Smaller cap for mixed queries to force diversity, larger for focused ones."""
    cfg = cfg or default_settings
    if context_label == MIXED_CONTEXT:
        return cfg.max_per_source_mixed
    return cfg.max_per_source_focused


def select_results(
    results: Sequence[ScoredResult], max_total: int, max_per_source: int
) -> list[ScoredResult]:
    """Sort, drop duplicate ids and apply per-source and global caps.

    Args:
        results: Scored (and filtered) results in any order
        max_total: Global result cap
        max_per_source: Maximum results admitted from one source

    Returns:
        Final ranked list
    """
    selected: list[ScoredResult] = []
    seen_ids: set[str] = set()
    per_source: Counter[str] = Counter()

    for result in sorted(results, key=sort_key):
        if len(selected) >= max_total:
            break
        if result.id in seen_ids:
            continue
        seen_ids.add(result.id)
        if per_source[result.source_id] >= max_per_source:
            continue
        per_source[result.source_id] += 1
        selected.append(result)

    logger.debug(f"Selected {len(selected)}/{len(results)} results, per source: {dict(per_source)}")
    return selected
