"""Search entry point.

Runs the ranking pipeline for one query:

    query -> expand -> retrieve -> classify -> score -> dialect filter -> select

Configuration is read once per call, every other structure is created per
call and discarded afterwards.
"""

import logging
import time

from ..config import Settings
from ..config import settings as default_settings
from ..logging_utils import sanitize_query
from ..models.enums import SearchStatus
from ..models.search import SearchOptions, SearchResponse, SearchResultItem
from .core.document import ScoredResult
from .core.metadata import RankingConfig, get_ranking_config
from .core.query import expand_query, extract_identifiers
from .core.urls import build_document_url
from .ranking.diversity import per_source_cap, select_results
from .ranking.flavor import filter_dialects
from .retrieval.base import DocumentIndex
from .retrieval.candidates import RetrievalOutcome, retrieve_candidates
from .scoring.context import classify_context, context_scores
from .scoring.match_scorer import score_candidates

logger = logging.getLogger(__name__)

# Identifiers suggested in a no-results hint
MAX_HINT_IDENTIFIERS = 5


def build_refinement_hint(query: str, config: RankingConfig, content: str | None = None) -> str:
    """Suggestion text returned when nothing matched.

    Args:
        query: Original query
        config: Ranking configuration holding the generic hints
        content: Optional snippet the query was about

    Returns:
        Multi-line hint text
    """
    lines = [f"No documentation matched '{query}'."]
    identifiers = extract_identifiers(content)[:MAX_HINT_IDENTIFIERS] if content else []
    if identifiers:
        lines.append(f"Identifiers found in the provided content: {', '.join(identifiers)}")
    if config.refinement_hints:
        lines.append("Try:")
        lines.extend(f"- {hint}" for hint in config.refinement_hints)
    else:
        lines.append("Try fewer or more specific terms, or an exact API or control name.")
    return "\n".join(lines)


class SearchEngine:
    """Ranks documentation across all configured sources.

    Args:
        index: Primary full-text index
        config: Ranking configuration, defaults to the process-wide one
        cfg: Settings holding budgets and caps
        fallback_index: Lower-fidelity index used when every primary call fails.
            The HTTP server runs on the FTS index alone; library callers wire
            an InMemoryIndex here when they want degraded answers instead of
            an unavailable status.
    """

    def __init__(
        self,
        index: DocumentIndex,
        config: RankingConfig | None = None,
        cfg: Settings | None = None,
        fallback_index: DocumentIndex | None = None,
    ):
        self.index = index
        self.fallback_index = fallback_index
        self._config = config
        self.cfg = cfg or default_settings

    @property
    def config(self) -> RankingConfig:
        return self._config or get_ranking_config()

    def expand(
        self, query: str, content: str | None = None
    ) -> tuple[list[str], str, dict[str, int]]:
        """Expand and classify a query without retrieving anything.

        Surrounding whitespace is trimmed first, as in ``search``.
        """
        config = self.config
        stripped = query.strip()
        variants = expand_query(stripped, config, content)
        label = classify_context(stripped, variants, config)
        return variants, label, context_scores(stripped, variants, config)

    async def _retrieve(
        self, variants: list[str], options: SearchOptions
    ) -> tuple[RetrievalOutcome, bool]:
        outcome = await retrieve_candidates(
            self.index, variants, filters=options.filters, cfg=self.cfg
        )
        if not outcome.all_failed or self.fallback_index is None:
            return outcome, False

        logger.warning(
            f"All {len(outcome.failed_variants)} variants failed on {self.index.name}, "
            f"falling back to {self.fallback_index.name}"
        )
        fallback = await retrieve_candidates(
            self.fallback_index, variants, filters=options.filters, cfg=self.cfg
        )
        fallback.failed_variants = outcome.failed_variants + fallback.failed_variants
        return fallback, True

    def _to_item(self, result: ScoredResult, config: RankingConfig) -> SearchResultItem:
        candidate = result.candidate
        source = config.source(candidate.source_id)
        return SearchResultItem(
            id=candidate.id,
            source_id=candidate.source_id,
            library_id=candidate.library_id,
            title=candidate.title,
            description=candidate.description,
            match_tier=result.match_tier,
            score=result.final_score,
            context_label=result.context_label,
            url=build_document_url(source, candidate) if source else None,
        )

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
        *,
        content: str | None = None,
    ) -> SearchResponse:
        """Run the ranking pipeline for one query.

        Never raises for ordinary outcomes: empty queries, unreachable indexes
        and queries with no match are reported through ``status``.

        Variants are expanded from the query with surrounding whitespace
        trimmed; the response echoes ``query`` as given.

        Args:
            query: Free-text query
            options: Result caps and retrieval filters
            content: Optional code or markup snippet to mine for identifiers

        Returns:
            SearchResponse with at most ``max_total`` results
        """
        options = options or SearchOptions()
        stripped = query.strip()
        if not stripped:
            return SearchResponse(query=query, status=SearchStatus.EMPTY_QUERY)

        start = time.perf_counter()
        config = self.config

        variants = expand_query(stripped, config, content)
        context_label = classify_context(stripped, variants, config)

        outcome, degraded = await self._retrieve(variants, options)
        base_response = {
            "query": query,
            "context_label": context_label,
            "variants": variants,
            "failed_variants": outcome.failed_variants,
            "candidate_count": len(outcome.candidates),
            "degraded": degraded,
        }
        if outcome.all_failed:
            logger.error(f"Retrieval unavailable for query '{sanitize_query(stripped)}'")
            return SearchResponse(**base_response, status=SearchStatus.RETRIEVAL_UNAVAILABLE)

        scored = score_candidates(outcome.candidates, context_label, stripped, variants, config)
        filtered = filter_dialects(scored, stripped, config)
        max_per_source = options.max_per_source or per_source_cap(context_label, self.cfg)
        max_total = options.max_total or self.cfg.max_total
        selected = select_results(filtered, max_total, max_per_source)

        latency_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            f"Search '{sanitize_query(stripped)}' context={context_label} "
            f"variants={len(variants)} candidates={len(outcome.candidates)} "
            f"results={len(selected)} latency={latency_ms}ms"
        )

        if not selected:
            return SearchResponse(
                **base_response,
                status=SearchStatus.NO_RESULTS,
                hint=build_refinement_hint(stripped, config, content),
            )

        return SearchResponse(
            **base_response,
            results=[self._to_item(result, config) for result in selected],
            status=SearchStatus.OK,
        )
