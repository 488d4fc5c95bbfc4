"""Candidate retrieval across query variants.

Each variant is sent to the full-text index with a budget that depends on
its position: the first variants are the most authoritative and get a
larger limit, later ones a smaller limit plus an admission cap once the
pool is already large.

Calls may complete in any order. The merge is a reduction in variant order
performed after the calls settle, so the pool never depends on timing.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ...config import Settings
from ...config import settings as default_settings
from ...models.search import SearchFilters
from ..core.document import CandidateDocument
from .base import DocumentIndex, RetrievalError

logger = logging.getLogger(__name__)


class VariantTimeoutError(RetrievalError):
    """A variant call exceeded its timeout or the search deadline."""


@dataclass
class RetrievalOutcome:
    """Merged candidate pool plus per-variant failure bookkeeping."""

    candidates: list[CandidateDocument] = field(default_factory=list)
    failed_variants: list[str] = field(default_factory=list)
    variants_merged: int = 0
    all_failed: bool = False


def variant_limit(position: int, cfg: Settings) -> int:
    """Retrieval limit for the variant at ``position``."""
    if position < cfg.primary_variant_count:
        return cfg.primary_variant_limit
    return cfg.supplementary_variant_limit


def merge_variant(
    pool: list[CandidateDocument],
    seen: set[str],
    documents: Sequence[CandidateDocument],
    position: int,
    cfg: Settings,
) -> int:
    """Merge one variant's documents into the pool, first occurrence wins.

    Supplementary variants admit at most ``cfg.admission_cap`` new ids once
    the pool holds ``cfg.large_pool_size`` candidates or more.

    Returns:
        Number of newly admitted candidates
    """
    cap: int | None = None
    if position >= cfg.primary_variant_count and len(pool) >= cfg.large_pool_size:
        cap = cfg.admission_cap

    admitted = 0
    for doc in documents:
        if doc.id in seen:
            continue
        if cap is not None and admitted >= cap:
            break
        doc.variant_index = position
        seen.add(doc.id)
        pool.append(doc)
        admitted += 1
    return admitted


async def _call_variant(
    index: DocumentIndex,
    variant: str,
    filters: SearchFilters | None,
    limit: int,
    timeout: float,
) -> list[CandidateDocument] | Exception:
    """Query one variant, returning the exception instead of raising it."""
    try:
        return await asyncio.wait_for(index.search(variant, filters, limit), timeout=timeout)
    except asyncio.TimeoutError:
        return VariantTimeoutError(f"timed out after {timeout}s")
    except Exception as e:
        return e


def _unique_positions(variants: Sequence[str]) -> dict[str, int]:
    """First position of each distinct variant string."""
    positions: dict[str, int] = {}
    for position, variant in enumerate(variants):
        positions.setdefault(variant, position)
    return positions


async def _dispatch_concurrent(
    index: DocumentIndex,
    positions: dict[str, int],
    filters: SearchFilters | None,
    cfg: Settings,
) -> dict[str, list[CandidateDocument] | Exception]:
    tasks = {
        variant: asyncio.create_task(
            _call_variant(
                index, variant, filters, variant_limit(position, cfg), cfg.variant_timeout_seconds
            )
        )
        for variant, position in positions.items()
    }
    _, pending = await asyncio.wait(tasks.values(), timeout=cfg.search_deadline_seconds)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)

    results: dict[str, list[CandidateDocument] | Exception] = {}
    for variant, task in tasks.items():
        if task in pending:
            results[variant] = VariantTimeoutError("search deadline exceeded")
        else:
            results[variant] = task.result()
    return results


async def _retrieve_sequential(
    index: DocumentIndex,
    variants: Sequence[str],
    filters: SearchFilters | None,
    cfg: Settings,
    outcome: RetrievalOutcome,
    seen: set[str],
) -> int:
    """Query and merge variants one at a time. Returns the number of calls that succeeded."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + cfg.search_deadline_seconds
    queried: set[str] = set()
    succeeded = 0

    for position, variant in enumerate(variants):
        if len(outcome.candidates) >= cfg.candidate_target:
            break
        if variant in queried:
            continue
        queried.add(variant)

        remaining = deadline - loop.time()
        if remaining <= 0:
            result: list[CandidateDocument] | Exception = VariantTimeoutError(
                "search deadline exceeded"
            )
        else:
            result = await _call_variant(
                index,
                variant,
                filters,
                variant_limit(position, cfg),
                min(cfg.variant_timeout_seconds, remaining),
            )

        if isinstance(result, Exception):
            _record_failure(outcome, variant, result)
            continue
        succeeded += 1
        merge_variant(outcome.candidates, seen, result, position, cfg)
        outcome.variants_merged += 1
    return succeeded


def _record_failure(outcome: RetrievalOutcome, variant: str, error: Exception) -> None:
    logger.warning(f"Retrieval failed for variant '{variant}': {type(error).__name__}: {error}")
    outcome.failed_variants.append(variant)


async def retrieve_candidates(
    index: DocumentIndex,
    variants: Sequence[str],
    *,
    filters: SearchFilters | None = None,
    cfg: Settings | None = None,
) -> RetrievalOutcome:
    """Build the candidate pool for a list of query variants.

    Never raises for index failures: failed variants are logged and skipped,
    and ``all_failed`` is set when no variant succeeded.

    Args:
        index: Full-text index to query
        variants: Query variants, most authoritative first
        filters: Optional retrieval filters
        cfg: Settings holding budgets and timeouts

    Returns:
        RetrievalOutcome with the merged pool in variant order
    """
    cfg = cfg or default_settings
    outcome = RetrievalOutcome()
    seen: set[str] = set()
    if not variants:
        return outcome

    if not cfg.concurrent_retrieval:
        succeeded = await _retrieve_sequential(index, variants, filters, cfg, outcome, seen)
        outcome.all_failed = succeeded == 0 and bool(outcome.failed_variants)
        return outcome

    positions = _unique_positions(variants)
    results = await _dispatch_concurrent(index, positions, filters, cfg)

    succeeded = 0
    for variant, position in positions.items():
        result = results[variant]
        if isinstance(result, Exception):
            _record_failure(outcome, variant, result)
            continue
        succeeded += 1
        if len(outcome.candidates) >= cfg.candidate_target:
            continue
        merge_variant(outcome.candidates, seen, result, position, cfg)
        outcome.variants_merged += 1

    outcome.all_failed = succeeded == 0
    logger.debug(
        f"Retrieved {len(outcome.candidates)} candidates from "
        f"{outcome.variants_merged}/{len(positions)} variants"
    )
    return outcome
