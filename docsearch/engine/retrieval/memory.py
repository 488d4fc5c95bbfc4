"""In-memory linear-scan index.

A lower-fidelity stand-in for the FTS index: it counts query-term
occurrences per field instead of ranking with BM25. Used as the fallback
when every FTS call fails, and by tests.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import replace

from ...models.enums import ScoreOrientation
from ...models.search import SearchFilters
from ..core.document import CandidateDocument
from ..scoring.constants import FTS_STOP_WORDS

logger = logging.getLogger(__name__)

# Per-occurrence weights, mirroring the FTS column weights
TITLE_WEIGHT = 8.0
CONTROL_NAME_WEIGHT = 6.0
KEYWORD_WEIGHT = 4.0
DESCRIPTION_WEIGHT = 2.0

_WORD_RE = re.compile(r"\w+")


def _query_terms(query: str) -> list[str]:
    return [t for t in _WORD_RE.findall(query.lower()) if len(t) > 1 and t not in FTS_STOP_WORDS]


def _matches_filters(doc: CandidateDocument, filters: SearchFilters | None) -> bool:
    if filters is None:
        return True
    if filters.libraries and doc.library_id not in filters.libraries:
        return False
    if filters.sources and doc.source_id not in filters.sources:
        return False
    if filters.types and doc.doc_type not in filters.types:
        return False
    return True


class InMemoryIndex:
    """Linear scan over a list of documents, higher score is better."""

    name = "memory"
    score_orientation = ScoreOrientation.HIGHER_IS_BETTER

    def __init__(self, documents: Iterable[CandidateDocument] = ()):
        self._documents = list(documents)

    def _score(self, doc: CandidateDocument, terms: list[str]) -> float:
        title = doc.title.lower()
        description = doc.description.lower()
        keywords = " ".join(doc.keywords).lower()
        control_name = (doc.control_name or "").lower()
        score = 0.0
        for term in terms:
            score += TITLE_WEIGHT * title.count(term)
            score += CONTROL_NAME_WEIGHT * control_name.count(term)
            score += KEYWORD_WEIGHT * keywords.count(term)
            score += DESCRIPTION_WEIGHT * description.count(term)
        return score

    def search_sync(
        self, query: str, filters: SearchFilters | None, limit: int
    ) -> list[CandidateDocument]:
        terms = _query_terms(query)
        if not terms:
            return []

        hits: list[CandidateDocument] = []
        for doc in self._documents:
            if not _matches_filters(doc, filters):
                continue
            score = self._score(doc, terms)
            if score > 0:
                hits.append(replace(doc, raw_score=score, relevance=score))

        hits.sort(key=lambda d: (-d.raw_score, d.id))
        return hits[:limit]

    async def search(
        self, query: str, filters: SearchFilters | None, limit: int
    ) -> list[CandidateDocument]:
        return self.search_sync(query, filters, limit)

    async def is_available(self) -> bool:
        return True
