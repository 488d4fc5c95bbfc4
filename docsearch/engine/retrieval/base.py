"""Full-text index contract and retrieval errors."""

from typing import Protocol, runtime_checkable

from ...models.enums import ScoreOrientation
from ...models.search import SearchFilters
from ..core.document import CandidateDocument


class RetrievalError(Exception):
    """Base class for full-text index failures."""


class IndexUnavailableError(RetrievalError):
    """The index cannot be reached (missing database, closed connection)."""


class MalformedQueryError(RetrievalError):
    """The index rejected the query expression."""


@runtime_checkable
class DocumentIndex(Protocol):
    """A queryable full-text index.

    Implementations return candidates in their own relevance order and set
    ``CandidateDocument.relevance`` so that higher is always better, whatever
    ``score_orientation`` their raw scores use.
    """

    name: str
    score_orientation: ScoreOrientation

    async def search(
        self, query: str, filters: SearchFilters | None, limit: int
    ) -> list[CandidateDocument]: ...

    async def is_available(self) -> bool: ...


def orient_relevance(raw_score: float, orientation: ScoreOrientation) -> float:
    """Convert an engine-native score into a higher-is-better relevance >= 0."""
    if orientation == ScoreOrientation.LOWER_IS_BETTER:
        return max(0.0, -raw_score)
    return max(0.0, raw_score)
