"""Candidate retrieval from full-text indexes.

- ``DocumentIndex`` protocol and retrieval errors
- SQLite FTS5 adapter and in-memory linear-scan fallback
- Multi-variant candidate pool construction
"""

from .base import (
    DocumentIndex,
    IndexUnavailableError,
    MalformedQueryError,
    RetrievalError,
    orient_relevance,
)
from .candidates import (
    RetrievalOutcome,
    VariantTimeoutError,
    merge_variant,
    retrieve_candidates,
    variant_limit,
)
from .fts import FTS_SCHEMA, FtsIndex, to_match_query
from .memory import InMemoryIndex

__all__ = [
    # Contract
    "DocumentIndex",
    "RetrievalError",
    "IndexUnavailableError",
    "MalformedQueryError",
    "orient_relevance",
    # Indexes
    "FTS_SCHEMA",
    "FtsIndex",
    "InMemoryIndex",
    "to_match_query",
    # Candidate pool
    "RetrievalOutcome",
    "VariantTimeoutError",
    "merge_variant",
    "retrieve_candidates",
    "variant_limit",
]
