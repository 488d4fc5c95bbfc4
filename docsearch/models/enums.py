"""Enumeration types for the docsearch service."""

from enum import StrEnum


class MatchTier(StrEnum):
    """How a candidate matched the query, strongest first."""

    EXACT_TITLE = "exact_title"
    HIGH_WORD_OVERLAP = "high_word_overlap"
    TITLE_CONTAINS_QUERY = "title_contains_query"
    QUERY_CONTAINS_TITLE = "query_contains_title"
    EXACT_KEYWORD = "exact_keyword"
    CONTENT_CONTAINS_QUERY = "content_contains_query"
    FUZZY_PARTIAL = "fuzzy_partial"


class SearchStatus(StrEnum):
    """Outcome of a search call."""

    OK = "ok"
    NO_RESULTS = "no_results"
    EMPTY_QUERY = "empty_query"
    RETRIEVAL_UNAVAILABLE = "retrieval_unavailable"


class AnchorStyle(StrEnum):
    """Heading anchor format used by a documentation site."""

    DOCSIFY = "docsify"  # ?id=slug
    GITHUB = "github"  # #slug
    CUSTOM = "custom"  # #Raw Heading


class ScoreOrientation(StrEnum):
    """Direction of an index's native relevance score."""

    HIGHER_IS_BETTER = "higher_is_better"
    LOWER_IS_BETTER = "lower_is_better"  # e.g. SQLite FTS5 bm25()
