"""Pydantic models for docsearch configuration and request/response schemas.

Import from submodules directly for cleaner imports:

    from docsearch.models.enums import MatchTier
    from docsearch.models.metadata import MetadataDocument
"""

# ============ ENUMS ============
from .enums import AnchorStyle, MatchTier, ScoreOrientation, SearchStatus

# ============ CONFIGURATION DOCUMENT ============
from .metadata import MetadataDocument, SourceDescriptor, SynonymEntry, TermBoost

# ============ SEARCH MODELS ============
from .search import (
    ExpandRequest,
    ExpandResponse,
    HealthResponse,
    ReadyResponse,
    SearchFilters,
    SearchOptions,
    SearchRequest,
    SearchResponse,
    SearchResultItem,
    SourceInfo,
)

__all__ = [
    # Enums
    "AnchorStyle",
    "MatchTier",
    "ScoreOrientation",
    "SearchStatus",
    # Configuration document
    "MetadataDocument",
    "SourceDescriptor",
    "SynonymEntry",
    "TermBoost",
    # Search models
    "ExpandRequest",
    "ExpandResponse",
    "HealthResponse",
    "ReadyResponse",
    "SearchFilters",
    "SearchOptions",
    "SearchRequest",
    "SearchResponse",
    "SearchResultItem",
    "SourceInfo",
]
