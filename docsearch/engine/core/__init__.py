"""Engine core module.

This module contains the configuration store, query expansion and the
document data structures shared by the ranking pipeline:
- Ranking configuration (load once, immutable)
- Query expansion and identifier extraction
- Candidate / scored result structures
- Documentation URL construction
"""

from .document import CandidateDocument, ScoredResult
from .metadata import (
    RankingConfig,
    build_ranking_config,
    get_ranking_config,
    load_ranking_config,
    reload_ranking_config,
    reset_ranking_config,
)
from .query import (
    MAX_SUPPLEMENTARY_EXPANSIONS,
    expand_query,
    extract_identifiers,
    mechanical_variants,
)
from .urls import build_document_url, heading_anchor

__all__ = [
    # Document structures
    "CandidateDocument",
    "ScoredResult",
    # Configuration store
    "RankingConfig",
    "build_ranking_config",
    "get_ranking_config",
    "load_ranking_config",
    "reload_ranking_config",
    "reset_ranking_config",
    # Query utilities
    "expand_query",
    "extract_identifiers",
    "mechanical_variants",
    "MAX_SUPPLEMENTARY_EXPANSIONS",
    # URLs
    "build_document_url",
    "heading_anchor",
]
