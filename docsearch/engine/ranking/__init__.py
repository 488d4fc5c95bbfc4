"""Result filtering and selection.

- Dialect (flavor) filtering for grouped sources
- Deduplication with per-source and global caps
"""

from .diversity import per_source_cap, select_results, sort_key
from .flavor import allowed_dialects, filter_dialects, requested_dialects

__all__ = [
    "allowed_dialects",
    "filter_dialects",
    "requested_dialects",
    "per_source_cap",
    "select_results",
    "sort_key",
]
