"""Search request/response models for the docsearch service."""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import MatchTier, SearchStatus


class SearchFilters(BaseModel):
    """Restrict retrieval to a subset of the index."""

    libraries: list[str] = Field(default_factory=list, description="Library ids, e.g. '/cap'")
    sources: list[str] = Field(default_factory=list, description="Source ids")
    types: list[str] = Field(default_factory=list, description="Document types")


class SearchOptions(BaseModel):
    """Per-call overrides for result caps and filters."""

    max_total: int | None = Field(default=None, ge=1, le=100, description="Global result cap")
    max_per_source: int | None = Field(
        default=None, ge=1, le=100, description="Per-source result cap"
    )
    filters: SearchFilters | None = Field(default=None, description="Retrieval filters")


class SearchRequest(BaseModel):
    """Body of POST /v1/search."""

    query: str = Field(..., max_length=1000, description="Free-text query")
    content: str | None = Field(
        default=None,
        max_length=50_000,
        description="Optional code or markup the query is about, mined for identifiers",
    )
    options: SearchOptions = Field(default_factory=SearchOptions)


class ExpandRequest(BaseModel):
    """Body of POST /v1/expand."""

    query: str = Field(..., min_length=1, max_length=1000)
    content: str | None = Field(default=None, max_length=50_000)


class SearchResultItem(BaseModel):
    """One ranked document."""

    id: str = Field(..., description="Document id")
    source_id: str = Field(..., description="Source the document belongs to")
    library_id: str = Field(..., description="Public library namespace")
    title: str
    description: str = ""
    match_tier: MatchTier
    score: float = Field(..., ge=0, description="Final score")
    context_label: str
    url: str | None = Field(default=None, description="Documentation link, if configured")


class SearchResponse(BaseModel):
    """Ranked results plus diagnostics about how they were produced."""

    query: str
    results: list[SearchResultItem] = Field(default_factory=list)
    status: SearchStatus = SearchStatus.OK
    context_label: str | None = None
    hint: str | None = Field(default=None, description="Refinement suggestion on empty results")
    variants: list[str] = Field(
        default_factory=list, description="Variants tried, expanded from the trimmed query"
    )
    failed_variants: list[str] = Field(default_factory=list)
    candidate_count: int = Field(default=0, ge=0)
    degraded: bool = Field(default=False, description="True when the fallback index was used")


class ExpandResponse(BaseModel):
    """Query variants and context classification, for tuning."""

    query: str
    variants: list[str]
    context_label: str
    context_scores: dict[str, int] = Field(default_factory=dict)


class SourceInfo(BaseModel):
    """Public view of a source descriptor."""

    id: str
    library_id: str
    type: str
    description: str | None = None
    static_boost: float = 0.0
    tags: list[str] = Field(default_factory=list)
    dialect_group: str | None = None
    dialect: str | None = None


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str
    version: str
    timestamp: datetime


class ReadyResponse(BaseModel):
    """Readiness response with per-dependency checks."""

    status: str
    version: str
    checks: dict[str, bool] = Field(default_factory=dict)
    sources: int = 0
