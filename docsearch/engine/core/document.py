"""Document data structures for the ranking pipeline.

These are per-search values: created by the retriever, scored, filtered and
discarded once the ranked list has been returned.
"""

from dataclasses import dataclass, field

from ...models.enums import MatchTier


@dataclass
class CandidateDocument:
    """A document returned by the full-text index for some query variant.

    Attributes:
        id: Globally unique document id within the index
        source_id: Id of the source descriptor the document belongs to
        library_id: Public library namespace
        title: Document or section title
        description: Short description / summary text
        raw_score: Engine-native relevance (orientation defined by the index)
        relevance: ``raw_score`` re-oriented so that higher is better
        heading_level: Section depth (None or 1 for a top-level document)
        keywords: Structured keywords attached to the document
        control_name: API / control name the document describes, if any
        doc_type: Content type (markdown, jsdoc, sample, ...)
        rel_file: Path of the document relative to its source root
        variant_index: Index of the query variant that first found it
    """

    id: str
    source_id: str
    library_id: str
    title: str
    description: str = ""
    raw_score: float = 0.0
    relevance: float = 0.0
    heading_level: int | None = None
    keywords: list[str] = field(default_factory=list)
    control_name: str | None = None
    doc_type: str | None = None
    rel_file: str | None = None
    variant_index: int = 0


@dataclass
class ScoredResult:
    """A candidate with its match tier and final score."""

    candidate: CandidateDocument
    match_tier: MatchTier
    final_score: float
    context_label: str
    matched_variant: str

    @property
    def id(self) -> str:
        return self.candidate.id

    @property
    def source_id(self) -> str:
        return self.candidate.source_id

    @property
    def title(self) -> str:
        return self.candidate.title
