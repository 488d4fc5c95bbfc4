"""Schema of the ranking configuration document (metadata.json).

The document uses camelCase keys. Every model accepts both the camelCase
alias and the snake_case field name so tests can build configurations in
Python without going through JSON.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import AnchorStyle


class _ConfigModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TermBoost(_ConfigModel):
    """Additive boost applied when any of ``terms`` occurs in the query."""

    terms: list[str] = Field(..., min_length=1, description="Query terms (case-insensitive)")
    boost: float = Field(..., description="Points added to the score")

    @field_validator("terms")
    @classmethod
    def _lower_terms(cls, value: list[str]) -> list[str]:
        return [t.lower() for t in value if t.strip()]


class SourceDescriptor(_ConfigModel):
    """Static description of one content source."""

    id: str = Field(..., min_length=1, description="Unique source identifier")
    library_id: str | None = Field(
        default=None,
        alias="libraryId",
        description="Public library namespace, defaults to '/' + id",
    )
    type: str = Field(default="markdown", description="Content type of the source")
    description: str | None = Field(default=None, description="Human readable description")
    static_boost: float = Field(
        default=0.0,
        validation_alias=AliasChoices("staticBoost", "boost", "static_boost"),
        description="Additive score adjustment applied to every result of this source",
    )
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    dialect_group: str | None = Field(
        default=None,
        alias="dialectGroup",
        description="Sources sharing a group are filtered against each other",
    )
    dialect: str | None = Field(default=None, description="Member name inside the dialect group")
    url_template: str | None = Field(
        default=None,
        alias="urlTemplate",
        description="Link template with {file}, {id} and {library} placeholders",
    )
    anchor_style: AnchorStyle = Field(default=AnchorStyle.GITHUB, alias="anchorStyle")
    term_boosts: list[TermBoost] = Field(default_factory=list, alias="termBoosts")

    @model_validator(mode="before")
    @classmethod
    def _legacy_url_fields(cls, data):
        # Older documents split the template into baseUrl + pathPattern
        if isinstance(data, dict) and not data.get("urlTemplate") and not data.get("url_template"):
            base_url = data.get("baseUrl")
            path_pattern = data.get("pathPattern")
            if base_url and path_pattern:
                template = base_url.rstrip("/") + "/" + path_pattern.lstrip("/")
                data = {**data, "urlTemplate": template}
        return data

    @model_validator(mode="after")
    def _default_library_id(self) -> "SourceDescriptor":
        if not self.library_id:
            self.library_id = f"/{self.id}"
        if self.dialect:
            self.dialect = self.dialect.lower()
        if self.dialect_group:
            self.dialect_group = self.dialect_group.lower()
        return self


class SynonymEntry(_ConfigModel):
    """One synonym row: ``from`` term and its ordered expansions."""

    term: str = Field(..., alias="from", min_length=1)
    expansions: list[str] = Field(default_factory=list, alias="to")


class MetadataDocument(_ConfigModel):
    """The full ranking configuration document."""

    version: int = 1
    updated_at: str | None = None
    description: str | None = None
    sources: list[SourceDescriptor] = Field(default_factory=list)
    synonyms: list[SynonymEntry] = Field(default_factory=list)
    acronyms: dict[str, list[str]] = Field(default_factory=dict)
    context_boosts: dict[str, dict[str, float]] = Field(
        default_factory=dict,
        alias="contextBoosts",
        description="label -> (source id -> multiplier)",
    )
    context_indicator_terms: dict[str, list[str]] = Field(
        default_factory=dict,
        alias="contextIndicatorTerms",
        description="label -> indicator terms, in priority order",
    )
    context_penalty_overrides: dict[str, dict[str, list[str]]] = Field(
        default_factory=dict,
        alias="contextPenaltyOverrides",
        description="label -> (source id -> keywords that waive a penalty)",
    )
    dialect_keywords: dict[str, dict[str, list[str]]] = Field(
        default_factory=dict,
        alias="dialectKeywords",
        description="group -> (dialect -> keywords naming it in a query)",
    )
    dialect_defaults: dict[str, str] = Field(default_factory=dict, alias="dialectDefaults")
    library_mappings: dict[str, str] = Field(
        default_factory=dict,
        alias="libraryMappings",
        description="library id alias -> source id",
    )
    refinement_hints: list[str] = Field(default_factory=list, alias="refinementHints")

    @field_validator("context_boosts")
    @classmethod
    def _non_negative_multipliers(
        cls, value: dict[str, dict[str, float]]
    ) -> dict[str, dict[str, float]]:
        for label, boosts in value.items():
            for source_id, multiplier in boosts.items():
                if multiplier < 0:
                    raise ValueError(
                        f"Negative context multiplier {multiplier} for {label}/{source_id}"
                    )
        return value

    @field_validator("sources")
    @classmethod
    def _unique_source_ids(cls, value: list[SourceDescriptor]) -> list[SourceDescriptor]:
        seen: set[str] = set()
        for source in value:
            if source.id in seen:
                raise ValueError(f"Duplicate source id: {source.id}")
            seen.add(source.id)
        return value
