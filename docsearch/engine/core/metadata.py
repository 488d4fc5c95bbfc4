"""Ranking configuration store.

Loads the metadata document once per process and exposes it as an
immutable ``RankingConfig``. Loading never raises: a missing or invalid
document degrades to an empty configuration with a warning, and every
accessor has an explicit default.
"""

import json
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from pydantic import ValidationError

from ...config import settings
from ...models.metadata import MetadataDocument, SourceDescriptor

logger = logging.getLogger(__name__)

_EMPTY: Mapping = MappingProxyType({})


def _freeze(mapping: dict) -> Mapping:
    return MappingProxyType(mapping)


def _empty() -> Mapping:
    return _EMPTY


@dataclass(frozen=True)
class RankingConfig:
    """Immutable view of the ranking configuration.

    Attributes:
        version: Document version
        sources: Source descriptors in declaration order
        sources_by_id: Source id -> descriptor
        synonyms: Lower-case term -> expansions (acronyms merged, synonyms win)
        context_boosts: Lower-case label -> (source id -> multiplier)
        context_indicator_terms: Label -> lower-case indicator terms, declaration order
        penalty_overrides: Label -> (source id -> lower-case keywords)
        dialect_keywords: Group -> (dialect -> lower-case keywords)
        dialect_defaults: Group -> default dialect
        library_mappings: Library id alias -> source id
        refinement_hints: Suggestions shown when nothing matched
    """

    version: int = 1
    sources: tuple[SourceDescriptor, ...] = ()
    sources_by_id: Mapping[str, SourceDescriptor] = field(default_factory=_empty)
    synonyms: Mapping[str, tuple[str, ...]] = field(default_factory=_empty)
    context_boosts: Mapping[str, Mapping[str, float]] = field(default_factory=_empty)
    context_indicator_terms: Mapping[str, tuple[str, ...]] = field(default_factory=_empty)
    penalty_overrides: Mapping[str, Mapping[str, tuple[str, ...]]] = field(default_factory=_empty)
    dialect_keywords: Mapping[str, Mapping[str, tuple[str, ...]]] = field(default_factory=_empty)
    dialect_defaults: Mapping[str, str] = field(default_factory=_empty)
    library_mappings: Mapping[str, str] = field(default_factory=_empty)
    refinement_hints: tuple[str, ...] = ()

    def source(self, source_id: str) -> SourceDescriptor | None:
        return self.sources_by_id.get(source_id)

    def static_boost(self, source_id: str) -> float:
        source = self.sources_by_id.get(source_id)
        return source.static_boost if source else 0.0

    def context_multiplier(self, label: str, source_id: str) -> float:
        """Multiplier for a source under a context label (1.0 when unset)."""
        return self.context_boosts.get(label.lower(), _EMPTY).get(source_id, 1.0)

    def penalty_overrides_for(self, label: str, source_id: str) -> tuple[str, ...]:
        return self.penalty_overrides.get(label.lower(), _EMPTY).get(source_id, ())

    def resolve_source_id(self, library_id: str) -> str | None:
        """Map a library id (or alias) to the id of the source that owns it."""
        mapped = self.library_mappings.get(library_id)
        if mapped:
            return mapped
        for source in self.sources:
            if source.library_id == library_id:
                return source.id
        return None

    @property
    def has_dialect_groups(self) -> bool:
        return any(source.dialect_group for source in self.sources)


def build_ranking_config(document: MetadataDocument) -> RankingConfig:
    """Convert a validated metadata document into an immutable config."""
    synonyms: dict[str, tuple[str, ...]] = {}
    for term, expansions in document.acronyms.items():
        cleaned = tuple(e for e in expansions if e and e.strip())
        if cleaned:
            synonyms[term.lower()] = cleaned
    for entry in document.synonyms:
        cleaned = tuple(e for e in entry.expansions if e and e.strip())
        if cleaned:
            synonyms[entry.term.lower()] = cleaned

    sources_by_id = {source.id: source for source in document.sources}

    context_boosts = {
        label.lower(): _freeze(dict(boosts)) for label, boosts in document.context_boosts.items()
    }
    indicator_terms = {
        label.lower(): tuple(t.lower() for t in terms if t.strip())
        for label, terms in document.context_indicator_terms.items()
    }
    penalty_overrides = {
        label.lower(): _freeze(
            {
                sid: tuple(k.lower() for k in keywords if k.strip())
                for sid, keywords in per_source.items()
            }
        )
        for label, per_source in document.context_penalty_overrides.items()
    }
    dialect_keywords = {
        group.lower(): _freeze(
            {
                dialect.lower(): tuple(k.lower() for k in keywords if k.strip())
                for dialect, keywords in per_dialect.items()
            }
        )
        for group, per_dialect in document.dialect_keywords.items()
    }
    dialect_defaults = {
        group.lower(): dialect.lower() for group, dialect in document.dialect_defaults.items()
    }

    _warn_on_dangling_references(document, sources_by_id, indicator_terms)

    return RankingConfig(
        version=document.version,
        sources=tuple(document.sources),
        sources_by_id=_freeze(sources_by_id),
        synonyms=_freeze(synonyms),
        context_boosts=_freeze(context_boosts),
        context_indicator_terms=_freeze(indicator_terms),
        penalty_overrides=_freeze(penalty_overrides),
        dialect_keywords=_freeze(dialect_keywords),
        dialect_defaults=_freeze(dialect_defaults),
        library_mappings=_freeze(dict(document.library_mappings)),
        refinement_hints=tuple(document.refinement_hints),
    )


def _warn_on_dangling_references(
    document: MetadataDocument,
    sources_by_id: dict[str, SourceDescriptor],
    indicator_terms: dict[str, tuple[str, ...]],
) -> None:
    for label, boosts in document.context_boosts.items():
        if label.lower() not in indicator_terms:
            logger.warning(f"Context boost label '{label}' has no indicator terms")
        for source_id in boosts:
            if source_id not in sources_by_id:
                logger.warning(f"Context boost '{label}' references unknown source '{source_id}'")
    for source in document.sources:
        if source.dialect_group and not source.dialect:
            logger.warning(f"Source '{source.id}' has a dialect group but no dialect name")


def load_ranking_config(path: str | Path) -> RankingConfig:
    """Load and validate the metadata document at ``path``.

    Args:
        path: Location of the JSON document

    Returns:
        The parsed configuration, or an empty configuration when the file is
        missing, unreadable or invalid.
    """
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
        document = MetadataDocument.model_validate(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Could not load ranking config from {config_path}, using defaults: {e}")
        return RankingConfig()

    config = build_ranking_config(document)
    logger.info(
        f"Ranking config loaded: {len(config.sources)} sources, "
        f"{len(config.synonyms)} synonyms, {len(config.context_boosts)} context boosts"
    )
    return config


# Process-wide instance, latched on first use
_config: RankingConfig | None = None
_lock = threading.Lock()


def get_ranking_config() -> RankingConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config

    config = _config
    if config is not None:
        return config
    with _lock:
        if _config is None:
            _config = load_ranking_config(settings.metadata_path)
        return _config


def reload_ranking_config(path: str | Path | None = None) -> RankingConfig:
    """Reload the configuration and swap it in for subsequent searches."""
    global _config

    config = load_ranking_config(path or settings.metadata_path)
    with _lock:
        _config = config
    return config


def reset_ranking_config() -> None:
    """Drop the cached configuration (used by tests)."""
    global _config
    with _lock:
        _config = None
