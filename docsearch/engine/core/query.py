"""Query expansion utilities.

Turns one user query into an ordered list of query variants: the verbatim
query, its lower-cased form, synonym/acronym expansions and, when the caller
passes a code or markup snippet, identifiers mined from that snippet.
"""

import logging
import re
from collections.abc import Iterable, Mapping

from .metadata import RankingConfig

logger = logging.getLogger(__name__)

# Supplementary (non major-word) table matches kept per query
MAX_SUPPLEMENTARY_EXPANSIONS = 5

# Query tokens shorter than this never promote a table key to "important"
MAJOR_WORD_MIN_LENGTH = 4

# Mechanical split parts shorter than this are dropped
MIN_PART_LENGTH = 3

# a.b.Name style identifiers (lower-case namespace, capitalized leaf)
NAMESPACED_IDENTIFIER_RE = re.compile(r"^[a-z][a-z0-9]*(?:\.[a-z][a-z0-9]*)+\.[A-Z][A-Za-z0-9_]*$")

_XML_TAG_RE = re.compile(r"<([A-Za-z][A-Za-z0-9_.:-]*)[\s>/]")
_DOTTED_IDENTIFIER_RE = re.compile(r"\b([a-z][a-z0-9]*(?:\.[a-z][a-z0-9]*)+)\.([A-Z][A-Za-z0-9_]*)")
_EXTEND_RE = re.compile(r"\.extend\s*\(\s*[\"']([^\"']+)[\"']")
_DECLARATION_RE = re.compile(
    r"\b(?:class|interface|entity|type|aspect|service)\s+([A-Za-z_][A-Za-z0-9_]*)"
)
_METADATA_LIBRARY_RE = re.compile(r"metadata\s*:\s*\{[\s\S]*?library\s*:\s*[\"']([^\"']+)[\"']")


def expand_query(query: str, config: RankingConfig, content: str | None = None) -> list[str]:
    """Expand a query into ordered, de-duplicated variants.

    The first two variants are always the verbatim query and its lower-cased
    form, even when the two are equal.

    Args:
        query: Original query string
        config: Ranking configuration holding the synonym table
        content: Optional snippet whose identifiers are appended as variants

    Returns:
        Ordered list of query variants
    """
    lowered = query.lower()
    normalized = lowered.strip()

    exact = _exact_table_match(normalized, config.synonyms)
    if exact is not None:
        expansions = list(exact)
    else:
        important, supplementary = _partial_table_matches(normalized, config.synonyms)
        if important or supplementary:
            expansions = important + supplementary[:MAX_SUPPLEMENTARY_EXPANSIONS]
        else:
            expansions = mechanical_variants(query)

    if content:
        expansions.extend(extract_identifiers(content))

    variants = [query, lowered, *_unique(expansions, exclude={query, lowered})]
    logger.debug(f"Expanded query into {len(variants)} variants: {variants}")
    return variants


def _exact_table_match(
    normalized: str, table: Mapping[str, tuple[str, ...]]
) -> tuple[str, ...] | None:
    if normalized in table:
        return table[normalized]
    for expansions in table.values():
        if any(e.lower() == normalized for e in expansions):
            return expansions
    return None


def _partial_table_matches(
    normalized: str, table: Mapping[str, tuple[str, ...]]
) -> tuple[list[str], list[str]]:
    """Split substring matches into major-word matches and supplementary ones."""
    query_terms = normalized.split()
    important: list[str] = []
    supplementary: list[str] = []

    for key, expansions in table.items():
        if key not in normalized:
            continue
        is_major = key in query_terms or any(
            len(term) >= MAJOR_WORD_MIN_LENGTH and term in key for term in query_terms
        )
        if is_major:
            important.extend(expansions)
        else:
            supplementary.extend(expansions)

    return _unique(important), _unique(supplementary)


def mechanical_variants(query: str) -> list[str]:
    """Case, punctuation and whitespace variations of a query with no table match."""
    stripped = query.strip()
    variants: list[str] = []

    if NAMESPACED_IDENTIFIER_RE.match(stripped):
        leaf = stripped.rsplit(".", 1)[-1]
        variants.extend([leaf, leaf.lower(), f"{leaf} control"])

    variants.append(stripped[:1].upper() + stripped[1:].lower())
    variants.append(re.sub(r"[_-]", " ", stripped))
    variants.append(re.sub(r"\s+", "-", stripped))
    variants.append(re.sub(r"\s+", "", stripped))
    variants.extend(p for p in re.split(r"[_\s-]+", stripped) if len(p) >= MIN_PART_LENGTH)
    return _unique(variants)


def extract_identifiers(content: str) -> list[str]:
    """Extract tag names, namespaced identifiers and declared type names.

    Handles XML views (``<m:Wizard>`` -> ``Wizard``), dotted identifiers
    (``sap.m.Button`` -> ``sap.m.Button`` and ``Button``), ``.extend("x.y.Z")``
    calls, control metadata ``library`` entries and ``class``/``entity``/``type``
    style declarations.

    Args:
        content: Code or markup snippet

    Returns:
        Identifiers in first-seen order
    """
    found: list[str] = []

    for match in _XML_TAG_RE.finditer(content):
        found.append(match.group(1).rsplit(":", 1)[-1])

    for match in _DOTTED_IDENTIFIER_RE.finditer(content):
        found.append(f"{match.group(1)}.{match.group(2)}")
        found.append(match.group(2))

    for match in _EXTEND_RE.finditer(content):
        name = match.group(1)
        found.append(name)
        found.append(name.rsplit(".", 1)[-1])

    library = _METADATA_LIBRARY_RE.search(content)
    if library:
        found.append(library.group(1))

    for match in _DECLARATION_RE.finditer(content):
        found.append(match.group(1))

    return _unique(found)


def _unique(items: Iterable[str], exclude: set[str] | None = None) -> list[str]:
    seen = set(exclude or ())
    result: list[str] = []
    for item in items:
        if not item or not item.strip() or item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result
