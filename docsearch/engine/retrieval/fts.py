"""SQLite FTS5 index adapter.

Queries a prebuilt ``docs`` FTS5 table. Building the table is the job of
the indexing pipeline; ``FTS_SCHEMA`` documents the layout it must produce.
"""

import asyncio
import logging
import re
import sqlite3
from pathlib import Path

from ... import db
from ...models.enums import ScoreOrientation
from ...models.search import SearchFilters
from ..core.document import CandidateDocument
from ..core.metadata import RankingConfig, get_ranking_config
from ..scoring.constants import FTS_STOP_WORDS
from .base import IndexUnavailableError, MalformedQueryError, orient_relevance

logger = logging.getLogger(__name__)

FTS_SCHEMA = """
CREATE VIRTUAL TABLE IF NOT EXISTS docs USING fts5(
    libraryId,
    type,
    title,
    description,
    keywords,
    controlName,
    namespace,
    id UNINDEXED,
    sourceId UNINDEXED,
    relFile UNINDEXED,
    headingLevel UNINDEXED,
    snippetCount UNINDEXED
)
"""

# bm25() weights in column order; UNINDEXED columns take the default weight
BM25_WEIGHTS = (1.0, 1.0, 8.0, 2.0, 4.0, 6.0, 3.0)

_TERM_RE = re.compile(r'"[^"]+"|\S+')
_NON_WORD_RE = re.compile(r"[^\w]")


def to_match_query(user_query: str) -> str:
    """Convert free text into an FTS5 MATCH expression.

    Quoted phrases are kept as-is, dotted identifiers (``sap.m.Button``)
    become phrases, and bare terms are cleaned, lower-cased and given a
    prefix operator. Stop words are dropped.

    Args:
        user_query: Query variant as typed

    Returns:
        MATCH expression, empty when nothing searchable remains
    """
    terms: list[str] = []
    for term in _TERM_RE.findall(user_query):
        if len(term) > 1 and term.startswith('"') and term.endswith('"'):
            terms.append(term)
            continue
        if "." in term:
            cleaned = term.replace('"', "").strip(".")
            if cleaned:
                terms.append(f'"{cleaned}"')
            continue
        clean = _NON_WORD_RE.sub("", term).lower()
        if not clean or clean in FTS_STOP_WORDS:
            continue
        terms.append(f"{clean}*")
    return " ".join(terms)


def _parse_heading_level(value) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class FtsIndex:
    """Read-only SQLite FTS5 index.

    bm25() is negative and lower-is-better; candidates carry the raw value in
    ``raw_score`` and its negation in ``relevance``.
    """

    name = "sqlite-fts5"
    score_orientation = ScoreOrientation.LOWER_IS_BETTER

    def __init__(self, path: str | Path | None = None, config: RankingConfig | None = None):
        self.path = Path(path) if path else None
        self._config = config

    @property
    def config(self) -> RankingConfig:
        return self._config or get_ranking_config()

    def _build_sql(
        self, match: str, filters: SearchFilters | None, limit: int
    ) -> tuple[str, list]:
        weights = ", ".join(str(w) for w in BM25_WEIGHTS)
        conditions = ["docs MATCH ?"]
        params: list = [match]

        if filters:
            for column, values in (
                ("libraryId", filters.libraries),
                ("sourceId", filters.sources),
                ("type", filters.types),
            ):
                if values:
                    placeholders = ",".join("?" for _ in values)
                    conditions.append(f"{column} IN ({placeholders})")
                    params.extend(values)

        sql = f"""
            SELECT id, libraryId, sourceId, type, title, description, keywords,
                   controlName, relFile, headingLevel, bm25(docs, {weights}) AS score
            FROM docs
            WHERE {" AND ".join(conditions)}
            ORDER BY score
            LIMIT ?
        """
        params.append(limit)
        return sql, params

    def _row_to_candidate(self, row: sqlite3.Row) -> CandidateDocument:
        library_id = row["libraryId"] or ""
        source_id = (
            row["sourceId"]
            or self.config.resolve_source_id(library_id)
            or library_id.lstrip("/")
        )
        raw_score = float(row["score"])
        return CandidateDocument(
            id=row["id"],
            source_id=source_id,
            library_id=library_id,
            title=row["title"] or "",
            description=row["description"] or "",
            raw_score=raw_score,
            relevance=orient_relevance(raw_score, self.score_orientation),
            heading_level=_parse_heading_level(row["headingLevel"]),
            keywords=(row["keywords"] or "").split(),
            control_name=row["controlName"] or None,
            doc_type=row["type"] or None,
            rel_file=row["relFile"] or None,
        )

    def _search_sync(
        self, query: str, filters: SearchFilters | None, limit: int
    ) -> list[CandidateDocument]:
        match = to_match_query(query)
        if not match:
            return []
        sql, params = self._build_sql(match, filters, limit)
        try:
            rows = db.execute_read(self.path, sql, params)
        except FileNotFoundError as e:
            raise IndexUnavailableError(str(e)) from e
        except sqlite3.OperationalError as e:
            if "no such table" in str(e) or "unable to open" in str(e):
                raise IndexUnavailableError(str(e)) from e
            raise MalformedQueryError(f"FTS rejected {match!r}: {e}") from e
        except sqlite3.DatabaseError as e:
            raise IndexUnavailableError(str(e)) from e
        return [self._row_to_candidate(row) for row in rows]

    async def search(
        self, query: str, filters: SearchFilters | None, limit: int
    ) -> list[CandidateDocument]:
        """Run one MATCH query in a worker thread."""
        return await asyncio.to_thread(self._search_sync, query, filters, limit)

    async def is_available(self) -> bool:
        try:
            await asyncio.to_thread(db.execute_read, self.path, "SELECT count(*) FROM docs")
            return True
        except (FileNotFoundError, sqlite3.Error) as e:
            logger.warning(f"FTS index unavailable: {e}")
            return False
