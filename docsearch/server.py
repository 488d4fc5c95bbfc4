"""FastAPI server for docsearch."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.deps import get_client_ip, get_engine, sanitize_error_message
from .config import settings
from .engine.core.metadata import get_ranking_config
from .engine.retrieval.fts import FtsIndex
from .engine.search_engine import SearchEngine
from .logging_utils import sanitize_query, setup_logging
from .middleware import SecurityHeadersMiddleware
from .models import (
    ExpandRequest,
    ExpandResponse,
    HealthResponse,
    ReadyResponse,
    SearchRequest,
    SearchResponse,
    SourceInfo,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    # Startup
    setup_logging()
    logger.info(f"Starting docsearch v{__version__}")

    # Validate CORS configuration in production
    if not settings.debug and settings.cors_allowed_origins == "*":
        logger.warning(
            "SECURITY WARNING: CORS is configured to allow all origins ('*'). "
            "Set DOCSEARCH_CORS_ALLOWED_ORIGINS to specific domains in production."
        )

    get_ranking_config()
    index = FtsIndex(settings.index_path)
    if not await index.is_available():
        logger.warning(f"FTS index at {settings.index_path} is not available yet")
    app.state.engine = SearchEngine(index, cfg=settings)

    yield
    # Shutdown
    app.state.engine = None


app = FastAPI(
    title="docsearch",
    description="Ranked search across multiple documentation sources",
    version=__version__,
    lifespan=lifespan,
)

# Security headers middleware
app.add_middleware(SecurityHeadersMiddleware)

# CORS middleware - use configured origins instead of wildcard
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-Id"],
)


# ============ EXCEPTION HANDLERS ============


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent response format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with sanitized error messages."""
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": sanitize_error_message(exc)},
    )


# ============ HEALTH ENDPOINTS ============


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint (lightweight liveness check)."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
    )


@app.get("/ready", tags=["Health"])
async def readiness_check(request: Request):
    """Readiness check - verifies the index and ranking configuration are loaded."""
    engine: SearchEngine | None = getattr(request.app.state, "engine", None)
    checks: dict[str, bool] = {"engine": engine is not None}

    sources = 0
    if engine is not None:
        checks["index"] = await engine.index.is_available()
        sources = len(engine.config.sources)
        checks["sources"] = sources > 0
    all_ok = all(checks.values())

    response = ReadyResponse(
        status="ready" if all_ok else "not_ready",
        version=__version__,
        checks=checks,
        sources=sources,
    )
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=200 if all_ok else 503,
    )


# ============ SEARCH ENDPOINTS ============


@app.post("/v1/search", response_model=SearchResponse, tags=["Search"])
async def search(
    body: SearchRequest,
    request: Request,
    engine: Annotated[SearchEngine, Depends(get_engine)],
) -> SearchResponse:
    """Rank documentation across all sources for a query."""
    logger.info(
        f"Search request from {get_client_ip(request)}: '{sanitize_query(body.query)}'"
    )
    return await engine.search(body.query, body.options, content=body.content)


@app.post("/v1/expand", response_model=ExpandResponse, tags=["Search"])
async def expand(
    body: ExpandRequest,
    engine: Annotated[SearchEngine, Depends(get_engine)],
) -> ExpandResponse:
    """Show the query variants and context label a search would use."""
    variants, label, scores = engine.expand(body.query, body.content)
    return ExpandResponse(
        query=body.query, variants=variants, context_label=label, context_scores=scores
    )


@app.get("/v1/sources", response_model=list[SourceInfo], tags=["Sources"])
async def list_sources(
    engine: Annotated[SearchEngine, Depends(get_engine)],
) -> list[SourceInfo]:
    """List the configured documentation sources."""
    return [
        SourceInfo(
            id=source.id,
            library_id=source.library_id or f"/{source.id}",
            type=source.type,
            description=source.description,
            static_boost=source.static_boost,
            tags=source.tags,
            dialect_group=source.dialect_group,
            dialect=source.dialect,
        )
        for source in engine.config.sources
    ]


# ============ MAIN ============


def main():
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "docsearch.server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
