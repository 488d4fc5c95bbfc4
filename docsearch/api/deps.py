"""FastAPI dependency injection functions.

This module contains shared dependencies for API endpoints:
- Search engine lookup from application state
- Client IP extraction for request logging
- Error sanitization
"""

import logging

from fastapi import HTTPException
from fastapi import Request as FastAPIRequest

from ..engine.search_engine import SearchEngine

logger = logging.getLogger(__name__)


# ============ ERROR SANITIZATION ============


GENERIC_ERROR_MESSAGE = "An error occurred processing your request. Please try again."


def sanitize_error_message(error: Exception) -> str:
    """
    Log an unexpected error and return a generic client-facing message.

    Known failures are raised as HTTPException and carry their own detail,
    so anything reaching here is internal and never echoed to the client.
    """
    logger.error(f"Request error: {error}", exc_info=error)
    return GENERIC_ERROR_MESSAGE


# ============ REQUEST HELPERS ============


def get_client_ip(request: FastAPIRequest) -> str | None:
    """Extract client IP from X-Forwarded-For header or direct connection."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


def get_engine(request: FastAPIRequest) -> SearchEngine:
    """Return the engine created by the application lifespan."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Search engine not initialized")
    return engine
