"""Ranking engine for multi-source documentation search."""

from .search_engine import SearchEngine, build_refinement_hint

__all__ = ["SearchEngine", "build_refinement_hint"]
