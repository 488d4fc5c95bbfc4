"""
Tests for the end-to-end ranking pipeline.
"""

import pytest

from docsearch.engine.retrieval.base import IndexUnavailableError
from docsearch.engine.search_engine import SearchEngine, build_refinement_hint
from docsearch.models.enums import MatchTier, ScoreOrientation, SearchStatus
from docsearch.models.search import SearchFilters, SearchOptions


class BrokenIndex:
    """Index that fails every call."""

    name = "broken"
    score_orientation = ScoreOrientation.LOWER_IS_BETTER

    async def search(self, query, filters, limit):
        raise IndexUnavailableError("database is closed")

    async def is_available(self):
        return False


@pytest.fixture
def engine(memory_index, ranking_config, test_settings):
    return SearchEngine(memory_index, config=ranking_config, cfg=test_settings)


class TestSearch:
    """Tests for SearchEngine.search."""

    async def test_focused_query_prefers_matching_source(self, engine):
        response = await engine.search("wizard")

        assert response.status == SearchStatus.OK
        assert response.context_label == "ui5"
        assert [r.source_id for r in response.results[:2]] == ["ui5-api", "ui5-api"]
        assert response.results[0].match_tier == MatchTier.EXACT_TITLE
        assert response.results[0].title == "Wizard"

    async def test_scores_descending(self, engine):
        response = await engine.search("wizard")
        scores = [r.score for r in response.results]
        assert scores == sorted(scores, reverse=True)

    async def test_dialect_requested_in_query(self, engine):
        response = await engine.search("LOOP cloud")

        assert response.status == SearchStatus.OK
        assert {r.source_id for r in response.results} == {"abap-cloud"}

    async def test_dialect_default(self, engine):
        response = await engine.search("LOOP")
        assert {r.source_id for r in response.results} == {"abap-standard"}

    async def test_no_results_has_hint(self, engine):
        response = await engine.search("zzqx unknownthing")

        assert response.status == SearchStatus.NO_RESULTS
        assert response.results == []
        assert "No documentation matched 'zzqx unknownthing'" in response.hint
        assert "Try:" in response.hint

    async def test_empty_query(self, engine):
        response = await engine.search("   ")
        assert response.status == SearchStatus.EMPTY_QUERY
        assert response.results == []

    async def test_deterministic(self, engine):
        first = await engine.search("wizard")
        second = await engine.search("wizard")
        assert first.model_dump() == second.model_dump()

    async def test_unique_ids(self, engine):
        response = await engine.search("wizard")
        ids = [r.id for r in response.results]
        assert len(ids) == len(set(ids))

    async def test_max_total_option(self, engine):
        response = await engine.search("wizard", SearchOptions(max_total=1))
        assert len(response.results) == 1

    async def test_max_per_source_option(self, engine):
        response = await engine.search("loop cloud standard", SearchOptions(max_per_source=1))
        counts = {}
        for result in response.results:
            counts[result.source_id] = counts.get(result.source_id, 0) + 1
        assert all(count == 1 for count in counts.values())

    async def test_filters_restrict_candidates(self, engine):
        options = SearchOptions(filters=SearchFilters(sources=["ui5-samples"]))
        response = await engine.search("wizard", options)
        assert {r.source_id for r in response.results} == {"ui5-samples"}

    async def test_result_urls(self, engine):
        response = await engine.search("locators")
        locators = next(r for r in response.results if r.id == "/wdi5/locators")
        assert locators.url == "https://ui5-community.github.io/wdi5/#/locators?id=locators"

    async def test_retrieval_unavailable(self, ranking_config, test_settings):
        engine = SearchEngine(BrokenIndex(), config=ranking_config, cfg=test_settings)

        response = await engine.search("wizard")

        assert response.status == SearchStatus.RETRIEVAL_UNAVAILABLE
        assert response.failed_variants == list(dict.fromkeys(response.variants))
        assert response.results == []

    async def test_fallback_index(self, memory_index, ranking_config, test_settings):
        engine = SearchEngine(
            BrokenIndex(), config=ranking_config, cfg=test_settings, fallback_index=memory_index
        )

        response = await engine.search("wizard")

        assert response.status == SearchStatus.OK
        assert response.degraded is True
        assert response.results[0].title == "Wizard"

    async def test_content_identifiers_used(self, engine):
        content = '<mvc:View xmlns:m="sap.m"><m:WizardStep title="One"/></mvc:View>'
        response = await engine.search("step title", content=content)
        assert "WizardStep" in response.variants
        assert any(r.id == "/openui5-api/sap.m.WizardStep" for r in response.results)

    async def test_variants_use_trimmed_query(self, engine):
        response = await engine.search("  Wizard \n")

        assert response.query == "  Wizard \n"
        assert response.variants[:2] == ["Wizard", "wizard"]
        assert response.results[0].title == "Wizard"


class TestExpand:
    def test_expand(self, engine):
        variants, label, scores = engine.expand("wizard")
        assert variants[2:] == ["sap.m.Wizard", "WizardStep", "wizard control"]
        assert label == "ui5"
        assert scores["ui5"] == 3

    def test_expand_matches_search_trimming(self, engine):
        variants, label, _ = engine.expand("  wizard  ")
        assert variants[:2] == ["wizard", "wizard"]
        assert label == "ui5"


class TestRefinementHint:
    def test_configured_hints(self, ranking_config):
        hint = build_refinement_hint("foo", ranking_config)
        assert hint.splitlines()[0] == "No documentation matched 'foo'."
        assert "- Use an exact control name such as sap.m.Button" in hint

    def test_identifiers_from_content(self, ranking_config):
        hint = build_refinement_hint("foo", ranking_config, "entity Books { }")
        assert "Books" in hint
