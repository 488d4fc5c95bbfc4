"""
Tests for documentation link construction.
"""

from docsearch.engine.core.document import CandidateDocument
from docsearch.engine.core.urls import build_document_url, heading_anchor
from docsearch.models.enums import AnchorStyle
from docsearch.models.metadata import SourceDescriptor


class TestHeadingAnchor:
    def test_github(self):
        assert heading_anchor("Using the API!", AnchorStyle.GITHUB) == "using-the-api"

    def test_docsify_collapses_dashes(self):
        assert heading_anchor("Setup -- Local", AnchorStyle.DOCSIFY) == "setup-local"

    def test_custom_keeps_heading(self):
        assert heading_anchor(" Event Handling ", AnchorStyle.CUSTOM) == "Event Handling"


class TestBuildDocumentUrl:
    def test_file_placeholder(self, ranking_config, documents):
        services = next(d for d in documents if d.id == "/cap/guides/providing-services")
        url = build_document_url(ranking_config.source("cap"), services)
        assert url == "https://cap.cloud.sap/docs/guides/providing-services"

    def test_section_anchor(self, ranking_config, documents):
        recipe = next(d for d in documents if d.id == "/wdi5/wizard-testing")
        url = build_document_url(ranking_config.source("wdi5"), recipe)
        assert url == "https://ui5-community.github.io/wdi5/#/recipes?id=testing-a-wizard"

    def test_id_and_library_placeholders(self):
        source = SourceDescriptor(id="api", url_template="https://docs.dev/{library}/{id}.html")
        candidate = CandidateDocument(
            id="/api/sap.m/Button", source_id="api", library_id="/api", title="Button"
        )
        assert build_document_url(source, candidate) == "https://docs.dev/api/sap.m/Button.html"

    def test_no_template(self, ranking_config, documents):
        wizard = next(d for d in documents if d.id == "/openui5-api/sap.m.Wizard")
        assert build_document_url(ranking_config.source("ui5-api"), wizard) is None

    def test_missing_file(self, ranking_config):
        candidate = CandidateDocument(id="/cap/x", source_id="cap", library_id="/cap", title="X")
        assert build_document_url(ranking_config.source("cap"), candidate) is None
