"""
Pytest configuration and shared fixtures.
"""

import json
import sqlite3
from pathlib import Path

import pytest

from docsearch.config import Settings
from docsearch.engine.core.document import CandidateDocument
from docsearch.engine.core.metadata import build_ranking_config, reset_ranking_config
from docsearch.engine.retrieval.fts import FTS_SCHEMA
from docsearch.engine.retrieval.memory import InMemoryIndex
from docsearch.models.metadata import MetadataDocument

# ============================================================
# Ranking Configuration
# ============================================================

METADATA = {
    "version": 3,
    "updated_at": "2026-09-30T00:00:00Z",
    "sources": [
        {
            "id": "ui5-api",
            "libraryId": "/openui5-api",
            "type": "jsdoc",
            "staticBoost": 10,
            "tags": ["ui5", "controls"],
        },
        {"id": "ui5-samples", "libraryId": "/openui5-samples", "type": "sample", "boost": 0},
        {
            "id": "cap",
            "libraryId": "/cap",
            "staticBoost": 5,
            "urlTemplate": "https://cap.cloud.sap/docs/{file}",
            "anchorStyle": "github",
            "termBoosts": [{"terms": ["cds", "cap"], "boost": 8}],
        },
        {
            "id": "wdi5",
            "libraryId": "/wdi5",
            "urlTemplate": "https://ui5-community.github.io/wdi5/#/{file}",
            "anchorStyle": "docsify",
        },
        {
            "id": "abap-cloud",
            "libraryId": "/abap-docs-cloud",
            "dialectGroup": "abap",
            "dialect": "cloud",
        },
        {
            "id": "abap-standard",
            "libraryId": "/abap-docs-standard",
            "dialectGroup": "abap",
            "dialect": "standard",
        },
    ],
    "synonyms": [
        {"from": "wizard", "to": ["sap.m.Wizard", "WizardStep", "wizard control"]},
        {"from": "button", "to": ["sap.m.Button", "button control"]},
    ],
    "acronyms": {"CDS": ["Core Data Services", "cds model"], "ui5": ["SAPUI5", "OpenUI5", ""]},
    "contextIndicatorTerms": {
        "cap": ["cds", "cap", "entity", "service", "aspect", "annotation", "odata", "hana"],
        "wdi5": ["wdi5", "test", "testing", "e2e", "browser", "webdriver", "selector", "locator"],
        "UI5": ["sap.m", "sap.ui", "control", "wizard", "button", "table", "fiori", "ui5"],
    },
    "contextBoosts": {
        "UI5": {"ui5-api": 1.2, "ui5-samples": 1.1, "cap": 0.4, "wdi5": 0.3},
        "cap": {"cap": 1.2, "ui5-api": 0.3, "wdi5": 0},
        "wdi5": {"wdi5": 1.3, "ui5-api": 0.2, "cap": 0.4},
    },
    "contextPenaltyOverrides": {
        "cap": {"ui5-api": ["ui5", "fiori", "integration"]},
        "ui5": {"wdi5": ["test", "testing"]},
    },
    "dialectKeywords": {
        "abap": {
            "cloud": ["cloud", "btp", "steampunk"],
            "standard": ["standard", "on-premise"],
        }
    },
    "dialectDefaults": {"abap": "standard"},
    "libraryMappings": {"/openui5": "ui5-api"},
    "refinementHints": [
        "Use an exact control name such as sap.m.Button",
        "Add the framework name (CAP, UI5, wdi5)",
    ],
}


def _doc(doc_id: str, source_id: str, library_id: str, title: str, **kwargs) -> CandidateDocument:
    return CandidateDocument(
        id=doc_id, source_id=source_id, library_id=library_id, title=title, **kwargs
    )


DOCUMENTS = [
    _doc(
        "/openui5-api/sap.m.Wizard",
        "ui5-api",
        "/openui5-api",
        "Wizard",
        description="A control that guides users through a multi-step wizard.",
        keywords=["Wizard", "WizardStep", "steps"],
        control_name="Wizard",
        doc_type="jsdoc",
    ),
    _doc(
        "/openui5-api/sap.m.WizardStep",
        "ui5-api",
        "/openui5-api",
        "WizardStep",
        description="A single step of a wizard.",
        control_name="WizardStep",
        doc_type="jsdoc",
    ),
    _doc(
        "/openui5-samples/wizard-basic",
        "ui5-samples",
        "/openui5-samples",
        "Wizard Basic",
        description="Sample with a basic wizard and three steps.",
        doc_type="sample",
    ),
    _doc(
        "/cap/guides/providing-services",
        "cap",
        "/cap",
        "Providing Services",
        description="Define a cds service with entity projections.",
        keywords=["service", "entity", "projection"],
        rel_file="guides/providing-services.md",
    ),
    _doc(
        "/cap/cds/cdl",
        "cap",
        "/cap",
        "CDL Definition Language",
        description="Entity, type and aspect definitions in cds.",
        keywords=["entity", "aspect", "type"],
        rel_file="cds/cdl.md",
    ),
    _doc(
        "/wdi5/locators",
        "wdi5",
        "/wdi5",
        "Locators",
        description="Use a wdi5 selector to locate UI5 controls in browser tests.",
        keywords=["selector", "locator"],
        heading_level=2,
        rel_file="locators.md",
    ),
    _doc(
        "/wdi5/wizard-testing",
        "wdi5",
        "/wdi5",
        "Testing a Wizard",
        description="End-to-end wizard test with wdi5.",
        rel_file="recipes.md",
        heading_level=2,
    ),
    _doc(
        "/abap-docs-cloud/loop",
        "abap-cloud",
        "/abap-docs-cloud",
        "LOOP AT itab",
        description="Loop over internal table rows in ABAP Cloud.",
        keywords=["LOOP"],
    ),
    _doc(
        "/abap-docs-standard/loop",
        "abap-standard",
        "/abap-docs-standard",
        "LOOP AT itab",
        description="Loop over internal table rows.",
        keywords=["LOOP"],
    ),
    _doc(
        "/abap-docs-cloud/loop-group",
        "abap-cloud",
        "/abap-docs-cloud",
        "LOOP AT GROUP",
        description="Group loop in ABAP Cloud.",
        keywords=["LOOP", "GROUP"],
    ),
    _doc(
        "/abap-docs-standard/loop-group",
        "abap-standard",
        "/abap-docs-standard",
        "LOOP AT GROUP",
        description="Group loop.",
        keywords=["LOOP", "GROUP"],
    ),
]


@pytest.fixture
def metadata_document() -> dict:
    """Raw metadata document as it appears in metadata.json."""
    return json.loads(json.dumps(METADATA))


@pytest.fixture
def ranking_config(metadata_document):
    """Immutable ranking configuration built from the sample document."""
    return build_ranking_config(MetadataDocument.model_validate(metadata_document))


@pytest.fixture
def metadata_file(tmp_path: Path, metadata_document) -> Path:
    """Sample metadata document written to disk."""
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps(metadata_document), encoding="utf-8")
    return path


# ============================================================
# Indexes
# ============================================================


@pytest.fixture
def documents() -> list[CandidateDocument]:
    return [CandidateDocument(**vars(doc)) for doc in DOCUMENTS]


@pytest.fixture
def memory_index(documents) -> InMemoryIndex:
    return InMemoryIndex(documents)


@pytest.fixture
def fts_db(tmp_path: Path, documents) -> Path:
    """FTS5 database holding the sample documents."""
    path = tmp_path / "docs.sqlite"
    conn = sqlite3.connect(path)
    conn.execute(FTS_SCHEMA)
    conn.executemany(
        """
        INSERT INTO docs (libraryId, type, title, description, keywords, controlName,
                          namespace, id, sourceId, relFile, headingLevel, snippetCount)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                doc.library_id,
                doc.doc_type or "markdown",
                doc.title,
                doc.description,
                " ".join(doc.keywords),
                doc.control_name or "",
                "sap.m" if doc.control_name else "",
                doc.id,
                doc.source_id,
                doc.rel_file or "",
                doc.heading_level if doc.heading_level is not None else "",
                0,
            )
            for doc in documents
        ],
    )
    conn.commit()
    conn.close()
    return path


# ============================================================
# Settings
# ============================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings with short timeouts so failure tests stay fast."""
    return Settings(variant_timeout_seconds=0.5, search_deadline_seconds=2.0)


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Drop the cached configuration between tests."""
    reset_ranking_config()
    yield
    reset_ranking_config()
