"""Shared test fixtures for legal-eagle tests."""

from __future__ import annotations

import itertools
import json
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from legal_eagle.activity import FixedActorSelector
from legal_eagle.config import Settings
from legal_eagle.controller import DashboardController
from legal_eagle.gateway import DemoGateway
from legal_eagle.models import (
    AnalysisResult,
    Document,
    DocumentStatus,
    KeyClause,
    KeyDate,
    PotentialRisk,
    RiskSeverity,
)
from legal_eagle.storage import MemoryStore

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_document(
    doc_id: str,
    name: str | None = None,
    severities: tuple[str, ...] = (),
    status: DocumentStatus = DocumentStatus.DRAFT,
    created_at: str = "2025-02-01T09:00:00+00:00",
    clauses: tuple[str, ...] = (),
    counterparties: tuple[str, ...] = (),
    key_dates: tuple[tuple[str, str], ...] = (),
) -> Document:
    """Build a document with just the analysis fields a test cares about."""
    return Document(
        id=doc_id,
        name=name or doc_id,
        created_at=created_at,
        original_text=f"Text of {doc_id}",
        status=status,
        analysis=AnalysisResult(
            summary=f"Summary of {doc_id}",
            key_clauses=[KeyClause(title, "explanation") for title in clauses],
            potential_risks=[
                PotentialRisk(f"Risk {i}", "description", RiskSeverity(sev))
                for i, sev in enumerate(severities)
            ],
            key_dates=[KeyDate(event, day) for event, day in key_dates],
            counterparties=list(counterparties),
        ),
    )


@pytest.fixture
def clock():
    """A fixed "now"."""
    return lambda: NOW


@pytest.fixture
def id_factory():
    """Sequential ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        model="gpt-4-turbo",
        current_user="indudhar",
        simulated_users=("Alex Johnson", "Maria Garcia"),
        activity_limit=50,
        upcoming_limit=7,
        llm_attempts=1,
        log_level="DEBUG",
        openai_api_key=None,
        anthropic_api_key=None,
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def empty_store() -> MemoryStore:
    """A store that already holds an empty document collection (no seeding)."""
    return MemoryStore({"documents": json.dumps([])})


@pytest.fixture
def make_controller(settings, clock, id_factory):
    """Factory building a deterministic controller over a given store."""

    def _make(store, gateway=None) -> DashboardController:
        controller = DashboardController(
            store,
            settings=settings,
            gateway=gateway or DemoGateway(today=NOW.date()),
            selector=FixedActorSelector("Chen Wei"),
            clock=clock,
            id_factory=id_factory,
        )
        controller.load()
        return controller

    return _make


@pytest.fixture
def controller(make_controller, empty_store) -> DashboardController:
    """Controller over an empty (already initialized) workspace."""
    return make_controller(empty_store)


@pytest.fixture
def seeded_controller(make_controller, store) -> DashboardController:
    """Controller whose first load seeded the sample workspace."""
    return make_controller(store)


class FakeCompletions:
    """Imitates ``client.chat.completions`` of the OpenAI SDK."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_openai_client(*replies):
    """An object shaped like ``openai.OpenAI`` answering with ``replies`` in order."""
    completions = FakeCompletions(replies)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


ANALYSIS_REPLY = {
    "summary": "A lease.",
    "keyClauses": [
        {"clauseTitle": "Rent", "explanation": "Pay monthly.", "originalTextSnippet": "...rent..."}
    ],
    "potentialRisks": [
        {"riskTitle": "Auto renewal", "riskDescription": "Renews silently.", "severity": "High"}
    ],
    "keyDates": [
        {"eventName": "Lease End", "date": "2025-12-31", "originalTextSnippet": "...ending..."}
    ],
    "counterparties": ["John Smith", "Jane Doe"],
}

COMPARISON_REPLY = {
    "overallSummary": "Document 2 is stricter.",
    "clauseComparisons": [
        {
            "clauseTitle": "Termination",
            "summaryOfDifference": "Notice period differs.",
            "detailsDoc1": "30 days",
            "detailsDoc2": "60 days",
        }
    ],
    "riskProfileDifferences": [
        {
            "riskTitle": "Liability",
            "summaryOfDifference": "Cap removed.",
            "riskInDoc1": "Low",
            "riskInDoc2": "High",
        }
    ],
}
