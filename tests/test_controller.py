"""Tests for the dashboard controller: loading, seeding and commands."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from legal_eagle.aggregations import risk_rollup
from legal_eagle.controller import DashboardController
from legal_eagle.errors import AnalysisError, NotFoundError, ValidationError
from legal_eagle.gateway import DemoGateway
from legal_eagle.history import HistoryTable
from legal_eagle.layout import DEFAULT_LAYOUT
from legal_eagle.models import (
    ActivityType,
    AnalysisResult,
    DocumentStatus,
    KeyDate,
    ManualDeadline,
)
from legal_eagle.storage import (
    ACTIVITY_KEY,
    DEADLINES_KEY,
    DOCUMENTS_KEY,
    LAYOUT_KEY,
    MemoryStore,
)

from conftest import NOW, make_document


def _stored(store: MemoryStore, key: str):
    return json.loads(store.payloads[key])


class FailingGateway(DemoGateway):
    def analyze(self, document_text: str) -> AnalysisResult:
        raise AnalysisError("Failed to get a valid analysis from the AI model.")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    def test_first_run_seeds_and_persists(self, seeded_controller: DashboardController, store) -> None:
        state = seeded_controller.state
        assert [d.id for d in state.documents] == ["doc-1", "doc-2", "doc-3", "doc-4", "doc-5"]
        assert [d.id for d in state.manual_deadlines] == ["md-1", "md-2", "md-3"]
        assert len(state.activity_feed) == 5
        assert state.layout == list(DEFAULT_LAYOUT)
        assert len(_stored(store, DOCUMENTS_KEY)) == 5
        assert len(_stored(store, DEADLINES_KEY)) == 3
        assert len(_stored(store, ACTIVITY_KEY)) == 5

    def test_seed_risk_rollup(self, seeded_controller: DashboardController) -> None:
        rollup = risk_rollup(seeded_controller.state.documents)
        assert (rollup.high, rollup.medium, rollup.low) == (1, 2, 2)

    def test_reload_reads_persisted_state(self, seeded_controller, make_controller, store) -> None:
        seeded_controller.update_document_status("doc-4", DocumentStatus.IN_REVIEW)
        reloaded = make_controller(store)
        doc = reloaded.find_document("doc-4")
        assert doc.status == DocumentStatus.IN_REVIEW
        assert len(reloaded.state.activity_feed) == 6

    def test_empty_collection_is_not_reseeded(self, controller: DashboardController) -> None:
        assert controller.state.documents == []
        assert controller.state.manual_deadlines == []
        assert controller.state.activity_feed == []

    def test_corrupt_documents_fall_back_to_seed(self, make_controller) -> None:
        store = MemoryStore({DOCUMENTS_KEY: "{broken"})
        assert len(make_controller(store).state.documents) == 5

    def test_malformed_documents_fall_back_to_seed(self, make_controller) -> None:
        store = MemoryStore({DOCUMENTS_KEY: json.dumps([{"name": "no id"}])})
        assert len(make_controller(store).state.documents) == 5

    def test_documents_without_timestamp_fall_back_to_seed(self, make_controller) -> None:
        store = MemoryStore({DOCUMENTS_KEY: json.dumps([{"id": "d1", "name": "NDA"}])})
        controller = make_controller(store)
        assert len(controller.state.documents) == 5
        assert len(HistoryTable().rows(controller.state.documents)) == 5

    def test_corrupt_deadlines_load_empty(self, make_controller) -> None:
        store = MemoryStore({DOCUMENTS_KEY: "[]", DEADLINES_KEY: "nope"})
        assert make_controller(store).state.manual_deadlines == []

    def test_stored_layout_is_used(self, make_controller) -> None:
        store = MemoryStore({DOCUMENTS_KEY: "[]", LAYOUT_KEY: json.dumps(["doc-history", "doc-history"])})
        assert make_controller(store).state.layout == ["doc-history"]

    def test_non_list_layout_uses_default(self, make_controller) -> None:
        store = MemoryStore({DOCUMENTS_KEY: "[]", LAYOUT_KEY: json.dumps({"a": 1})})
        assert make_controller(store).state.layout == list(DEFAULT_LAYOUT)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class TestDocuments:
    def test_analyze_requires_text(self, controller: DashboardController) -> None:
        with pytest.raises(ValidationError, match="legal text"):
            controller.analyze_text("   ", "Lease")

    def test_analyze_requires_name(self, controller: DashboardController) -> None:
        with pytest.raises(ValidationError, match="name"):
            controller.analyze_text("Some lease text", " ")

    def test_analyze_failure_propagates(self, make_controller, empty_store) -> None:
        controller = make_controller(empty_store, gateway=FailingGateway())
        with pytest.raises(AnalysisError):
            controller.analyze_text("Some lease text", "Lease")

    def test_save_document_scenario(self, controller: DashboardController) -> None:
        analysis = controller.analyze_text("Lease text", "Office Lease")
        doc = controller.save_document("Lease text", analysis, "Office Lease")

        assert controller.state.documents[0] is doc
        assert doc.status == DocumentStatus.DRAFT
        assert doc.last_modified_by == "indudhar"
        assert doc.created_at == NOW.isoformat()

        event = controller.state.activity_feed[0]
        assert event.type == ActivityType.DOCUMENT_CREATED
        assert event.user == "indudhar"
        assert event.details.doc_id == doc.id
        assert _stored(controller.store, DOCUMENTS_KEY)[0]["name"] == "Office Lease"

    def test_save_without_analysis_rejected(self, controller: DashboardController) -> None:
        with pytest.raises(ValidationError, match="Cannot save"):
            controller.save_document("text", None, "Name")

    def test_status_change_scenario(self, seeded_controller: DashboardController) -> None:
        doc = seeded_controller.update_document_status("doc-4", DocumentStatus.IN_REVIEW)
        assert doc.status == DocumentStatus.IN_REVIEW
        assert doc.last_modified_by == "indudhar"

        event = seeded_controller.state.activity_feed[0]
        assert event.type == ActivityType.STATUS_UPDATED
        assert event.details.old_status == DocumentStatus.DRAFT
        assert event.details.new_status == DocumentStatus.IN_REVIEW
        assert event.user == "indudhar"

    def test_draft_to_active_logs_once(self, controller: DashboardController) -> None:
        doc = controller.save_document("text", AnalysisResult(summary="s"), "Doc")
        controller.update_document_status(doc.id, DocumentStatus.ACTIVE)
        updates = [e for e in controller.state.activity_feed if e.type == ActivityType.STATUS_UPDATED]
        assert len(updates) == 1
        assert len(controller.state.activity_feed) == 2

    def test_same_status_logs_nothing(self, seeded_controller: DashboardController) -> None:
        seeded_controller.update_document_status("doc-4", DocumentStatus.DRAFT)
        assert len(seeded_controller.state.activity_feed) == 5

    def test_status_of_unknown_document(self, controller: DashboardController) -> None:
        with pytest.raises(NotFoundError):
            controller.update_document_status("nope", DocumentStatus.ACTIVE)

    def test_delete_keeps_linked_deadlines(self, seeded_controller: DashboardController) -> None:
        deleted = seeded_controller.delete_document("doc-4")
        assert deleted.name == "Freelance Designer Contract"
        assert seeded_controller.find_document("doc-4") is None
        assert any(d.doc_id == "doc-4" for d in seeded_controller.state.manual_deadlines)

        event = seeded_controller.state.activity_feed[0]
        assert event.type == ActivityType.DOCUMENT_DELETED
        assert event.details.document_name == "Freelance Designer Contract"

        dangling = next(e for e in seeded_controller.calendar_events() if e.id == "md-2")
        assert dangling.doc_name is None

    def test_delete_unknown_is_noop(self, controller: DashboardController) -> None:
        assert controller.delete_document("nope") is None
        assert controller.state.activity_feed == []

    def test_feed_stays_bounded(self, controller: DashboardController) -> None:
        doc = controller.save_document("text", AnalysisResult(summary="s"), "Doc")
        for i in range(30):
            controller.update_document_status(doc.id, DocumentStatus.ACTIVE)
            controller.update_document_status(doc.id, DocumentStatus.DRAFT)
        assert len(controller.state.activity_feed) == 50
        assert len(_stored(controller.store, ACTIVITY_KEY)) == 50

    def test_compare_documents(self, seeded_controller: DashboardController) -> None:
        first, second, result = seeded_controller.compare_documents("doc-1", "doc-2")
        assert (first.id, second.id) == ("doc-1", "doc-2")
        assert result.overall_summary

    def test_compare_unknown_document(self, seeded_controller: DashboardController) -> None:
        with pytest.raises(NotFoundError):
            seeded_controller.compare_documents("doc-1", "gone")

    def test_suggest_title_for_empty_text(self, controller: DashboardController) -> None:
        assert controller.suggest_title("  ") == ""


# ---------------------------------------------------------------------------
# Manual deadlines
# ---------------------------------------------------------------------------


class TestManualDeadlines:
    def test_add(self, controller: DashboardController) -> None:
        deadline = controller.add_manual_deadline("Board meeting", "2025-03-20")
        assert controller.state.manual_deadlines == [deadline]
        assert _stored(controller.store, DEADLINES_KEY) == [
            {"id": deadline.id, "eventName": "Board meeting", "date": "2025-03-20"}
        ]

    @pytest.mark.parametrize(("name", "day"), [("", "2025-03-20"), ("Meeting", "20/03/2025")])
    def test_add_rejects_bad_input(self, controller: DashboardController, name: str, day: str) -> None:
        with pytest.raises(ValidationError):
            controller.add_manual_deadline(name, day)
        assert controller.state.manual_deadlines == []

    def test_update(self, controller: DashboardController) -> None:
        deadline = controller.add_manual_deadline("Board meeting", "2025-03-20")
        controller.update_manual_deadline(ManualDeadline(deadline.id, "Board meeting", "2025-03-27"))
        assert controller.state.manual_deadlines[0].date == "2025-03-27"

    def test_update_unknown(self, controller: DashboardController) -> None:
        with pytest.raises(NotFoundError):
            controller.update_manual_deadline(ManualDeadline("nope", "x", "2025-03-27"))

    def test_delete(self, controller: DashboardController) -> None:
        deadline = controller.add_manual_deadline("Board meeting", "2025-03-20")
        controller.delete_manual_deadline(deadline.id)
        assert controller.state.manual_deadlines == []

    def test_delete_unknown(self, controller: DashboardController) -> None:
        with pytest.raises(NotFoundError):
            controller.delete_manual_deadline("nope")

    def test_track_key_date_once(self, seeded_controller: DashboardController) -> None:
        key_date = KeyDate("Lease Renewal Option Deadline", "2030-01-01")
        first = seeded_controller.track_key_date("doc-3", key_date)
        assert first is not None and first.doc_id == "doc-3"
        assert seeded_controller.is_key_date_tracked("doc-3", key_date)
        assert seeded_controller.track_key_date("doc-3", key_date) is None
        assert len(seeded_controller.state.manual_deadlines) == 4

    def test_upcoming_events_exclude_past(self, controller: DashboardController) -> None:
        controller.add_manual_deadline("Past", "2025-02-01")
        controller.add_manual_deadline("Future", "2025-04-01")
        assert [e.event_name for e in controller.upcoming_events()] == ["Future"]
        assert len(controller.calendar_events()) == 2


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


class TestLayoutCommands:
    def test_add_widget_persists(self, controller: DashboardController) -> None:
        layout = controller.add_widget("clause-frequency")
        assert layout[-1] == "clause-frequency"
        assert _stored(controller.store, LAYOUT_KEY)[-1] == "clause-frequency"

    def test_remove_widget_persists(self, controller: DashboardController) -> None:
        controller.remove_widget("doc-history")
        assert "doc-history" not in _stored(controller.store, LAYOUT_KEY)

    def test_add_unknown_widget(self, controller: DashboardController) -> None:
        with pytest.raises(ValidationError):
            controller.add_widget("weather")

    def test_layout_survives_reload(self, make_controller, empty_store) -> None:
        make_controller(empty_store).remove_widget("risk-overview")
        assert "risk-overview" not in make_controller(empty_store).state.layout


def test_seeded_deadlines_relative_to_clock(seeded_controller: DashboardController) -> None:
    md1 = seeded_controller.state.manual_deadlines[0]
    assert md1.date == (seeded_controller.today() + timedelta(days=15)).isoformat()


def test_find_document(controller: DashboardController) -> None:
    controller.state.documents = [make_document("a"), make_document("b")]
    assert controller.find_document("b").id == "b"
