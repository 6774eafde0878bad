"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from legal_eagle.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner: CliRunner, tmp_path: Path):
    """Run the CLI in demo mode against a throwaway data directory."""
    data_dir = tmp_path / "state"

    def _invoke(*args: str, input: str | None = None):
        return runner.invoke(main, ["--data-dir", str(data_dir), "--demo", *args], input=input)

    return _invoke


@pytest.fixture
def lease_file(tmp_path: Path) -> Path:
    path = tmp_path / "office_lease.txt"
    path.write_text("RESIDENTIAL LEASE AGREEMENT\nThe tenant shall pay rent monthly.", encoding="utf-8")
    return path


class TestVersion:
    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Legal Eagle" in result.output


class TestAnalyze:
    def test_analyze_json_saves_document(self, invoke, lease_file: Path) -> None:
        result = invoke("analyze", str(lease_file), "--output", "json")
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["name"] == "office_lease"
        assert payload["analysis"]["counterparties"] == ["John Smith", "Jane Doe"]

        listing = json.loads(invoke("documents", "--output", "json").stdout)
        assert listing[0]["id"] == payload["id"]
        assert listing[0]["status"] == "Draft"

    def test_analyze_no_save(self, invoke, lease_file: Path) -> None:
        result = invoke("analyze", str(lease_file), "--no-save", "--output", "json")
        assert "id" not in json.loads(result.stdout)
        assert len(json.loads(invoke("documents", "--output", "json").stdout)) == 5

    def test_analyze_rich(self, invoke, lease_file: Path) -> None:
        result = invoke("analyze", str(lease_file), "--name", "My Lease")
        assert result.exit_code == 0
        assert "My Lease" in result.output

    def test_empty_file_fails(self, invoke, tmp_path: Path) -> None:
        empty = tmp_path / "empty.txt"
        empty.write_text("", encoding="utf-8")
        result = invoke("analyze", str(empty))
        assert result.exit_code == 1
        assert "Error" in result.output


class TestDocuments:
    def test_seeded_workspace(self, invoke) -> None:
        rows = json.loads(invoke("documents", "--output", "json").stdout)
        assert len(rows) == 5

    def test_search_and_sort(self, invoke) -> None:
        rows = json.loads(invoke("documents", "--search", "lease", "--output", "json").stdout)
        assert [r["id"] for r in rows] == ["doc-3"]

        rows = json.loads(
            invoke("documents", "--sort", "name", "--ascending", "--output", "json").stdout
        )
        assert rows[0]["name"] == "Downtown Office Lease"

    def test_status_update(self, invoke) -> None:
        result = invoke("status", "doc-4", "in review")
        assert result.exit_code == 0
        rows = json.loads(invoke("documents", "--output", "json").stdout)
        assert next(r for r in rows if r["id"] == "doc-4")["status"] == "In Review"
        assert "changed status of Freelance Designer Contract" in invoke("activity").output

    def test_status_unknown_document(self, invoke) -> None:
        result = invoke("status", "nope", "Active")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete(self, invoke) -> None:
        result = invoke("delete", "doc-5", "--yes")
        assert result.exit_code == 0
        assert len(json.loads(invoke("documents", "--output", "json").stdout)) == 4

    def test_compare(self, invoke) -> None:
        result = invoke("compare", "doc-1", "doc-2", "--output", "json")
        assert result.exit_code == 0
        assert "overallSummary" in json.loads(result.stdout)


class TestOverview:
    def test_json(self, invoke) -> None:
        summary = json.loads(invoke("overview", "--output", "json").stdout)
        assert summary["risk"] == {"High": 1, "Medium": 2, "Low": 2, "total": 5}
        assert summary["counterparties"][0] == {"name": "Your Company Inc.", "count": 4}

    def test_rich(self, invoke) -> None:
        assert "Risk Overview" in invoke("overview").output


class TestDeadlines:
    def test_upcoming_default_limit(self, invoke) -> None:
        events = json.loads(invoke("deadlines", "--output", "json").stdout)
        assert 0 < len(events) <= 7
        assert events == sorted(events, key=lambda e: e["date"])

    def test_add_update_delete(self, invoke) -> None:
        assert invoke("deadline", "add", "Board meeting", "2099-01-15", "--doc", "doc-1").exit_code == 0
        events = json.loads(invoke("deadlines", "--date", "2099-01-15", "--output", "json").stdout)
        assert [e["eventName"] for e in events] == ["Board meeting"]
        assert events[0]["docName"] == "Innovate Corp Services Agreement"
        deadline_id = events[0]["id"]

        assert invoke("deadline", "update", deadline_id, "--date", "2099-01-20", "--unlink").exit_code == 0
        events = json.loads(invoke("deadlines", "--date", "2099-01-20", "--output", "json").stdout)
        assert events[0]["docId"] is None

        assert invoke("deadline", "delete", deadline_id).exit_code == 0
        assert json.loads(invoke("deadlines", "--date", "2099-01-20", "--output", "json").stdout) == []

    def test_bad_date(self, invoke) -> None:
        result = invoke("deadline", "add", "Meeting", "15/01/2099")
        assert result.exit_code == 1

    def test_delete_unknown(self, invoke) -> None:
        assert invoke("deadline", "delete", "nope").exit_code == 1

    def test_calendar(self, invoke) -> None:
        result = invoke("calendar", "--month", "2099-01")
        assert result.exit_code == 0
        assert "January 2099" in result.output


class TestWidgets:
    def test_add_and_remove(self, invoke) -> None:
        assert "clause-frequency" in invoke("widgets", "add", "clause-frequency").output
        result = invoke("widgets", "remove", "doc-history")
        assert "doc-history" not in result.output

    def test_unknown_widget(self, invoke) -> None:
        assert invoke("widgets", "add", "weather").exit_code == 1

    def test_list(self, invoke) -> None:
        result = invoke("widgets", "list")
        assert "Risk Overview" in result.output
        assert "clause-frequency" in result.output
