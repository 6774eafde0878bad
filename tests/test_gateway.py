"""Tests for the AI gateway, using a fake OpenAI-shaped client."""

from __future__ import annotations

import copy
import json
from datetime import date

import pytest

from legal_eagle.config import Settings
from legal_eagle.errors import AnalysisError, ComparisonError
from legal_eagle.gateway import (
    FALLBACK_TITLE,
    DemoGateway,
    LLMGateway,
    build_gateway,
    extract_json,
    title_snippet,
)
from legal_eagle.models import RiskSeverity

from conftest import ANALYSIS_REPLY, COMPARISON_REPLY, fake_openai_client


def _gateway(*replies, attempts: int = 1) -> LLMGateway:
    return LLMGateway(model="gpt-4-turbo", client=fake_openai_client(*replies), attempts=attempts)


class TestExtractJson:
    def test_plain(self) -> None:
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_fenced_json_block(self) -> None:
        assert extract_json('Here you go:\n```json\n{"a": 1}\n```') == {"a": 1}

    def test_bare_fence(self) -> None:
        assert extract_json('```\n{"a": 2}\n```') == {"a": 2}

    def test_unclosed_fence(self) -> None:
        assert extract_json('```json\n{"a": 3}') == {"a": 3}

    def test_non_object_rejected(self) -> None:
        with pytest.raises(ValueError):
            extract_json("[1, 2]")

    def test_garbage_rejected(self) -> None:
        with pytest.raises(ValueError):
            extract_json("not json at all")


class TestTitleSnippet:
    def test_first_300_words(self) -> None:
        text = " ".join(f"w{i}" for i in range(400))
        assert title_snippet(text).split(" ")[-1] == "w299"


class TestAnalyze:
    def test_valid_reply(self) -> None:
        result = _gateway(json.dumps(ANALYSIS_REPLY)).analyze("lease text")
        assert result.summary == "A lease."
        assert result.key_clauses[0].title == "Rent"
        assert result.key_clauses[0].source_snippet == "...rent..."
        assert result.potential_risks[0].severity is RiskSeverity.HIGH
        assert result.key_dates[0].event_name == "Lease End"
        assert result.counterparties == ["John Smith", "Jane Doe"]

    def test_prompt_contains_document(self) -> None:
        gateway = _gateway(json.dumps(ANALYSIS_REPLY))
        gateway.analyze("UNIQUE-LEASE-TEXT")
        call = gateway.client.chat.completions.calls[0]
        assert call["model"] == "gpt-4-turbo"
        assert "UNIQUE-LEASE-TEXT" in call["messages"][1]["content"]

    def test_missing_counterparties_default_empty(self) -> None:
        reply = copy.deepcopy(ANALYSIS_REPLY)
        del reply["counterparties"]
        assert _gateway(json.dumps(reply)).analyze("text").counterparties == []

    def test_lowercase_severity_accepted(self) -> None:
        reply = copy.deepcopy(ANALYSIS_REPLY)
        reply["potentialRisks"][0]["severity"] = "medium"
        result = _gateway(json.dumps(reply)).analyze("text")
        assert result.potential_risks[0].severity is RiskSeverity.MEDIUM

    def test_non_iso_key_date_dropped(self) -> None:
        reply = copy.deepcopy(ANALYSIS_REPLY)
        reply["keyDates"].append(
            {"eventName": "Vague", "date": "end of year", "originalTextSnippet": "..."}
        )
        result = _gateway(json.dumps(reply)).analyze("text")
        assert [d.event_name for d in result.key_dates] == ["Lease End"]

    def test_schema_violation(self) -> None:
        reply = copy.deepcopy(ANALYSIS_REPLY)
        reply["potentialRisks"][0]["severity"] = "Catastrophic"
        with pytest.raises(AnalysisError, match="valid analysis"):
            _gateway(json.dumps(reply)).analyze("text")

    def test_missing_field(self) -> None:
        reply = copy.deepcopy(ANALYSIS_REPLY)
        del reply["keyClauses"]
        with pytest.raises(AnalysisError):
            _gateway(json.dumps(reply)).analyze("text")

    def test_transport_failure(self) -> None:
        with pytest.raises(AnalysisError):
            _gateway(ConnectionError("boom")).analyze("text")

    def test_transport_retried(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("time.sleep", lambda seconds: None)
        gateway = _gateway(ConnectionError("blip"), json.dumps(ANALYSIS_REPLY), attempts=2)
        assert gateway.analyze("text").summary == "A lease."
        assert len(gateway.client.chat.completions.calls) == 2


class TestCompare:
    def test_valid_reply(self) -> None:
        result = _gateway(json.dumps(COMPARISON_REPLY)).compare("a", "b")
        assert result.overall_summary == "Document 2 is stricter."
        assert result.clause_comparisons[0].details_doc2 == "60 days"
        assert result.risk_profile_differences[0].risk_in_doc2 == "High"
        assert result.to_dict()["clauseComparisons"][0]["clauseTitle"] == "Termination"

    def test_both_documents_in_prompt(self) -> None:
        gateway = _gateway(json.dumps(COMPARISON_REPLY))
        gateway.compare("FIRST-DOC", "SECOND-DOC")
        prompt = gateway.client.chat.completions.calls[0]["messages"][1]["content"]
        assert "FIRST-DOC" in prompt and "SECOND-DOC" in prompt

    def test_invalid_reply(self) -> None:
        with pytest.raises(ComparisonError, match="valid comparison"):
            _gateway('{"overallSummary": "only this"}').compare("a", "b")


class TestSuggestTitle:
    def test_strips_quotes(self) -> None:
        assert _gateway('"Office Lease Agreement"').suggest_title("text") == "Office Lease Agreement"

    def test_empty_text(self) -> None:
        gateway = _gateway()
        assert gateway.suggest_title("   ") == ""
        assert gateway.client.chat.completions.calls == []

    def test_failure_falls_back(self) -> None:
        assert _gateway(RuntimeError("down")).suggest_title("text") == FALLBACK_TITLE

    def test_blank_reply_falls_back(self) -> None:
        assert _gateway("  ").suggest_title("text") == FALLBACK_TITLE


class TestDemoGateway:
    def test_key_dates_relative_to_today(self) -> None:
        result = DemoGateway(today=date(2025, 3, 1)).analyze("text")
        assert [d.date for d in result.key_dates] == ["2025-03-31", "2025-05-30"]

    def test_empty_text_fails(self) -> None:
        with pytest.raises(AnalysisError):
            DemoGateway().analyze(" ")

    def test_title_is_first_line(self) -> None:
        assert DemoGateway().suggest_title("\nRESIDENTIAL LEASE\nbody") == "RESIDENTIAL LEASE"


class TestBuildGateway:
    def test_demo_without_key(self, tmp_path) -> None:
        settings = Settings(data_dir=tmp_path, openai_api_key=None, anthropic_api_key=None)
        assert isinstance(build_gateway(settings), DemoGateway)

    def test_missing_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            LLMGateway(model="gpt-4o")

    def test_anthropic_model_needs_anthropic_key(self) -> None:
        with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
            LLMGateway(model="claude-3-5-sonnet-latest")
