"""Response schemas for the AI gateway.

The model's JSON is validated against these before anything reaches the
document models, so aggregation code never sees unchecked payloads.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import (
    AnalysisResult,
    ClauseComparison,
    ComparisonResult,
    KeyClause,
    KeyDate,
    PotentialRisk,
    RiskComparison,
    RiskSeverity,
    parse_iso_date,
)

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


class KeyClausePayload(_Payload):
    title: str = Field(alias="clauseTitle")
    explanation: str
    snippet: str = Field(alias="originalTextSnippet")


class PotentialRiskPayload(_Payload):
    title: str = Field(alias="riskTitle")
    description: str = Field(alias="riskDescription")
    severity: Literal["High", "Medium", "Low"]

    @field_validator("severity", mode="before")
    @classmethod
    def _capitalize(cls, value):
        return value.strip().capitalize() if isinstance(value, str) else value


class KeyDatePayload(_Payload):
    event_name: str = Field(alias="eventName")
    date: str
    snippet: str = Field(alias="originalTextSnippet")


class AnalysisPayload(_Payload):
    summary: str
    key_clauses: list[KeyClausePayload] = Field(alias="keyClauses")
    potential_risks: list[PotentialRiskPayload] = Field(alias="potentialRisks")
    key_dates: list[KeyDatePayload] = Field(alias="keyDates")
    counterparties: list[str] = Field(default_factory=list)

    @field_validator("counterparties", mode="before")
    @classmethod
    def _default_counterparties(cls, value):
        return [] if value is None else value

    def to_result(self) -> AnalysisResult:
        key_dates = []
        for item in self.key_dates:
            try:
                parse_iso_date(item.date)
            except ValueError:
                logger.warning("Dropping key date %r with non ISO date %r", item.event_name, item.date)
                continue
            key_dates.append(KeyDate(item.event_name, item.date.strip(), item.snippet))

        return AnalysisResult(
            summary=self.summary,
            key_clauses=[KeyClause(c.title, c.explanation, c.snippet) for c in self.key_clauses],
            potential_risks=[
                PotentialRisk(r.title, r.description, RiskSeverity(r.severity))
                for r in self.potential_risks
            ],
            key_dates=key_dates,
            counterparties=list(self.counterparties),
        )


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


class ClauseComparisonPayload(_Payload):
    clause_title: str = Field(alias="clauseTitle")
    summary_of_difference: str = Field(alias="summaryOfDifference")
    details_doc1: str = Field(alias="detailsDoc1")
    details_doc2: str = Field(alias="detailsDoc2")


class RiskComparisonPayload(_Payload):
    risk_title: str = Field(alias="riskTitle")
    summary_of_difference: str = Field(alias="summaryOfDifference")
    risk_in_doc1: str = Field(alias="riskInDoc1")
    risk_in_doc2: str = Field(alias="riskInDoc2")


class ComparisonPayload(_Payload):
    overall_summary: str = Field(alias="overallSummary")
    clause_comparisons: list[ClauseComparisonPayload] = Field(alias="clauseComparisons")
    risk_profile_differences: list[RiskComparisonPayload] = Field(alias="riskProfileDifferences")

    def to_result(self) -> ComparisonResult:
        return ComparisonResult(
            overall_summary=self.overall_summary,
            clause_comparisons=[
                ClauseComparison(
                    c.clause_title, c.summary_of_difference, c.details_doc1, c.details_doc2
                )
                for c in self.clause_comparisons
            ],
            risk_profile_differences=[
                RiskComparison(r.risk_title, r.summary_of_difference, r.risk_in_doc1, r.risk_in_doc2)
                for r in self.risk_profile_differences
            ],
        )
