"""Data models for the legal document dashboard.

Every entity persisted by the dashboard is a dataclass with a ``to_dict()``
producing the stored JSON layout (camelCase keys) and a ``from_dict()``
classmethod reading it back.  ``from_dict()`` also accepts the key names
used by earlier stored payloads so old data keeps loading.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class RiskSeverity(str, Enum):
    """Severity of a single risk flagged by the AI model."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        return {RiskSeverity.HIGH: 2, RiskSeverity.MEDIUM: 1, RiskSeverity.LOW: 0}[self]


class DocumentStatus(str, Enum):
    """Lifecycle status of a stored document, in display order."""

    DRAFT = "Draft"
    IN_REVIEW = "In Review"
    AWAITING_SIGNATURE = "Awaiting Signature"
    ACTIVE = "Active"
    EXPIRED = "Expired"


class ActivityType(str, Enum):
    """Kinds of events recorded in the activity feed."""

    DOCUMENT_CREATED = "DOCUMENT_CREATED"
    STATUS_UPDATED = "STATUS_UPDATED"
    DOCUMENT_DELETED = "DOCUMENT_DELETED"


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string, raising ``ValueError`` otherwise."""
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _first(data: dict, *keys: str, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


@dataclass
class KeyClause:
    """An important clause explained in plain English."""

    title: str
    explanation: str
    source_snippet: str = ""

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "explanation": self.explanation,
            "sourceSnippet": self.source_snippet,
        }

    @classmethod
    def from_dict(cls, data: dict) -> KeyClause:
        return cls(
            title=_first(data, "title", "clauseTitle", default=""),
            explanation=_first(data, "explanation", default=""),
            source_snippet=_first(data, "sourceSnippet", "originalTextSnippet", default=""),
        )


@dataclass
class PotentialRisk:
    """A risk or unfavorable term found in a document."""

    title: str
    description: str
    severity: RiskSeverity = RiskSeverity.LOW

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "severity": self.severity.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PotentialRisk:
        return cls(
            title=_first(data, "title", "riskTitle", default=""),
            description=_first(data, "description", "riskDescription", default=""),
            severity=RiskSeverity(_first(data, "severity", default=RiskSeverity.LOW.value)),
        )


@dataclass
class KeyDate:
    """A dated event (deadline, renewal, expiry) extracted from a document."""

    event_name: str
    date: str
    source_snippet: str = ""

    def to_dict(self) -> dict:
        return {
            "eventName": self.event_name,
            "date": self.date,
            "sourceSnippet": self.source_snippet,
        }

    @classmethod
    def from_dict(cls, data: dict) -> KeyDate:
        return cls(
            event_name=_first(data, "eventName", default=""),
            date=_first(data, "date", default=""),
            source_snippet=_first(data, "sourceSnippet", "originalTextSnippet", default=""),
        )


@dataclass
class AnalysisResult:
    """Structured AI analysis of a single document."""

    summary: str = ""
    key_clauses: list[KeyClause] = field(default_factory=list)
    potential_risks: list[PotentialRisk] = field(default_factory=list)
    key_dates: list[KeyDate] = field(default_factory=list)
    counterparties: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "keyClauses": [c.to_dict() for c in self.key_clauses],
            "potentialRisks": [r.to_dict() for r in self.potential_risks],
            "keyDates": [d.to_dict() for d in self.key_dates],
            "counterparties": list(self.counterparties),
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> AnalysisResult:
        data = data or {}
        return cls(
            summary=data.get("summary") or "",
            key_clauses=[KeyClause.from_dict(c) for c in data.get("keyClauses") or []],
            potential_risks=[PotentialRisk.from_dict(r) for r in data.get("potentialRisks") or []],
            key_dates=[KeyDate.from_dict(d) for d in data.get("keyDates") or []],
            counterparties=[str(p) for p in data.get("counterparties") or []],
        )


# ---------------------------------------------------------------------------
# Canonical collections
# ---------------------------------------------------------------------------


@dataclass
class Document:
    """A saved, analyzed document."""

    id: str
    name: str
    created_at: str
    original_text: str
    analysis: AnalysisResult = field(default_factory=AnalysisResult)
    status: DocumentStatus = DocumentStatus.DRAFT
    last_modified_by: Optional[str] = None

    @property
    def created(self) -> datetime:
        return parse_timestamp(self.created_at)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at,
            "originalText": self.original_text,
            "analysis": self.analysis.to_dict(),
            "status": self.status.value,
            "lastModifiedBy": self.last_modified_by,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Document:
        """Raises ValueError when the creation timestamp is missing or not ISO-8601."""
        created_at = str(_first(data, "createdAt", "date", default=""))
        parse_timestamp(created_at)
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            created_at=created_at,
            original_text=data.get("originalText") or "",
            analysis=AnalysisResult.from_dict(data.get("analysis")),
            status=DocumentStatus(data.get("status") or DocumentStatus.DRAFT.value),
            last_modified_by=_first(data, "lastModifiedBy", "modifiedBy"),
        )


@dataclass
class ManualDeadline:
    """A user-entered deadline, optionally linked to a document by id.

    ``doc_id`` is only an association; the document may have been deleted.
    """

    id: str
    event_name: str
    date: str
    doc_id: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "eventName": self.event_name, "date": self.date}
        if self.doc_id:
            data["docId"] = self.doc_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> ManualDeadline:
        return cls(
            id=str(data["id"]),
            event_name=data.get("eventName") or "",
            date=data.get("date") or "",
            doc_id=data.get("docId") or None,
        )


@dataclass
class ActivityDetails:
    """Payload of an activity event."""

    document_name: str
    doc_id: Optional[str] = None
    old_status: Optional[DocumentStatus] = None
    new_status: Optional[DocumentStatus] = None

    def to_dict(self) -> dict:
        data: dict = {"documentName": self.document_name}
        if self.doc_id:
            data["docId"] = self.doc_id
        if self.old_status is not None:
            data["oldStatus"] = self.old_status.value
        if self.new_status is not None:
            data["newStatus"] = self.new_status.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> ActivityDetails:
        old_status = data.get("oldStatus")
        new_status = data.get("newStatus")
        return cls(
            document_name=data.get("documentName") or "",
            doc_id=data.get("docId") or None,
            old_status=DocumentStatus(old_status) if old_status else None,
            new_status=DocumentStatus(new_status) if new_status else None,
        )


@dataclass
class ActivityEvent:
    """One entry of the activity feed."""

    id: str
    type: ActivityType
    timestamp: str
    user: str
    details: ActivityDetails

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "timestamp": self.timestamp,
            "user": self.user,
            "details": self.details.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ActivityEvent:
        return cls(
            id=str(data["id"]),
            type=ActivityType(data["type"]),
            timestamp=data.get("timestamp") or "",
            user=_first(data, "user", "actor", default=""),
            details=ActivityDetails.from_dict(data.get("details") or {}),
        )


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


@dataclass
class ClauseComparison:
    """How one clause differs between two documents."""

    clause_title: str
    summary_of_difference: str
    details_doc1: str
    details_doc2: str

    def to_dict(self) -> dict:
        return {
            "clauseTitle": self.clause_title,
            "summaryOfDifference": self.summary_of_difference,
            "detailsDoc1": self.details_doc1,
            "detailsDoc2": self.details_doc2,
        }


@dataclass
class RiskComparison:
    """How one risk differs between two documents."""

    risk_title: str
    summary_of_difference: str
    risk_in_doc1: str
    risk_in_doc2: str

    def to_dict(self) -> dict:
        return {
            "riskTitle": self.risk_title,
            "summaryOfDifference": self.summary_of_difference,
            "riskInDoc1": self.risk_in_doc1,
            "riskInDoc2": self.risk_in_doc2,
        }


@dataclass
class ComparisonResult:
    """AI comparison of two documents."""

    overall_summary: str
    clause_comparisons: list[ClauseComparison] = field(default_factory=list)
    risk_profile_differences: list[RiskComparison] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "overallSummary": self.overall_summary,
            "clauseComparisons": [c.to_dict() for c in self.clause_comparisons],
            "riskProfileDifferences": [r.to_dict() for r in self.risk_profile_differences],
        }
