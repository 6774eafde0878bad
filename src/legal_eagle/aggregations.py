"""Dashboard statistics derived from the document collection.

All functions here are pure: they read the documents they are given and
return new values, so calling them on every render is safe.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .models import Document, DocumentStatus, RiskSeverity

CLAUSE_FREQUENCY_LIMIT = 7
COUNTERPARTY_LIMIT = 5


def overall_risk(doc: Document) -> RiskSeverity:
    """Highest severity among the document's risks (Low when there are none)."""
    severities = {risk.severity for risk in doc.analysis.potential_risks}
    if RiskSeverity.HIGH in severities:
        return RiskSeverity.HIGH
    if RiskSeverity.MEDIUM in severities:
        return RiskSeverity.MEDIUM
    return RiskSeverity.LOW


@dataclass(frozen=True)
class RiskRollup:
    """Number of documents per overall risk level."""

    high: int = 0
    medium: int = 0
    low: int = 0
    total: int = 0

    def count(self, severity: RiskSeverity) -> int:
        return {
            RiskSeverity.HIGH: self.high,
            RiskSeverity.MEDIUM: self.medium,
            RiskSeverity.LOW: self.low,
        }[severity]

    def to_dict(self) -> dict:
        return {"High": self.high, "Medium": self.medium, "Low": self.low, "total": self.total}


def risk_rollup(documents: Sequence[Document]) -> RiskRollup:
    counts = Counter(overall_risk(doc) for doc in documents)
    return RiskRollup(
        high=counts[RiskSeverity.HIGH],
        medium=counts[RiskSeverity.MEDIUM],
        low=counts[RiskSeverity.LOW],
        total=len(documents),
    )


@dataclass(frozen=True)
class StatusDistribution:
    """Document count for every status, zero-filled, in status order."""

    counts: dict[DocumentStatus, int] = field(default_factory=dict)
    total: int = 0

    def share(self, status: DocumentStatus) -> float:
        """Fraction of documents with ``status`` (0.0 for an empty collection)."""
        return self.counts.get(status, 0) / self.total if self.total else 0.0

    def to_dict(self) -> dict:
        data = {status.value: count for status, count in self.counts.items()}
        data["total"] = self.total
        return data


def status_distribution(documents: Sequence[Document]) -> StatusDistribution:
    counts = {status: 0 for status in DocumentStatus}
    for doc in documents:
        counts[doc.status] += 1
    return StatusDistribution(counts=counts, total=len(documents))


def _top(values: Iterable[str], limit: int) -> list[tuple[str, int]]:
    # most_common keeps first-encountered order among equal counts
    return Counter(values).most_common(limit)


def clause_frequency(
    documents: Sequence[Document], limit: int = CLAUSE_FREQUENCY_LIMIT
) -> list[tuple[str, int]]:
    """Most frequent clause titles across all documents."""
    return _top(
        (clause.title.strip() for doc in documents for clause in doc.analysis.key_clauses),
        limit,
    )


def counterparty_frequency(
    documents: Sequence[Document], limit: int = COUNTERPARTY_LIMIT
) -> list[tuple[str, int]]:
    """Most frequent counterparties; blank names are ignored."""
    names = (name.strip() for doc in documents for name in doc.analysis.counterparties)
    return _top((name for name in names if name), limit)


@dataclass(frozen=True)
class DashboardSummary:
    risk: RiskRollup
    status: StatusDistribution
    clauses: list[tuple[str, int]]
    counterparties: list[tuple[str, int]]

    def to_dict(self) -> dict:
        return {
            "risk": self.risk.to_dict(),
            "status": self.status.to_dict(),
            "clauses": [{"title": t, "count": c} for t, c in self.clauses],
            "counterparties": [{"name": n, "count": c} for n, c in self.counterparties],
        }


def aggregate(documents: Sequence[Document]) -> DashboardSummary:
    """Compute every dashboard statistic for ``documents``."""
    return DashboardSummary(
        risk=risk_rollup(documents),
        status=status_distribution(documents),
        clauses=clause_frequency(documents),
        counterparties=counterparty_frequency(documents),
    )
