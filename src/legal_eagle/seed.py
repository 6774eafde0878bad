"""First-run sample data.

Dates are generated relative to the day the dashboard starts so the
deadlines widget always has something upcoming to show.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from .models import (
    ActivityDetails,
    ActivityEvent,
    ActivityType,
    AnalysisResult,
    Document,
    DocumentStatus,
    KeyClause,
    KeyDate,
    ManualDeadline,
    PotentialRisk,
    RiskSeverity,
)

SAMPLE_DOCUMENT_NAME = "Sample Lease Agreement"

SAMPLE_LEASE = """
Lease Agreement

This Lease Agreement ("Agreement") is made and entered into this 1st day of January, 2025, by and between Landlord, John Smith ("Landlord"), and Tenant, Jane Doe ("Tenant").

1. Property. Landlord agrees to lease to Tenant the property located at 123 Main Street, Anytown, USA ("Premises").

2. Term. The term of this lease shall be for a period of twelve (12) months, commencing on February 1, 2025, and ending on January 31, 2026. This lease shall automatically renew for successive twelve (12) month periods unless either party gives written notice of termination no less than sixty (60) days prior to the end of the current term.

3. Rent. Tenant shall pay Landlord a monthly rent of $1,500.00, due on the first day of each month. A late fee of $100.00 shall be applied if rent is not received by the fifth day of the month.

4. Security Deposit. Upon execution of this Agreement, Tenant shall deposit with Landlord the sum of $2,000.00 as a security deposit. Landlord may use the security deposit to cover any unpaid rent, damages to the Premises beyond normal wear and tear, or other breaches of this Agreement. The deposit will be returned within 30 days of lease termination, less any deductions.

5. Use of Premises. The Premises shall be used and occupied by Tenant exclusively as a private single-family residence. Tenant shall not make any alterations or improvements to the Premises without the prior written consent of the Landlord.

6. Subletting. Tenant shall not assign this Agreement or sublet any portion of the Premises without the prior written consent of the Landlord, which consent shall not be unreasonably withheld.

7. Default. If Tenant fails to comply with any of the material provisions of this Agreement, Landlord may provide written notice to Tenant of the breach and, if the breach is not cured within fifteen (15) days, Landlord may terminate this Agreement.
"""


def _future(today: date, days: int) -> str:
    return (today + timedelta(days=days)).isoformat()


def _past(now: datetime, days: int) -> str:
    return (now - timedelta(days=days)).isoformat()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def seed_documents(now: datetime | None = None) -> list[Document]:
    now = now or _now()
    today = now.date()
    return [
        Document(
            id="doc-1",
            name="Innovate Corp Services Agreement",
            created_at=_past(now, 5),
            original_text="Services agreement...",
            status=DocumentStatus.ACTIVE,
            last_modified_by="Alex Johnson",
            analysis=AnalysisResult(
                summary=(
                    "This is a standard services agreement where your company provides "
                    "marketing services to Innovate Corp. Key terms include a 12-month "
                    "duration, net-30 payment, and a strict confidentiality clause."
                ),
                key_clauses=[
                    KeyClause(
                        "Term of Agreement",
                        "The agreement is valid for one year and renews automatically "
                        "unless a 60-day notice is given.",
                        "...shall continue for a period of twelve (12) months...",
                    ),
                    KeyClause(
                        "Payment Terms",
                        "Invoices are due within 30 days of receipt. Late payments incur "
                        "a 5% penalty.",
                        "...payment due within thirty (30) days of the invoice date...",
                    ),
                ],
                potential_risks=[
                    PotentialRisk(
                        "Automatic Renewal",
                        "The contract renews automatically, which could lock you into "
                        "another year if termination notice is missed.",
                        RiskSeverity.HIGH,
                    ),
                    PotentialRisk(
                        "Unlimited Liability",
                        "The agreement does not cap liability, exposing your company to "
                        "potentially high financial risk.",
                        RiskSeverity.HIGH,
                    ),
                ],
                key_dates=[
                    KeyDate(
                        "Contract End Date",
                        _future(today, 360),
                        "...ending on the one-year anniversary of the Effective Date.",
                    ),
                    KeyDate(
                        "Renewal Notice Deadline",
                        _future(today, 300),
                        "...notice of termination no less than sixty (60) days prior...",
                    ),
                ],
                counterparties=["Innovate Corp.", "Your Company Inc."],
            ),
        ),
        Document(
            id="doc-2",
            name="Project Phoenix NDA",
            created_at=_past(now, 12),
            original_text="Non-Disclosure Agreement...",
            status=DocumentStatus.AWAITING_SIGNATURE,
            last_modified_by="Maria Garcia",
            analysis=AnalysisResult(
                summary=(
                    'A mutual non-disclosure agreement for discussions about "Project '
                    'Phoenix". It covers confidential information shared between both '
                    "parties for a period of 3 years."
                ),
                key_clauses=[
                    KeyClause(
                        "Definition of Confidential Information",
                        "Defines what is considered confidential, including technical and "
                        "business information.",
                        '..."Confidential Information" shall include all data, materials...',
                    ),
                ],
                potential_risks=[
                    PotentialRisk(
                        "Vague Definition",
                        "The definition of confidential information is broad, which could "
                        "lead to disputes over what is covered.",
                        RiskSeverity.MEDIUM,
                    ),
                ],
                key_dates=[
                    KeyDate(
                        "NDA Expiration",
                        _future(today, 1083),
                        "...obligations of confidentiality shall expire three (3) years "
                        "from the Effective Date...",
                    ),
                ],
                counterparties=["Phoenix Systems", "Your Company Inc."],
            ),
        ),
        Document(
            id="doc-3",
            name="Downtown Office Lease",
            created_at=_past(now, 25),
            original_text="Commercial Lease Agreement...",
            status=DocumentStatus.IN_REVIEW,
            last_modified_by="Chen Wei",
            analysis=AnalysisResult(
                summary=(
                    "A 5-year commercial lease for an office space at 123 Business Rd. "
                    "Includes terms on rent, security deposit, and maintenance "
                    "responsibilities."
                ),
                key_clauses=[
                    KeyClause(
                        "Lease Term",
                        "The lease is for a fixed 5-year period.",
                        "...a term of five (5) years, commencing on...",
                    ),
                    KeyClause(
                        "Security Deposit",
                        "A security deposit equal to two months' rent is required.",
                        "...security deposit in the amount of two (2) months' rent...",
                    ),
                ],
                potential_risks=[
                    PotentialRisk(
                        "Rent Escalation Clause",
                        "Rent increases by 4% annually, which is higher than the market "
                        "average.",
                        RiskSeverity.MEDIUM,
                    ),
                ],
                key_dates=[
                    KeyDate(
                        "Lease Start Date",
                        _future(today, 5),
                        "...commencing on the first day of next month...",
                    ),
                ],
                counterparties=["Metropolis Properties LLC", "Your Company Inc."],
            ),
        ),
        Document(
            id="doc-4",
            name="Freelance Designer Contract",
            created_at=_past(now, 2),
            original_text="Independent Contractor Agreement...",
            status=DocumentStatus.DRAFT,
            last_modified_by="David Smith",
            analysis=AnalysisResult(
                summary=(
                    "A straightforward contract for hiring a freelance designer for a "
                    "website redesign project. Payment is structured in two milestones."
                ),
                key_clauses=[
                    KeyClause(
                        "Intellectual Property",
                        "Upon final payment, all IP for the created work transfers to "
                        "your company.",
                        "...all rights, title, and interest in the Work Product shall be "
                        "assigned to the Client...",
                    ),
                ],
                potential_risks=[
                    PotentialRisk(
                        "No Rush Fee Clause",
                        "The contract does not specify fees for expedited work, which "
                        "could lead to scope creep.",
                        RiskSeverity.LOW,
                    ),
                ],
                key_dates=[
                    KeyDate(
                        "Project Delivery Deadline",
                        _future(today, 45),
                        "...final delivery of all assets no later than 45 days...",
                    ),
                ],
                counterparties=["Jane Artist", "Your Company Inc."],
            ),
        ),
        Document(
            id="doc-5",
            name="Old Partnership Agreement",
            created_at=_past(now, 1200),
            original_text="Partnership agreement from a previous venture...",
            status=DocumentStatus.EXPIRED,
            last_modified_by="Fatima Al-Sayed",
            analysis=AnalysisResult(
                summary=(
                    "An expired partnership agreement from 2021. No active obligations "
                    "remain."
                ),
                counterparties=["Legacy Partners"],
            ),
        ),
    ]


def seed_deadlines(today: date | None = None) -> list[ManualDeadline]:
    today = today or date.today()
    return [
        ManualDeadline("md-1", "Quarterly Tax Filing", _future(today, 15)),
        ManualDeadline("md-2", "Submit Final Project Deliverables", _future(today, 45), "doc-4"),
        ManualDeadline("md-3", "Annual Insurance Renewal", _future(today, 75)),
    ]


def seed_activity(now: datetime | None = None) -> list[ActivityEvent]:
    now = now or _now()
    return [
        ActivityEvent(
            "act-1",
            ActivityType.DOCUMENT_CREATED,
            _past(now, 2),
            "David Smith",
            ActivityDetails("Freelance Designer Contract", doc_id="doc-4"),
        ),
        ActivityEvent(
            "act-2",
            ActivityType.STATUS_UPDATED,
            _past(now, 4),
            "Alex Johnson",
            ActivityDetails(
                "Innovate Corp Services Agreement",
                doc_id="doc-1",
                old_status=DocumentStatus.IN_REVIEW,
                new_status=DocumentStatus.ACTIVE,
            ),
        ),
        ActivityEvent(
            "act-3",
            ActivityType.DOCUMENT_CREATED,
            _past(now, 5),
            "Alex Johnson",
            ActivityDetails("Innovate Corp Services Agreement", doc_id="doc-1"),
        ),
        ActivityEvent(
            "act-4",
            ActivityType.STATUS_UPDATED,
            _past(now, 10),
            "Maria Garcia",
            ActivityDetails(
                "Project Phoenix NDA",
                doc_id="doc-2",
                old_status=DocumentStatus.DRAFT,
                new_status=DocumentStatus.AWAITING_SIGNATURE,
            ),
        ),
        ActivityEvent(
            "act-5",
            ActivityType.DOCUMENT_DELETED,
            _past(now, 11),
            "Chen Wei",
            ActivityDetails("Obsolete Marketing Proposal"),
        ),
    ]
