"""Legal Eagle -- AI-assisted legal document dashboard."""

__version__ = "0.1.0"

from .activity import ActivityLog, FixedActorSelector, RandomActorSelector
from .aggregations import (
    DashboardSummary,
    RiskRollup,
    StatusDistribution,
    aggregate,
    clause_frequency,
    counterparty_frequency,
    overall_risk,
    risk_rollup,
    status_distribution,
)
from .controller import AppState, DashboardController
from .deadlines import CalendarEvent, DeadlineSelection, calendar_days, merge_deadlines, upcoming
from .errors import (
    AnalysisError,
    ComparisonError,
    GatewayError,
    LegalEagleError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .gateway import AnalysisGateway, DemoGateway, LLMGateway, build_gateway
from .history import HistoryTable, SortDirection, SortKey
from .models import (
    ActivityEvent,
    ActivityType,
    AnalysisResult,
    ComparisonResult,
    Document,
    DocumentStatus,
    ManualDeadline,
    RiskSeverity,
)
from .storage import JsonFileStore, MemoryStore

__all__ = [
    # State
    "AppState",
    "DashboardController",
    "JsonFileStore",
    "MemoryStore",
    # Models
    "ActivityEvent",
    "ActivityType",
    "AnalysisResult",
    "ComparisonResult",
    "Document",
    "DocumentStatus",
    "ManualDeadline",
    "RiskSeverity",
    # Activity
    "ActivityLog",
    "FixedActorSelector",
    "RandomActorSelector",
    # Deadlines
    "CalendarEvent",
    "DeadlineSelection",
    "calendar_days",
    "merge_deadlines",
    "upcoming",
    # Aggregations
    "DashboardSummary",
    "RiskRollup",
    "StatusDistribution",
    "aggregate",
    "clause_frequency",
    "counterparty_frequency",
    "overall_risk",
    "risk_rollup",
    "status_distribution",
    # History
    "HistoryTable",
    "SortDirection",
    "SortKey",
    # Gateway
    "AnalysisGateway",
    "DemoGateway",
    "LLMGateway",
    "build_gateway",
    # Errors
    "LegalEagleError",
    "PersistenceError",
    "GatewayError",
    "AnalysisError",
    "ComparisonError",
    "ValidationError",
    "NotFoundError",
]
