"""Dashboard controller: the single owner of the application state.

All four canonical collections live in ``AppState``.  Views read them; only
the controller's commands change them, and every command saves the
collection it changed right after changing it in memory.

Example::

    controller = DashboardController(JsonFileStore(".legal_eagle"))
    controller.load()
    analysis = controller.analyze_text(text, "Office Lease")
    doc = controller.save_document(text, analysis, "Office Lease")
    controller.update_document_status(doc.id, DocumentStatus.IN_REVIEW)
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from .activity import ActivityLog, ActorSelector, RandomActorSelector
from .config import Settings
from .config import settings as default_settings
from .deadlines import CalendarEvent, merge_deadlines, upcoming
from .errors import NotFoundError, ValidationError
from .gateway import AnalysisGateway, DemoGateway
from .layout import DEFAULT_LAYOUT, normalize_layout
from .layout import add_widget as _add_widget
from .layout import remove_widget as _remove_widget
from .models import (
    ActivityDetails,
    ActivityEvent,
    ActivityType,
    AnalysisResult,
    ComparisonResult,
    Document,
    DocumentStatus,
    KeyDate,
    ManualDeadline,
    parse_iso_date,
)
from .seed import seed_activity, seed_deadlines, seed_documents
from .storage import (
    ACTIVITY_KEY,
    DEADLINES_KEY,
    DOCUMENTS_KEY,
    LAYOUT_KEY,
    KeyValueStore,
)

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    documents: list[Document] = field(default_factory=list)
    manual_deadlines: list[ManualDeadline] = field(default_factory=list)
    activity_feed: list[ActivityEvent] = field(default_factory=list)
    layout: list[str] = field(default_factory=lambda: list(DEFAULT_LAYOUT))


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


def _load_list(store: KeyValueStore, key: str, item_type) -> list | None:
    """Decode a stored list of ``item_type``; ``None`` when absent or unreadable."""
    raw = store.load(key)
    if raw is None:
        return None
    if not isinstance(raw, list):
        logger.warning("Stored %r is not a list; ignoring it", key)
        return None
    try:
        return [item_type.from_dict(item) for item in raw]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("Stored %r is malformed (%s); ignoring it", key, exc)
        return None


class DashboardController:
    """Runs every state-changing command of the dashboard.

    Args:
        store: Persistence backend for the four collections.
        settings: Current user, roster and limits.
        gateway: AI collaborator (demo gateway if omitted).
        selector: Attribution strategy for events not made by the current user.
        clock: Returns "now" as an aware datetime.
        id_factory: Produces new document/deadline ids.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Settings | None = None,
        gateway: AnalysisGateway | None = None,
        selector: ActorSelector | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self.store = store
        self.settings = settings or default_settings
        self.gateway = gateway or DemoGateway()
        self._clock = clock
        self._id_factory = id_factory
        self.selector = selector or RandomActorSelector(
            self.settings.simulated_users, self.settings.current_user
        )
        self.state = AppState()
        self.activity = self._activity_log([])

    def _activity_log(self, events: list[ActivityEvent]) -> ActivityLog:
        return ActivityLog(
            current_user=self.settings.current_user,
            selector=self.selector,
            events=events,
            limit=self.settings.activity_limit,
            clock=self._clock,
            id_factory=self._id_factory,
        )

    @property
    def current_user(self) -> str:
        return self.settings.current_user

    def today(self) -> date:
        return self._clock().astimezone().date()

    # ------------------------------------------------------------------
    # Loading and saving
    # ------------------------------------------------------------------

    def load(self) -> AppState:
        """Load all collections, seeding sample data on first run."""
        documents = _load_list(self.store, DOCUMENTS_KEY, Document)
        seeded = documents is None
        if seeded:
            logger.info("No stored documents; loading sample data")
            now = self._clock()
            documents = seed_documents(now)
            deadlines = seed_deadlines(now.astimezone().date())
            feed = seed_activity(now)
        else:
            deadlines = _load_list(self.store, DEADLINES_KEY, ManualDeadline) or []
            feed = _load_list(self.store, ACTIVITY_KEY, ActivityEvent) or []

        raw_layout = self.store.load(LAYOUT_KEY)
        if isinstance(raw_layout, list):
            layout = normalize_layout(raw_layout)
        else:
            if raw_layout is not None:
                logger.warning("Stored layout is not a list; using the default layout")
            layout = list(DEFAULT_LAYOUT)

        self.state = AppState(documents, deadlines, [], layout)
        self.activity = self._activity_log(feed)
        self.state.activity_feed = self.activity.events
        if seeded:
            self._save_documents()
            self._save_deadlines()
            self._save_activity()
        return self.state

    def save_all(self) -> None:
        self._save_documents()
        self._save_deadlines()
        self._save_activity()
        self._save_layout()

    def _save_documents(self) -> None:
        self.store.save(DOCUMENTS_KEY, [d.to_dict() for d in self.state.documents])

    def _save_deadlines(self) -> None:
        self.store.save(DEADLINES_KEY, [d.to_dict() for d in self.state.manual_deadlines])

    def _save_activity(self) -> None:
        self.store.save(ACTIVITY_KEY, [e.to_dict() for e in self.state.activity_feed])

    def _save_layout(self) -> None:
        self.store.save(LAYOUT_KEY, list(self.state.layout))

    def _log(self, type: ActivityType, details: ActivityDetails, is_current_user: bool = True) -> None:
        self.activity.append(type, details, is_current_user)
        self.state.activity_feed = self.activity.events
        self._save_activity()

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def find_document(self, doc_id: str | None) -> Document | None:
        if not doc_id:
            return None
        return next((d for d in self.state.documents if d.id == doc_id), None)

    def analyze_text(self, text: str, name: str) -> AnalysisResult:
        """Send ``text`` to the gateway. Raises ValidationError or AnalysisError."""
        if not text.strip():
            raise ValidationError("Please enter some legal text to analyze.")
        if not name.strip():
            raise ValidationError("Please provide a name for the document.")
        return self.gateway.analyze(text)

    def suggest_title(self, text: str) -> str:
        if not text.strip():
            return ""
        return self.gateway.suggest_title(text)

    def save_document(self, text: str, analysis: AnalysisResult | None, name: str) -> Document:
        if analysis is None or not name.strip() or not text.strip():
            raise ValidationError("Cannot save. Analysis is not complete or name/text is missing.")
        doc = Document(
            id=self._id_factory(),
            name=name.strip(),
            created_at=self._clock().isoformat(),
            original_text=text,
            analysis=analysis,
            status=DocumentStatus.DRAFT,
            last_modified_by=self.current_user,
        )
        self.state.documents = [doc, *self.state.documents]
        self._save_documents()
        self._log(ActivityType.DOCUMENT_CREATED, ActivityDetails(doc.name, doc_id=doc.id))
        return doc

    def delete_document(self, doc_id: str) -> Document | None:
        """Remove a document. Manual deadlines pointing at it are left as they are."""
        doc = self.find_document(doc_id)
        if doc is None:
            logger.info("Delete requested for unknown document %s", doc_id)
            return None
        self.state.documents = [d for d in self.state.documents if d.id != doc_id]
        self._save_documents()
        self._log(ActivityType.DOCUMENT_DELETED, ActivityDetails(doc.name))
        return doc

    def update_document_status(self, doc_id: str, status: DocumentStatus) -> Document:
        doc = self.find_document(doc_id)
        if doc is None:
            raise NotFoundError("Document", doc_id)
        old_status = doc.status
        doc.status = status
        doc.last_modified_by = self.current_user
        self._save_documents()
        if old_status != status:
            self._log(
                ActivityType.STATUS_UPDATED,
                ActivityDetails(doc.name, doc_id=doc.id, old_status=old_status, new_status=status),
            )
        return doc

    def compare_documents(self, doc_id_a: str, doc_id_b: str) -> tuple[Document, Document, ComparisonResult]:
        """Compare two stored documents, looked up by id at call time."""
        first, second = self.find_document(doc_id_a), self.find_document(doc_id_b)
        if first is None:
            raise NotFoundError("Document", doc_id_a)
        if second is None:
            raise NotFoundError("Document", doc_id_b)
        return first, second, self.gateway.compare(first.original_text, second.original_text)

    # ------------------------------------------------------------------
    # Manual deadlines
    # ------------------------------------------------------------------

    @staticmethod
    def _check_deadline(event_name: str, day: str) -> None:
        if not event_name.strip():
            raise ValidationError("Please provide a name for the deadline.")
        try:
            parse_iso_date(day)
        except (ValueError, AttributeError) as exc:
            raise ValidationError(f"Deadline date must be YYYY-MM-DD, got {day!r}.") from exc

    def add_manual_deadline(self, event_name: str, day: str, doc_id: str | None = None) -> ManualDeadline:
        self._check_deadline(event_name, day)
        deadline = ManualDeadline(self._id_factory(), event_name.strip(), day.strip(), doc_id or None)
        self.state.manual_deadlines = [*self.state.manual_deadlines, deadline]
        self._save_deadlines()
        return deadline

    def update_manual_deadline(self, deadline: ManualDeadline) -> ManualDeadline:
        """Replace the stored deadline with the same id."""
        if not any(d.id == deadline.id for d in self.state.manual_deadlines):
            raise NotFoundError("Deadline", deadline.id)
        self._check_deadline(deadline.event_name, deadline.date)
        self.state.manual_deadlines = [
            deadline if d.id == deadline.id else d for d in self.state.manual_deadlines
        ]
        self._save_deadlines()
        return deadline

    def delete_manual_deadline(self, deadline_id: str) -> None:
        if not any(d.id == deadline_id for d in self.state.manual_deadlines):
            raise NotFoundError("Deadline", deadline_id)
        self.state.manual_deadlines = [d for d in self.state.manual_deadlines if d.id != deadline_id]
        self._save_deadlines()

    def is_key_date_tracked(self, doc_id: str, key_date: KeyDate) -> bool:
        return any(
            d.doc_id == doc_id and d.date == key_date.date and d.event_name == key_date.event_name
            for d in self.state.manual_deadlines
        )

    def track_key_date(self, doc_id: str, key_date: KeyDate) -> ManualDeadline | None:
        """Copy a document's key date into the manual deadlines, once."""
        if self.is_key_date_tracked(doc_id, key_date):
            return None
        return self.add_manual_deadline(key_date.event_name, key_date.date, doc_id)

    def calendar_events(self) -> list[CalendarEvent]:
        return merge_deadlines(self.state.documents, self.state.manual_deadlines)

    def upcoming_events(self) -> list[CalendarEvent]:
        return upcoming(self.calendar_events(), self.today())

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def add_widget(self, widget_id: str) -> list[str]:
        self.state.layout = _add_widget(self.state.layout, widget_id)
        self._save_layout()
        return self.state.layout

    def remove_widget(self, widget_id: str) -> list[str]:
        self.state.layout = _remove_widget(self.state.layout, widget_id)
        self._save_layout()
        return self.state.layout
