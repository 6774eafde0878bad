"""Activity feed: a bounded, newest-first log of document lifecycle events.

Events triggered by the current user are attributed to them.  Other events
(used when simulating a shared workspace) are attributed by an actor
selector, which tests replace with a deterministic one.
"""

from __future__ import annotations

import random
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from .models import ActivityDetails, ActivityEvent, ActivityType, parse_timestamp

DEFAULT_LIMIT = 50
FEED_DISPLAY_LIMIT = 10


class ActorSelector(ABC):
    """Chooses who a non-current-user event is attributed to."""

    @abstractmethod
    def choose(self) -> str: ...


class FixedActorSelector(ActorSelector):
    """Always attributes events to the same actor."""

    def __init__(self, actor: str) -> None:
        self.actor = actor

    def choose(self) -> str:
        return self.actor


class RandomActorSelector(ActorSelector):
    """Picks uniformly from a roster, never returning the current user.

    Args:
        roster: Simulated user names.
        current_user: Name excluded from the choice.
        rng: Random source (seed it for reproducible picks).
    """

    def __init__(
        self,
        roster: Sequence[str],
        current_user: str,
        rng: random.Random | None = None,
    ) -> None:
        self.candidates = [name for name in roster if name != current_user]
        if not self.candidates:
            raise ValueError("Actor roster has no users besides the current user")
        self._rng = rng or random.Random()

    def choose(self) -> str:
        return self._rng.choice(self.candidates)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class ActivityLog:
    """Newest-first event list capped at ``limit`` entries.

    Example::

        log = ActivityLog(current_user="indudhar",
                          selector=FixedActorSelector("Chen Wei"))
        log.append(ActivityType.DOCUMENT_CREATED,
                   ActivityDetails(document_name="NDA", doc_id="doc-9"),
                   is_current_user=True)
    """

    def __init__(
        self,
        current_user: str,
        selector: ActorSelector,
        events: Sequence[ActivityEvent] = (),
        limit: int = DEFAULT_LIMIT,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self.current_user = current_user
        self.selector = selector
        self.limit = limit
        self._clock = clock
        self._id_factory = id_factory
        self._events: list[ActivityEvent] = list(events)[:limit]

    @property
    def events(self) -> list[ActivityEvent]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def append(
        self,
        type: ActivityType,
        details: ActivityDetails,
        is_current_user: bool = False,
    ) -> ActivityEvent:
        event = ActivityEvent(
            id=self._id_factory(),
            type=type,
            timestamp=self._clock().isoformat(),
            user=self.current_user if is_current_user else self.selector.choose(),
            details=details,
        )
        self._events = [event, *self._events][: self.limit]
        return event

    def latest(self, count: int = FEED_DISPLAY_LIMIT) -> list[ActivityEvent]:
        return self._events[:count]


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------


def time_ago(timestamp: str, now: datetime | None = None) -> str:
    """Render a timestamp relative to ``now`` ("just now", "5m ago", "3d ago")."""
    then = parse_timestamp(timestamp)
    if now is None:
        now = datetime.now(then.tzinfo) if then.tzinfo else datetime.now()
    seconds = round((now - then).total_seconds())
    minutes = round(seconds / 60)
    hours = round(minutes / 60)
    days = round(hours / 24)

    if seconds < 60:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    return f"{days}d ago"


def describe_event(event: ActivityEvent) -> str:
    """One-line human description of an activity event."""
    details = event.details
    if event.type == ActivityType.DOCUMENT_CREATED:
        return f"{event.user} analyzed {details.document_name}."
    if event.type == ActivityType.STATUS_UPDATED:
        old = details.old_status.value if details.old_status else "unknown"
        new = details.new_status.value if details.new_status else "unknown"
        return f"{event.user} changed status of {details.document_name} from {old} to {new}."
    if event.type == ActivityType.DOCUMENT_DELETED:
        return f"{event.user} deleted {details.document_name}."
    return "Unknown action."
