"""Deadline merge engine.

Combines the key dates the AI extracted from documents with the deadlines a
user entered by hand into one chronological list of ``CalendarEvent``s, and
derives the views the deadlines widget needs from it:

* the upcoming list (events dated today or later),
* the calendar index (days of a month carrying at least one event, past or
  future),
* the date selection (one day's events, or the next few when nothing is
  selected).

Ordering is a stable sort on date: for the same day, document key dates come
first in document order, then manual deadlines in the order they were added.

Typical usage::

    events = merge_deadlines(documents, manual_deadlines)
    soon = upcoming(events, today=date.today())
    marked = calendar_days(events, 2025, 3)
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from .models import Document, ManualDeadline, parse_iso_date

logger = logging.getLogger(__name__)

DEFAULT_UPCOMING_LIMIT = 7


@dataclass(frozen=True)
class CalendarEvent:
    """A dated event shown in the deadlines widget.

    Attributes:
        id: ``"<document id>-<date>"`` for document key dates, the deadline id
            for manual deadlines.
        date: Event day.
        event_name: What happens on that day.
        is_manual: True for user-entered deadlines.
        doc_id: Linked document id, if any (may not resolve).
        doc_name: Linked document name, ``None`` when unlinked or dangling.
    """

    id: str
    date: date
    event_name: str
    is_manual: bool
    doc_id: str | None = None
    doc_name: str | None = None

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()

    @property
    def has_document(self) -> bool:
        return self.doc_name is not None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.iso_date,
            "eventName": self.event_name,
            "isManual": self.is_manual,
            "docId": self.doc_id,
            "docName": self.doc_name,
        }


def _parse(value: str, source: str) -> date | None:
    try:
        return parse_iso_date(value)
    except (ValueError, AttributeError):
        logger.warning("Skipping %s with unreadable date %r", source, value)
        return None


def merge_deadlines(
    documents: Sequence[Document],
    manual_deadlines: Sequence[ManualDeadline],
) -> list[CalendarEvent]:
    """Merge document key dates and manual deadlines, sorted by date.

    No date filter is applied here; see :func:`upcoming`.
    """
    events: list[CalendarEvent] = []
    for doc in documents:
        for key_date in doc.analysis.key_dates:
            day = _parse(key_date.date, f"key date of {doc.id}")
            if day is None:
                continue
            events.append(
                CalendarEvent(
                    id=f"{doc.id}-{key_date.date}",
                    date=day,
                    event_name=key_date.event_name,
                    is_manual=False,
                    doc_id=doc.id,
                    doc_name=doc.name,
                )
            )

    names = {doc.id: doc.name for doc in documents}
    for deadline in manual_deadlines:
        day = _parse(deadline.date, f"deadline {deadline.id}")
        if day is None:
            continue
        events.append(
            CalendarEvent(
                id=deadline.id,
                date=day,
                event_name=deadline.event_name,
                is_manual=True,
                doc_id=deadline.doc_id,
                doc_name=names.get(deadline.doc_id) if deadline.doc_id else None,
            )
        )

    events.sort(key=lambda e: e.date)
    return events


def upcoming(events: Iterable[CalendarEvent], today: date | None = None) -> list[CalendarEvent]:
    """Events dated ``today`` or later, order preserved."""
    today = today or date.today()
    return [e for e in events if e.date >= today]


def calendar_days(events: Iterable[CalendarEvent], year: int, month: int) -> set[int]:
    """Days of ``year``/``month`` that carry at least one event."""
    return {e.date.day for e in events if e.date.year == year and e.date.month == month}


def month_grid(year: int, month: int) -> list[list[int]]:
    """Weeks of the month starting on Sunday; 0 marks days outside the month."""
    return calendar.Calendar(firstweekday=calendar.SUNDAY).monthdayscalendar(year, month)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` months forward (or back) from ``year``/``month``."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


class DeadlineSelection:
    """Date filter of the deadlines widget.

    Toggling a date selects it; toggling the selected date again clears the
    filter.  Without a selection the view is the next ``limit`` upcoming
    events.
    """

    def __init__(self, limit: int = DEFAULT_UPCOMING_LIMIT) -> None:
        self.limit = limit
        self.selected: date | None = None

    def toggle(self, day: date) -> date | None:
        self.selected = None if self.selected == day else day
        return self.selected

    def clear(self) -> None:
        self.selected = None

    def visible(self, upcoming_events: Sequence[CalendarEvent]) -> list[CalendarEvent]:
        if self.selected is None:
            return list(upcoming_events[: self.limit])
        return [e for e in upcoming_events if e.date == self.selected]
