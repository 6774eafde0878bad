"""Document history table: search, sort and row selection.

The table holds only view state (query, sort, selected ids).  Documents are
passed in on every call, so rows always reflect the current collection and
the compare action resolves ids at the moment it is invoked.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from .aggregations import overall_risk
from .models import Document

logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    NAME = "name"
    DATE = "date"
    RISK = "risk"
    STATUS = "status"


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


def _sort_value(doc: Document, key: SortKey):
    if key == SortKey.NAME:
        return doc.name.lower()
    if key == SortKey.DATE:
        return doc.created.timestamp()
    if key == SortKey.RISK:
        return overall_risk(doc).rank
    return doc.status.value.lower()


def sort_documents(
    documents: Sequence[Document],
    key: SortKey = SortKey.DATE,
    direction: SortDirection = SortDirection.DESCENDING,
) -> list[Document]:
    """Stable sort; equal values keep their collection order in both directions."""
    return sorted(
        documents,
        key=lambda doc: _sort_value(doc, key),
        reverse=direction == SortDirection.DESCENDING,
    )


def search_documents(documents: Sequence[Document], query: str) -> list[Document]:
    """Documents whose name contains ``query``, ignoring case."""
    needle = query.lower()
    return [doc for doc in documents if needle in doc.name.lower()]


class HistoryTable:
    """View state of the document history widget."""

    def __init__(self) -> None:
        self.query = ""
        self.sort_key = SortKey.DATE
        self.direction = SortDirection.DESCENDING
        # dict keeps the order rows were ticked in
        self._selected: dict[str, None] = {}

    @property
    def selected(self) -> list[str]:
        return list(self._selected)

    def rows(self, documents: Sequence[Document]) -> list[Document]:
        return sort_documents(search_documents(documents, self.query), self.sort_key, self.direction)

    def request_sort(self, key: SortKey) -> None:
        """Sort by ``key``; asking again for the ascending key flips it to descending."""
        if self.sort_key == key and self.direction == SortDirection.ASCENDING:
            self.direction = SortDirection.DESCENDING
        else:
            self.direction = SortDirection.ASCENDING
        self.sort_key = key

    def toggle_selection(self, doc_id: str) -> bool:
        """Toggle a row; returns whether it is now selected."""
        if doc_id in self._selected:
            del self._selected[doc_id]
            return False
        self._selected[doc_id] = None
        return True

    def is_selected(self, doc_id: str) -> bool:
        return doc_id in self._selected

    def clear_selection(self) -> None:
        self._selected.clear()

    @property
    def can_compare(self) -> bool:
        return len(self._selected) == 2

    def compare(self, documents: Sequence[Document]) -> tuple[Document, Document] | None:
        """Resolve the two selected ids against ``documents`` and clear the selection.

        Returns ``None`` (leaving the selection alone) unless exactly two ids
        are selected, and ``None`` after clearing when an id no longer
        matches a document.
        """
        if not self.can_compare:
            return None
        first_id, second_id = self.selected
        self.clear_selection()
        by_id = {doc.id: doc for doc in documents}
        first, second = by_id.get(first_id), by_id.get(second_id)
        if first is None or second is None:
            logger.error("Could not find documents %s and %s for comparison", first_id, second_id)
            return None
        return first, second
