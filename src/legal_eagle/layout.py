"""Dashboard widget registry and the user's widget layout."""

from __future__ import annotations

from collections.abc import Sequence

from .errors import ValidationError

# Registry order is the order widgets are offered in the "add widget" panel.
WIDGETS: dict[str, str] = {
    "risk-overview": "Risk Overview",
    "doc-status": "Document Status",
    "upcoming-deadlines": "Upcoming Deadlines",
    "counterparty-overview": "Counterparty Overview",
    "team-activity-feed": "Team Activity Feed",
    "clause-frequency": "Clause Frequency",
    "doc-history": "Document History",
}

DEFAULT_LAYOUT: tuple[str, ...] = (
    "risk-overview",
    "upcoming-deadlines",
    "doc-history",
    "doc-status",
    "counterparty-overview",
    "team-activity-feed",
)


def add_widget(layout: Sequence[str], widget_id: str) -> list[str]:
    """Append ``widget_id`` unless it is already placed."""
    if widget_id not in WIDGETS:
        raise ValidationError(f"Unknown widget: {widget_id}")
    if widget_id in layout:
        return list(layout)
    return [*layout, widget_id]


def remove_widget(layout: Sequence[str], widget_id: str) -> list[str]:
    return [w for w in layout if w != widget_id]


def available_widgets(layout: Sequence[str]) -> list[tuple[str, str]]:
    """Registry widgets not yet on the dashboard, as ``(id, name)`` pairs."""
    return [(wid, name) for wid, name in WIDGETS.items() if wid not in layout]


def normalize_layout(raw: Sequence) -> list[str]:
    """Drop non-string entries and repeats from a stored layout, keeping order."""
    seen: list[str] = []
    for item in raw:
        if isinstance(item, str) and item not in seen:
            seen.append(item)
    return seen
