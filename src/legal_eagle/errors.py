"""Exception hierarchy for the dashboard.

None of these are fatal: persistence errors are recovered by falling back to
seed data, gateway and validation errors are shown to the user inline.
"""

from __future__ import annotations


class LegalEagleError(Exception):
    """Base class for all dashboard errors."""


class PersistenceError(LegalEagleError):
    """Stored state is malformed or could not be read or written."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key


class GatewayError(LegalEagleError):
    """The AI service failed or returned a response that does not match the schema."""


class AnalysisError(GatewayError):
    """Document analysis failed."""


class ComparisonError(GatewayError):
    """Document comparison failed."""


class ValidationError(LegalEagleError):
    """Required user input is missing or invalid."""


class NotFoundError(LegalEagleError, KeyError):
    """A command referenced an id that is not in its collection."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind} {item_id!r} not found")
        self.kind = kind
        self.item_id = item_id

    def __str__(self) -> str:
        return str(self.args[0])
