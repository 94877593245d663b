"""Error types raised by the order and table stores."""

from __future__ import annotations


class TablesideError(Exception):
    """Base class for every error a dashboard is expected to display."""


class NotFoundError(TablesideError, LookupError):
    """A referenced table, order, order item or menu item does not exist."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class ValidationError(TablesideError, ValueError):
    """Input rejected before any state was touched."""


class InvalidTransitionError(ValidationError):
    """Status change that the order lifecycle does not allow."""


class PersistenceError(TablesideError):
    """Local store could not be read or written."""
