"""Exception hierarchy shared by the roster core and its collaborators."""
from __future__ import annotations


class RosterError(Exception):
    """Base class for roster scheduling errors."""

    code = "roster_error"


class ValidationError(RosterError, ValueError):
    """A batch request or selection was rejected before any outbound call."""

    code = "validation_error"


class EmptyCounterpartSet(ValidationError):
    code = "empty_counterpart_set"

    def __init__(self, message: str = "Select at least one shift or staff member to add") -> None:
        super().__init__(message)


class InvalidRecurrence(ValidationError):
    code = "invalid_recurrence"


class InvalidSelection(ValidationError):
    """The chosen row or date cannot receive new assignments."""

    code = "invalid_selection"


class UnknownAssignmentError(RosterError, LookupError):
    code = "unknown_assignment"


class CollaboratorError(RosterError):
    """Persistence or transport failure reported by a gateway."""

    code = "collaborator_error"


__all__ = [
    "RosterError",
    "ValidationError",
    "EmptyCounterpartSet",
    "InvalidRecurrence",
    "InvalidSelection",
    "UnknownAssignmentError",
    "CollaboratorError",
]
