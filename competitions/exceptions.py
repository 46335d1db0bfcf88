"""
Errors raised by the competition services.

Every service failure is a CompetitionError; the API layer renders them
as JSON error bodies.
"""

from typing import Any, Optional


class CompetitionError(Exception):
    """Base class for all domain errors."""

    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[dict[str, Any]] = None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)


class ValidationError(CompetitionError):
    default_message = "Invalid input"


class EmptyContent(ValidationError):
    default_message = "Submission content cannot be empty"


class InvalidStatus(ValidationError):
    default_message = "Status must be either 'approved' or 'rejected'"


class InvalidTransition(ValidationError):
    default_message = "Transition not allowed"


class DeadlinePassed(ValidationError):
    default_message = "The deadline for this competition has passed"


class Unauthorized(CompetitionError):
    default_message = "Unauthorized"


class NotFound(CompetitionError):
    default_message = "Not found"


class AlreadyExists(CompetitionError):
    default_message = "Already exists"


class AlreadyParticipating(AlreadyExists):
    default_message = "Already participating in this competition"


class AlreadyDecided(AlreadyExists):
    default_message = "A winner has already been selected for this competition"


class AggregationError(CompetitionError):
    default_message = "Error fetching user data"
