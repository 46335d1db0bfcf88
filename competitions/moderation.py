"""
Submission intake and admin moderation.

State machine: pending -> approved | rejected. Both outcomes are terminal.
"""

import logging
from typing import Any, Dict, List

from django.db import transaction

from . import catalog, participation
from .exceptions import (
    DeadlinePassed,
    EmptyContent,
    InvalidStatus,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from .models import (
    CompetitionStatus,
    LogLevel,
    Participation,
    ParticipationStatus,
    Submission,
    SubmissionLog,
    SubmissionStatus,
)

logger = logging.getLogger(__name__)

MODERATION_STATUSES = (SubmissionStatus.APPROVED, SubmissionStatus.REJECTED)


def add_submission_log(
    submission: Submission, message: str, level: str = LogLevel.INFO
) -> None:
    """Helper to add a log entry to a submission."""
    SubmissionLog.objects.create(submission=submission, level=level, message=message)


def submit(user, competition_id: Any, content: str) -> Submission:
    """
    Create a pending submission for a competition.

    The user is entered into the competition first if needed, and a
    pending participation moves to submitted.

    Raises:
        NotFound: Unknown competition.
        DeadlinePassed: The deadline is in the past.
        ValidationError: The competition is archived or completed.
        EmptyContent: Content is blank.
    """
    competition = catalog.get(competition_id)
    if competition.is_past_deadline():
        raise DeadlinePassed()
    if competition.status != CompetitionStatus.ACTIVE:
        raise ValidationError("This competition is not accepting submissions")
    if not isinstance(content, str) or not content.strip():
        raise EmptyContent()

    with transaction.atomic():
        entry = participation.get_or_enter(user, competition)
        if entry.status == ParticipationStatus.PENDING:
            entry.status = ParticipationStatus.SUBMITTED
            entry.save(update_fields=["status", "updated_at"])

        submission = Submission.objects.create(
            competition=competition,
            user=user,
            content=content.strip(),
            status=SubmissionStatus.PENDING,
        )
        add_submission_log(submission, "Submission received")

    logger.info("Submission %s received for competition %s", submission.id, competition.id)
    return submission


def set_status(submission_id: Any, status: str) -> Submission:
    """
    Approve or reject a pending submission.

    Raises:
        InvalidStatus: Status is not "approved" or "rejected".
        NotFound: Unknown submission.
        InvalidTransition: The submission was already moderated.
    """
    if status not in MODERATION_STATUSES:
        raise InvalidStatus()

    try:
        submission = Submission.objects.get(id=submission_id)
    except (Submission.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Submission {submission_id} not found")

    if submission.status != SubmissionStatus.PENDING:
        raise InvalidTransition(f"Submission has already been {submission.status}")

    submission.status = status
    submission.save(update_fields=["status", "updated_at"])

    Participation.objects.filter(
        user_id=submission.user_id,  # type: ignore[attr-defined]
        competition_id=submission.competition_id,  # type: ignore[attr-defined]
        status=ParticipationStatus.SUBMITTED,
    ).update(status=ParticipationStatus.REVIEWING)

    level = LogLevel.INFO if status == SubmissionStatus.APPROVED else LogLevel.WARNING
    add_submission_log(submission, f"Submission {status}", level)
    logger.info("Submission %s %s", submission.id, status)
    return submission


def list_approved(competition_id: Any) -> List[Dict[str, Any]]:
    """Approved submissions of a competition with the submitter's identity."""
    competition = catalog.get(competition_id)
    submissions = (
        Submission.objects.filter(competition=competition, status=SubmissionStatus.APPROVED)
        .select_related("user")
        .order_by("created_at", "id")
    )
    return [
        {
            "id": s.id,
            "user_id": s.user_id,  # type: ignore[attr-defined]
            "content": s.content,
            "created_at": s.created_at,
            "user_email": s.user_display,
        }
        for s in submissions
    ]
