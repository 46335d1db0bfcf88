"""
Winner selection for competitions past their deadline.
"""

import logging
from typing import Any, Dict, List

from django.db import transaction
from django.utils import timezone

from . import catalog, moderation
from .exceptions import AlreadyDecided, NotFound, ValidationError
from .models import (
    Competition,
    CompetitionStatus,
    Participation,
    ParticipationResult,
    ParticipationStatus,
    Submission,
    SubmissionStatus,
)
from .tasks import queue_achievement_recheck

logger = logging.getLogger(__name__)


def list_eligible_competitions() -> List[Competition]:
    """
    Competitions past their deadline with no winner yet.

    A completed competition stays decided even if its winning submission
    was deleted afterwards.
    """
    return list(
        Competition.objects.filter(deadline__lt=timezone.now(), winner__isnull=True)
        .exclude(status=CompetitionStatus.COMPLETED)
        .order_by("-deadline")
    )


def list_candidates(competition_id: Any) -> List[Dict[str, Any]]:
    return moderation.list_approved(competition_id)


def _record_results(competition: Competition, winning: Submission) -> None:
    """
    Close every participation of a decided competition.

    The winner gets position 1. Users whose submissions were all rejected
    are disqualified and everyone else is recorded as a participant.
    """
    winner_id = winning.user_id  # type: ignore[attr-defined]
    Participation.objects.get_or_create(
        user_id=winner_id,
        competition=competition,
        defaults={"status": ParticipationStatus.COMPLETED},
    )

    statuses_by_user: Dict[int, set] = {}
    for user_id, status in Submission.objects.filter(competition=competition).values_list(
        "user_id", "status"
    ):
        statuses_by_user.setdefault(user_id, set()).add(status)

    for p in Participation.objects.filter(competition=competition):
        p.status = ParticipationStatus.COMPLETED
        if p.user_id == winner_id:  # type: ignore[attr-defined]
            p.result = ParticipationResult.WINNER
            p.position = 1
        elif statuses_by_user.get(p.user_id) == {SubmissionStatus.REJECTED}:  # type: ignore[attr-defined]
            p.result = ParticipationResult.DISQUALIFIED
            p.position = None
        else:
            p.result = ParticipationResult.PARTICIPANT
            p.position = None
        p.save(update_fields=["status", "result", "position", "updated_at"])


def select_winner(competition_id: Any, submission_id: Any) -> Competition:
    """
    Mark a submission as the winner and close the competition.

    The competition row is only written while it has no winner, so a
    second call can never replace the first decision.

    Raises:
        NotFound: Unknown competition, or the submission does not belong to it.
        AlreadyDecided: A winner was already selected, or the competition
            is completed.
        ValidationError: Submission not approved, or deadline not reached.
    """
    with transaction.atomic():
        competition = catalog.get(competition_id)
        try:
            submission = Submission.objects.get(id=submission_id, competition=competition)
        except (Submission.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Submission {submission_id} not found")

        if (
            competition.winner_id is not None  # type: ignore[attr-defined]
            or competition.status == CompetitionStatus.COMPLETED
        ):
            raise AlreadyDecided()
        if submission.status != SubmissionStatus.APPROVED:
            raise ValidationError("Only approved submissions can be selected as winner")
        if not competition.is_past_deadline():
            raise ValidationError("Competition deadline has not passed yet")

        updated = (
            Competition.objects.filter(pk=competition.pk, winner__isnull=True)
            .exclude(status=CompetitionStatus.COMPLETED)
            .update(
                winner=submission,
                status=CompetitionStatus.COMPLETED,
                updated_at=timezone.now(),
            )
        )
        if not updated:
            raise AlreadyDecided()

        _record_results(competition, submission)
        moderation.add_submission_log(submission, "Selected as competition winner")

    logger.info(
        "Submission %s selected as winner of competition %s", submission.id, competition.id
    )
    queue_achievement_recheck(submission.user_id)  # type: ignore[attr-defined]
    competition.refresh_from_db()
    return competition
