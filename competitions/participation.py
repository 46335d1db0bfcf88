"""
Participation tracking and saved competitions.
"""

import logging
from typing import Any, Dict, List

from django.db import IntegrityError, transaction

from . import achievements, catalog
from .exceptions import AlreadyParticipating, NotFound, ValidationError
from .models import (
    ACTIVE_PARTICIPATION_STATUSES,
    Competition,
    CompetitionStatus,
    Participation,
    ParticipationStatus,
    SavedCompetition,
)

logger = logging.getLogger(__name__)


def _create_participation(user, competition: Competition, status: str) -> Participation:
    try:
        with transaction.atomic():
            participation = Participation.objects.create(
                user=user,
                competition=competition,
                status=status,
                progress=0,
            )
    except IntegrityError:
        raise AlreadyParticipating()

    logger.info("User %s entered competition %s", user.pk, competition.id)
    achievements.recheck(user)
    return participation


def enter(user, competition_id: Any) -> Participation:
    """
    Enroll a user in a competition.

    Raises:
        NotFound: Unknown competition.
        ValidationError: Competition is not open.
        AlreadyParticipating: The user already entered.
    """
    competition = catalog.get(competition_id)
    if competition.status != CompetitionStatus.ACTIVE:
        raise ValidationError("This competition is not open for entries")
    if Participation.objects.filter(user=user, competition=competition).exists():
        raise AlreadyParticipating()
    return _create_participation(user, competition, ParticipationStatus.PENDING)


def get_or_enter(user, competition: Competition) -> Participation:
    """Return the user's participation, creating it if needed."""
    participation = Participation.objects.filter(user=user, competition=competition).first()
    if participation is None:
        participation = _create_participation(user, competition, ParticipationStatus.PENDING)
    return participation


def update_progress(user, participation_id: Any, progress: Any) -> Participation:
    if isinstance(progress, bool) or not isinstance(progress, int):
        raise ValidationError("Progress must be an integer")
    if not 0 <= progress <= 100:
        raise ValidationError("Progress must be between 0 and 100")

    try:
        participation = Participation.objects.get(id=participation_id, user=user)
    except (Participation.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Participation {participation_id} not found")

    if participation.is_frozen:
        raise ValidationError("Participation is closed; a result has been recorded")

    participation.progress = progress
    participation.save(update_fields=["progress", "updated_at"])
    return participation


def list_active(user) -> List[Participation]:
    return list(
        Participation.objects.filter(user=user, status__in=ACTIVE_PARTICIPATION_STATUSES)
        .select_related("competition")
        .order_by("-created_at")
    )


def list_past(user) -> List[Participation]:
    return list(
        Participation.objects.filter(user=user, status=ParticipationStatus.COMPLETED)
        .select_related("competition")
        .order_by("-created_at")
    )


def toggle_saved(user, competition_id: Any, action: str) -> Dict[str, Any]:
    """Save or unsave a competition for a user."""
    if action == "save":
        competition = catalog.get(competition_id)
        saved, created = SavedCompetition.objects.get_or_create(
            user=user, competition=competition
        )
        if not created:
            return {"action": "already_saved"}
        return {"action": "saved", "data": saved.to_dict()}

    if action == "unsave":
        competition = catalog.get(competition_id)
        rows = list(SavedCompetition.objects.filter(user=user, competition=competition))
        data = [row.to_dict() for row in rows]
        SavedCompetition.objects.filter(pk__in=[row.pk for row in rows]).delete()
        return {"action": "unsaved", "data": data}

    raise ValidationError("Invalid action")
