from typing import Any, Dict, List

from django.db import DatabaseError

from . import achievements, participation
from .exceptions import AggregationError, Unauthorized
from .models import ParticipationResult, SavedCompetition, UserAchievement


def get_dashboard(user) -> Dict[str, Any]:
    """
    Aggregate saved competitions, participations and achievements for a user.

    Any failed read fails the whole dashboard.
    """
    if user is None or not user.is_authenticated:
        raise Unauthorized()

    try:
        saved = list(
            SavedCompetition.objects.filter(user=user)
            .select_related("competition")
            .order_by("-created_at")
        )
        active = participation.list_active(user)
        past = participation.list_past(user)
        progress_rows = list(UserAchievement.objects.filter(user=user))
    except DatabaseError as e:
        raise AggregationError(f"Error fetching user data: {e}") from e

    active_entries: List[Dict[str, Any]] = [
        {
            **p.competition.to_dict(),
            "participation_id": p.id,
            "status": p.status,
            "progress": p.progress,
        }
        for p in active
    ]
    past_entries: List[Dict[str, Any]] = [
        {
            **p.competition.to_dict(),
            "participation_id": p.id,
            "result": p.result or None,
            "position": p.position,
        }
        for p in past
    ]

    return {
        "savedCompetitions": [s.competition.to_dict() for s in saved],
        "activeParticipations": active_entries,
        "pastParticipations": past_entries,
        "achievements": [achievements.describe(row) for row in progress_rows],
        "stats": {
            "competitionsJoined": len(active) + len(past),
            "competitionsWon": sum(1 for p in past if p.result == ParticipationResult.WINNER),
            "savedCompetitions": len(saved),
        },
    }
