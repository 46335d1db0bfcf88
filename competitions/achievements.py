"""
Achievement engine.

The catalog is fixed in code; per-user progress lives in UserAchievement.
`recheck` is called after any event that changes a user's participation
or win count.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from django.utils import timezone

from .models import Participation, ParticipationResult, UserAchievement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Achievement:
    """A catalog entry."""

    id: str
    title: str
    description: str
    max_progress: int
    category: str
    counter: str  # "participations" or "wins"


CATALOG: List[Achievement] = [
    Achievement(
        "first_competition",
        "First Competition",
        "Participated in your first competition",
        1,
        "participation",
        "participations",
    ),
    Achievement(
        "competition_enthusiast",
        "Competition Enthusiast",
        "Participated in 5 competitions",
        5,
        "participation",
        "participations",
    ),
    Achievement(
        "competition_master",
        "Competition Master",
        "Participated in 10 competitions",
        10,
        "participation",
        "participations",
    ),
    Achievement(
        "first_win",
        "First Win",
        "Won your first competition",
        1,
        "skill",
        "wins",
    ),
]

CATALOG_BY_ID: Dict[str, Achievement] = {a.id: a for a in CATALOG}

COUNTERS: Dict[str, Callable[..., int]] = {
    "participations": lambda user: Participation.objects.filter(user=user).count(),
    "wins": lambda user: Participation.objects.filter(
        user=user, result=ParticipationResult.WINNER
    ).count(),
}


def recheck(user) -> List[UserAchievement]:
    """
    Recompute every catalog achievement for a user.

    Records are created on first evaluation. Existing records only move
    forward: a locked record is updated when it unlocks or when its
    progress grows, and unlocked records are left alone.

    Returns:
        The user's achievement records after the recheck.
    """
    counts = {name: count(user) for name, count in COUNTERS.items()}
    existing = {
        ua.achievement_id: ua for ua in UserAchievement.objects.filter(user=user)
    }
    now = timezone.now()
    records = []

    for achievement in CATALOG:
        n = counts[achievement.counter]
        progress = min(n, achievement.max_progress)
        unlocked = n >= achievement.max_progress
        record = existing.get(achievement.id)

        if record is None:
            # A concurrent recheck may have inserted the row since it was read
            record, created = UserAchievement.objects.get_or_create(
                user=user,
                achievement_id=achievement.id,
                defaults={
                    "progress": progress,
                    "unlocked": unlocked,
                    "unlocked_at": now if unlocked else None,
                },
            )
            if created:
                if unlocked:
                    logger.info("User %s unlocked %s", user.pk, achievement.id)
                records.append(record)
                continue

        if not record.unlocked:
            if unlocked:
                record.progress = max(progress, record.progress)
                record.unlocked = True
                record.unlocked_at = now
                record.save(update_fields=["progress", "unlocked", "unlocked_at", "updated_at"])
                logger.info("User %s unlocked %s", user.pk, achievement.id)
            elif progress > record.progress:
                record.progress = progress
                record.save(update_fields=["progress", "updated_at"])

        records.append(record)

    return records


def describe(record: UserAchievement) -> Dict[str, object]:
    """Join a progress record with its catalog metadata."""
    achievement = CATALOG_BY_ID.get(record.achievement_id)
    return {
        "id": record.pk,
        "achievement_id": record.achievement_id,
        "title": achievement.title if achievement else record.achievement_id,
        "description": achievement.description if achievement else "",
        "category": achievement.category if achievement else "",
        "maxProgress": achievement.max_progress if achievement else None,
        "progress": record.progress,
        "unlocked": record.unlocked,
        "unlocked_at": record.unlocked_at,
    }
