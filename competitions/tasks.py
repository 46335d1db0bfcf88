import logging
from typing import Any

from django.contrib.auth import get_user_model
from django_q.tasks import async_task

from . import achievements

logger = logging.getLogger(__name__)


def recheck_achievements(user_id: int) -> dict[str, Any]:
    """
    Recompute a user's achievements.

    This is the task that gets queued by Django-Q2 after a winner is
    selected.

    Args:
        user_id: ID of the user to recheck.

    Returns:
        Dict with the unlocked achievement ids.
    """
    User = get_user_model()
    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        return {"success": False, "error": f"User {user_id} not found"}

    records = achievements.recheck(user)
    return {
        "success": True,
        "user_id": user_id,
        "unlocked": [r.achievement_id for r in records if r.unlocked],
    }


def queue_achievement_recheck(user_id: int) -> str:
    """Queue a recheck on the task cluster and return the task id."""
    task_id = async_task(
        "competitions.tasks.recheck_achievements",
        user_id,
        task_name=f"recheck-achievements-{user_id}",
    )
    logger.debug("Queued achievement recheck for user %s (%s)", user_id, task_id)
    return task_id
