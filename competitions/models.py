"""
Competition models for the Competition Hub.

This module defines the core data models:
- Competition: The main competition entity
- Participation: A user's enrollment in one competition
- Submission: Free-text entries awaiting moderation
- SubmissionLog: Audit trail of a submission's lifecycle
- UserAchievement: Per-user progress on the fixed achievement catalog
- SavedCompetition: Bookmarked competitions
- ApiToken: Bearer tokens for the JSON API
"""

import secrets

from django.conf import settings
from django.core.validators import MaxValueValidator
from django.db import models
from django.utils import timezone
from typing import Any, Dict, List


class Category(models.TextChoices):
    """Competition categories."""

    DESIGN = "Design", "Design"
    TECHNOLOGY = "Technology", "Technology"
    WRITING = "Writing", "Writing"
    PHOTOGRAPHY = "Photography", "Photography"
    MARKETING = "Marketing", "Marketing"
    TRAVEL = "Travel", "Travel"


class CompetitionType(models.TextChoices):
    """How a competition picks its winner."""

    SKILL = "Skill", "Skill"
    LUCK = "Luck", "Luck"


class CompetitionStatus(models.TextChoices):
    """Competition lifecycle status."""

    ACTIVE = "active", "Active"
    ARCHIVED = "archived", "Archived"
    COMPLETED = "completed", "Completed"


class ParticipationStatus(models.TextChoices):
    """Participation lifecycle status."""

    PENDING = "pending", "Pending"
    SUBMITTED = "submitted", "Submitted"
    REVIEWING = "reviewing", "Reviewing"
    COMPLETED = "completed", "Completed"


class ParticipationResult(models.TextChoices):
    """Outcome recorded once a competition is decided."""

    WINNER = "winner", "Winner"
    RUNNER_UP = "runner-up", "Runner-up"
    PARTICIPANT = "participant", "Participant"
    DISQUALIFIED = "disqualified", "Disqualified"


class SubmissionStatus(models.TextChoices):
    """Submission moderation status."""

    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class LogLevel(models.TextChoices):
    """Log severity levels."""

    INFO = "INFO", "Info"
    WARNING = "WARNING", "Warning"
    ERROR = "ERROR", "Error"


ACTIVE_PARTICIPATION_STATUSES = [
    ParticipationStatus.PENDING,
    ParticipationStatus.SUBMITTED,
    ParticipationStatus.REVIEWING,
]


class Competition(models.Model):
    """
    A competition created by an admin.

    Stores the public listing data, the deadline, and the winning
    submission once one has been selected.
    """

    id: int

    title = models.CharField(
        max_length=200,
        verbose_name="Title",
        help_text="e.g., Logo Design Challenge",
    )
    short_description = models.CharField(
        max_length=300, verbose_name="Short Description"
    )
    description = models.TextField(verbose_name="Description")
    category = models.CharField(
        max_length=20, choices=Category.choices, verbose_name="Category"
    )
    type = models.CharField(
        max_length=10, choices=CompetitionType.choices, verbose_name="Type"
    )
    entry_requirements = models.CharField(
        max_length=200,
        verbose_name="Entry Requirements",
        help_text="Comma-separated, e.g. Free, Email",
    )
    prize = models.CharField(max_length=200, verbose_name="Prize")
    deadline = models.DateTimeField(verbose_name="Deadline")
    image_url = models.URLField(blank=True, verbose_name="Image URL")

    # Status
    status = models.CharField(
        max_length=20,
        choices=CompetitionStatus.choices,
        default=CompetitionStatus.ACTIVE,
        verbose_name="Status",
    )
    winner = models.OneToOneField(
        "Submission",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="won_competition",
        verbose_name="Winning Submission",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Updated At")

    class Meta:
        verbose_name = "Competition"
        verbose_name_plural = "Competitions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "deadline"], name="comp_status_deadline_idx"),
        ]

    def __str__(self):
        return self.title

    def requirement_tokens(self) -> List[str]:
        """Split entry requirements into trimmed tokens."""
        return [t.strip() for t in self.entry_requirements.split(",") if t.strip()]

    def is_past_deadline(self) -> bool:
        return self.deadline < timezone.now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "short_description": self.short_description,
            "description": self.description,
            "category": self.category,
            "type": self.type,
            "entry_requirements": self.entry_requirements,
            "prize": self.prize,
            "deadline": self.deadline,
            "image_url": self.image_url or None,
            "status": self.status,
            "winner_id": self.winner_id,  # type: ignore[attr-defined]
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class Participation(models.Model):
    """
    A user's enrollment in a competition.

    Progress is set by the entry-authoring flow; result and position are
    recorded when a winner is selected, after which the row is frozen.
    """

    id: int
    competition = models.ForeignKey(
        Competition,
        on_delete=models.CASCADE,
        related_name="participations",
        verbose_name="Competition",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="participations",
        verbose_name="Participant",
    )
    status = models.CharField(
        max_length=20,
        choices=ParticipationStatus.choices,
        default=ParticipationStatus.PENDING,
        verbose_name="Status",
    )
    progress = models.PositiveSmallIntegerField(
        default=0, validators=[MaxValueValidator(100)], verbose_name="Progress"
    )
    result = models.CharField(
        max_length=20,
        choices=ParticipationResult.choices,
        blank=True,
        verbose_name="Result",
    )
    position = models.PositiveIntegerField(null=True, blank=True, verbose_name="Position")

    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Updated At")

    class Meta:
        verbose_name = "Participation"
        verbose_name_plural = "Participations"
        ordering = ["-created_at"]
        unique_together = ["competition", "user"]
        indexes = [
            models.Index(fields=["user", "status"], name="part_user_status_idx"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.competition}"

    @property
    def is_frozen(self) -> bool:
        """A recorded result locks the participation."""
        return bool(self.result)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,  # type: ignore[attr-defined]
            "competition_id": self.competition_id,  # type: ignore[attr-defined]
            "status": self.status,
            "progress": self.progress,
            "result": self.result or None,
            "position": self.position,
            "created_at": self.created_at,
        }


class Submission(models.Model):
    """
    Free-text content a participant submits toward a competition.

    Only moderation changes the status after creation.
    """

    id: int  # Explicitly typed for static analysis
    competition = models.ForeignKey(
        Competition,
        on_delete=models.CASCADE,
        related_name="submissions",
        verbose_name="Competition",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="submissions",
        verbose_name="Submitter",
    )
    content = models.TextField(verbose_name="Content")

    # Moderation status
    status = models.CharField(
        max_length=20,
        choices=SubmissionStatus.choices,
        default=SubmissionStatus.PENDING,
        verbose_name="Status",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Submitted At")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Updated At")

    class Meta:
        verbose_name = "Submission"
        verbose_name_plural = "Submissions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["competition", "status"], name="sub_competition_status_idx"),
            models.Index(fields=["user", "-created_at"], name="sub_user_created_idx"),
        ]

    def __str__(self):
        return f"Submission #{self.id} by {self.user}"

    @property
    def user_display(self) -> str:
        """Submitter identity shown to moderators."""
        return self.user.email or self.user.get_username() or "Unknown"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "competition_id": self.competition_id,  # type: ignore[attr-defined]
            "user_id": self.user_id,  # type: ignore[attr-defined]
            "content": self.content,
            "status": self.status,
            "created_at": self.created_at,
        }


class SubmissionLog(models.Model):
    """
    Audit entries for a submission's moderation lifecycle.

    Records receipt, approval or rejection, and winner selection.
    """

    submission = models.ForeignKey(
        Submission,
        on_delete=models.CASCADE,
        related_name="logs",
        verbose_name="Submission",
    )
    level = models.CharField(
        max_length=10,
        choices=LogLevel.choices,
        default=LogLevel.INFO,
        verbose_name="Level",
    )
    message = models.TextField(verbose_name="Message")
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")

    class Meta:
        verbose_name = "Submission Log"
        verbose_name_plural = "Submission Logs"
        ordering = ["created_at"]

    def __str__(self):
        return f"[{self.level}] {self.message[:50]}"


class UserAchievement(models.Model):
    """
    Per-user progress on one entry of the achievement catalog.

    Progress only grows and `unlocked` never reverts.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="achievements",
        verbose_name="User",
    )
    achievement_id = models.CharField(max_length=50, verbose_name="Achievement")
    progress = models.PositiveIntegerField(default=0, verbose_name="Progress")
    unlocked = models.BooleanField(default=False, verbose_name="Unlocked")
    unlocked_at = models.DateTimeField(null=True, blank=True, verbose_name="Unlocked At")

    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Updated At")

    class Meta:
        verbose_name = "User Achievement"
        verbose_name_plural = "User Achievements"
        unique_together = ["user", "achievement_id"]
        ordering = ["user", "achievement_id"]

    def __str__(self):
        return f"{self.user}: {self.achievement_id} ({self.progress})"


class SavedCompetition(models.Model):
    """A competition bookmarked by a user."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="saved_competitions",
        verbose_name="User",
    )
    competition = models.ForeignKey(
        Competition,
        on_delete=models.CASCADE,
        related_name="saved_by",
        verbose_name="Competition",
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Saved At")

    class Meta:
        verbose_name = "Saved Competition"
        verbose_name_plural = "Saved Competitions"
        unique_together = ["user", "competition"]
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.user} saved {self.competition}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.pk,
            "user_id": self.user_id,  # type: ignore[attr-defined]
            "competition_id": self.competition_id,  # type: ignore[attr-defined]
            "created_at": self.created_at,
        }


def generate_token_key() -> str:
    return secrets.token_hex(20)


class ApiToken(models.Model):
    """Bearer token authenticating API calls as a user."""

    key = models.CharField(
        max_length=40, unique=True, default=generate_token_key, verbose_name="Key"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="api_tokens",
        verbose_name="User",
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")

    class Meta:
        verbose_name = "API Token"
        verbose_name_plural = "API Tokens"

    def __str__(self):
        return f"Token for {self.user}"
