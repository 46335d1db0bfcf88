"""
Django Admin configuration for competitions.

Provides admin interfaces for:
- Competition management (create, edit, archive)
- Submission moderation (approve / reject, select winner)
- Participation, achievement and token inspection
"""

from django.contrib import admin, messages
from django.utils.html import format_html

from . import catalog, moderation, winners
from .exceptions import CompetitionError
from .forms import CompetitionForm
from .models import (
    ApiToken,
    Competition,
    Participation,
    SavedCompetition,
    Submission,
    SubmissionLog,
    SubmissionStatus,
    UserAchievement,
)


class ParticipationInline(admin.TabularInline):
    """Read-only view of who entered a competition."""

    model = Participation
    extra = 0
    fields = ["user", "status", "progress", "result", "position"]
    readonly_fields = ["user", "status", "progress", "result", "position"]
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


def _run_each(modeladmin, request, queryset, action, success_message):
    """Apply a service call per object, reporting domain errors as messages."""
    done = 0
    for obj in queryset:
        try:
            action(obj)
            done += 1
        except CompetitionError as e:
            modeladmin.message_user(request, f"{obj}: {e.message}", messages.ERROR)
    if done:
        modeladmin.message_user(request, success_message.format(count=done), messages.SUCCESS)


@admin.register(Competition)
class CompetitionAdmin(admin.ModelAdmin):
    """Admin interface for competition management."""

    form = CompetitionForm

    list_display = [
        "title",
        "category",
        "type",
        "status",
        "deadline",
        "participant_count",
        "submission_count",
        "created_at",
    ]
    list_filter = ["status", "category", "type"]
    search_fields = ["title", "short_description", "description"]
    readonly_fields = ["status", "winner", "created_at", "updated_at"]
    inlines = [ParticipationInline]
    actions = ["archive_selected"]

    fieldsets = (
        (
            "General Information",
            {"fields": ("title", "short_description", "description", "category", "type")},
        ),
        ("Entry", {"fields": ("entry_requirements", "prize", "deadline", "image_url")}),
        ("Status", {"fields": ("status", "winner")}),
        (
            "Timestamps",
            {"fields": ("created_at", "updated_at"), "classes": ("collapse",)},
        ),
    )

    @admin.display(description="Participants")
    def participant_count(self, obj):
        return obj.participations.count()

    @admin.display(description="Submissions")
    def submission_count(self, obj):
        return obj.submissions.count()

    @admin.action(description="Archive selected competitions")
    def archive_selected(self, request, queryset):
        _run_each(
            self,
            request,
            queryset,
            lambda c: catalog.archive(c.id),
            "{count} competition(s) archived.",
        )


@admin.register(Participation)
class ParticipationAdmin(admin.ModelAdmin):
    """Admin interface for participations."""

    list_display = ["user", "competition", "status", "progress", "result", "position"]
    list_filter = ["status", "result", "competition"]
    search_fields = ["user__username", "user__email", "competition__title"]
    readonly_fields = ["created_at", "updated_at"]


class SubmissionLogInline(admin.TabularInline):
    """Inline viewer for submission logs."""

    model = SubmissionLog
    extra = 0
    readonly_fields = ["level", "message", "created_at"]
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    """
    Admin interface for submission moderation.

    Moderators can:
    - Approve or reject pending submissions in bulk
    - Select one approved submission as its competition's winner
    """

    list_display = ["id", "competition", "user", "status_badge", "created_at"]
    list_filter = ["competition", "status"]
    search_fields = ["user__username", "user__email", "content"]
    readonly_fields = ["competition", "user", "content", "status", "created_at", "updated_at"]
    inlines = [SubmissionLogInline]
    actions = ["approve_selected", "reject_selected", "select_as_winner"]

    @admin.display(description="Status")
    def status_badge(self, obj):
        colors = {
            "pending": "gray",
            "approved": "green",
            "rejected": "red",
        }
        color = colors.get(obj.status, "gray")
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.get_status_display(),
        )

    @admin.action(description="Approve selected submissions")
    def approve_selected(self, request, queryset):
        _run_each(
            self,
            request,
            queryset,
            lambda s: moderation.set_status(s.id, SubmissionStatus.APPROVED),
            "{count} submission(s) approved.",
        )

    @admin.action(description="Reject selected submissions")
    def reject_selected(self, request, queryset):
        _run_each(
            self,
            request,
            queryset,
            lambda s: moderation.set_status(s.id, SubmissionStatus.REJECTED),
            "{count} submission(s) rejected.",
        )

    @admin.action(description="Select as competition winner")
    def select_as_winner(self, request, queryset):
        if queryset.count() != 1:
            self.message_user(request, "Select exactly one submission.", messages.ERROR)
            return
        _run_each(
            self,
            request,
            queryset,
            lambda s: winners.select_winner(s.competition_id, s.id),
            "Winner selected.",
        )


@admin.register(SubmissionLog)
class SubmissionLogAdmin(admin.ModelAdmin):
    """Admin interface for viewing submission logs."""

    list_display = ["submission", "level", "short_message", "created_at"]
    list_filter = ["level", "submission__competition"]
    search_fields = ["message", "submission__user__username"]
    readonly_fields = ["submission", "level", "message", "created_at"]

    @admin.display(description="Message")
    def short_message(self, obj):
        return obj.message[:80] + "..." if len(obj.message) > 80 else obj.message

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(UserAchievement)
class UserAchievementAdmin(admin.ModelAdmin):
    list_display = ["user", "achievement_id", "progress", "unlocked", "unlocked_at"]
    list_filter = ["achievement_id", "unlocked"]
    search_fields = ["user__username"]
    readonly_fields = ["user", "achievement_id", "progress", "unlocked", "unlocked_at"]


@admin.register(SavedCompetition)
class SavedCompetitionAdmin(admin.ModelAdmin):
    list_display = ["user", "competition", "created_at"]
    search_fields = ["user__username", "competition__title"]


@admin.register(ApiToken)
class ApiTokenAdmin(admin.ModelAdmin):
    """Issue and revoke API bearer tokens."""

    list_display = ["user", "key", "created_at"]
    search_fields = ["user__username", "user__email"]
    readonly_fields = ["key", "created_at"]
