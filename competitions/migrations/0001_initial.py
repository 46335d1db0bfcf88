import competitions.models
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Competition",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(help_text="e.g., Logo Design Challenge", max_length=200, verbose_name="Title")),
                ("short_description", models.CharField(max_length=300, verbose_name="Short Description")),
                ("description", models.TextField(verbose_name="Description")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("Design", "Design"),
                            ("Technology", "Technology"),
                            ("Writing", "Writing"),
                            ("Photography", "Photography"),
                            ("Marketing", "Marketing"),
                            ("Travel", "Travel"),
                        ],
                        max_length=20,
                        verbose_name="Category",
                    ),
                ),
                ("type", models.CharField(choices=[("Skill", "Skill"), ("Luck", "Luck")], max_length=10, verbose_name="Type")),
                ("entry_requirements", models.CharField(help_text="Comma-separated, e.g. Free, Email", max_length=200, verbose_name="Entry Requirements")),
                ("prize", models.CharField(max_length=200, verbose_name="Prize")),
                ("deadline", models.DateTimeField(verbose_name="Deadline")),
                ("image_url", models.URLField(blank=True, verbose_name="Image URL")),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("archived", "Archived"), ("completed", "Completed")],
                        default="active",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
            ],
            options={
                "verbose_name": "Competition",
                "verbose_name_plural": "Competitions",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("content", models.TextField(verbose_name="Content")),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")],
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Submitted At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "competition",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="submissions",
                        to="competitions.competition",
                        verbose_name="Competition",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="submissions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Submitter",
                    ),
                ),
            ],
            options={
                "verbose_name": "Submission",
                "verbose_name_plural": "Submissions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["competition", "status"], name="sub_competition_status_idx"),
                    models.Index(fields=["user", "-created_at"], name="sub_user_created_idx"),
                ],
            },
        ),
        migrations.AddField(
            model_name="competition",
            name="winner",
            field=models.OneToOneField(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="won_competition",
                to="competitions.submission",
                verbose_name="Winning Submission",
            ),
        ),
        migrations.AddIndex(
            model_name="competition",
            index=models.Index(fields=["status", "deadline"], name="comp_status_deadline_idx"),
        ),
        migrations.CreateModel(
            name="Participation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("submitted", "Submitted"),
                            ("reviewing", "Reviewing"),
                            ("completed", "Completed"),
                        ],
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "progress",
                    models.PositiveSmallIntegerField(
                        default=0,
                        validators=[django.core.validators.MaxValueValidator(100)],
                        verbose_name="Progress",
                    ),
                ),
                (
                    "result",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("winner", "Winner"),
                            ("runner-up", "Runner-up"),
                            ("participant", "Participant"),
                            ("disqualified", "Disqualified"),
                        ],
                        max_length=20,
                        verbose_name="Result",
                    ),
                ),
                ("position", models.PositiveIntegerField(blank=True, null=True, verbose_name="Position")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "competition",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participations",
                        to="competitions.competition",
                        verbose_name="Competition",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participations",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Participant",
                    ),
                ),
            ],
            options={
                "verbose_name": "Participation",
                "verbose_name_plural": "Participations",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "status"], name="part_user_status_idx"),
                ],
                "unique_together": {("competition", "user")},
            },
        ),
        migrations.CreateModel(
            name="SubmissionLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "level",
                    models.CharField(
                        choices=[("INFO", "Info"), ("WARNING", "Warning"), ("ERROR", "Error")],
                        default="INFO",
                        max_length=10,
                        verbose_name="Level",
                    ),
                ),
                ("message", models.TextField(verbose_name="Message")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                (
                    "submission",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="logs",
                        to="competitions.submission",
                        verbose_name="Submission",
                    ),
                ),
            ],
            options={
                "verbose_name": "Submission Log",
                "verbose_name_plural": "Submission Logs",
                "ordering": ["created_at"],
            },
        ),
        migrations.CreateModel(
            name="UserAchievement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("achievement_id", models.CharField(max_length=50, verbose_name="Achievement")),
                ("progress", models.PositiveIntegerField(default=0, verbose_name="Progress")),
                ("unlocked", models.BooleanField(default=False, verbose_name="Unlocked")),
                ("unlocked_at", models.DateTimeField(blank=True, null=True, verbose_name="Unlocked At")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="achievements",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "User Achievement",
                "verbose_name_plural": "User Achievements",
                "ordering": ["user", "achievement_id"],
                "unique_together": {("user", "achievement_id")},
            },
        ),
        migrations.CreateModel(
            name="SavedCompetition",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Saved At")),
                (
                    "competition",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="saved_by",
                        to="competitions.competition",
                        verbose_name="Competition",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="saved_competitions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Saved Competition",
                "verbose_name_plural": "Saved Competitions",
                "ordering": ["-created_at"],
                "unique_together": {("user", "competition")},
            },
        ),
        migrations.CreateModel(
            name="ApiToken",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "key",
                    models.CharField(
                        default=competitions.models.generate_token_key,
                        max_length=40,
                        unique=True,
                        verbose_name="Key",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="api_tokens",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "API Token",
                "verbose_name_plural": "API Tokens",
            },
        ),
    ]
