from datetime import datetime, timedelta, timezone as dt_timezone
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from competitions import moderation, participation
from competitions.exceptions import (
    DeadlinePassed,
    EmptyContent,
    InvalidStatus,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from competitions.models import (
    CompetitionStatus,
    LogLevel,
    Participation,
    ParticipationStatus,
    Submission,
    SubmissionStatus,
)

from .factories import make_competition, make_submission, make_user


class SubmitTest(TestCase):
    def setUp(self):
        self.user = make_user()
        self.competition = make_competition()

    def test_submit_creates_pending_submission(self):
        participation.enter(self.user, self.competition.id)
        submission = moderation.submit(self.user, self.competition.id, "  My logo  ")

        self.assertEqual(submission.status, SubmissionStatus.PENDING)
        self.assertEqual(submission.content, "My logo")
        entry = Participation.objects.get(user=self.user, competition=self.competition)
        self.assertEqual(entry.status, ParticipationStatus.SUBMITTED)
        self.assertEqual(submission.logs.get().message, "Submission received")

    def test_submit_enters_competition_when_needed(self):
        moderation.submit(self.user, self.competition.id, "Entry")
        entry = Participation.objects.get(user=self.user, competition=self.competition)
        self.assertEqual(entry.status, ParticipationStatus.SUBMITTED)
        self.assertTrue(self.user.achievements.get(achievement_id="first_competition").unlocked)

    def test_submit_after_deadline(self):
        """Deadline is checked before content."""
        closed = make_competition(deadline=datetime(2024, 1, 1, 23, 59, 59, tzinfo=dt_timezone.utc))
        for content in ("Valid content", ""):
            with self.assertRaises(DeadlinePassed):
                moderation.submit(self.user, closed.id, content)
        self.assertFalse(Submission.objects.exists())

    def test_submit_blank_content(self):
        for content in ("", "   \n", None):
            with self.assertRaises(EmptyContent):
                moderation.submit(self.user, self.competition.id, content)

    def test_submit_to_archived_competition(self):
        archived = make_competition(status=CompetitionStatus.ARCHIVED)
        with self.assertRaises(ValidationError):
            moderation.submit(self.user, archived.id, "Entry")

    def test_failed_insert_leaves_participation_untouched(self):
        participation.enter(self.user, self.competition.id)
        with mock.patch.object(
            Submission.objects, "create", side_effect=DatabaseError("disk full")
        ):
            with self.assertRaises(DatabaseError):
                moderation.submit(self.user, self.competition.id, "Entry")

        entry = Participation.objects.get(user=self.user, competition=self.competition)
        self.assertEqual(entry.status, ParticipationStatus.PENDING)
        self.assertFalse(Submission.objects.exists())

    def test_failed_insert_does_not_enter_user(self):
        with mock.patch.object(
            Submission.objects, "create", side_effect=DatabaseError("disk full")
        ):
            with self.assertRaises(DatabaseError):
                moderation.submit(self.user, self.competition.id, "Entry")
        self.assertFalse(Participation.objects.filter(user=self.user).exists())

    def test_submit_unknown_competition(self):
        with self.assertRaises(NotFound):
            moderation.submit(self.user, 123456, "Entry")


class SetStatusTest(TestCase):
    def setUp(self):
        self.user = make_user()
        self.competition = make_competition()
        self.submission = moderation.submit(self.user, self.competition.id, "Entry")

    def test_approve(self):
        moderation.set_status(self.submission.id, "approved")
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.status, SubmissionStatus.APPROVED)
        entry = Participation.objects.get(user=self.user, competition=self.competition)
        self.assertEqual(entry.status, ParticipationStatus.REVIEWING)

    def test_reject_is_logged_as_warning(self):
        moderation.set_status(self.submission.id, "rejected")
        log = self.submission.logs.order_by("-id").first()
        self.assertEqual(log.level, LogLevel.WARNING)
        self.assertEqual(log.message, "Submission rejected")

    def test_invalid_status(self):
        for status in ("pending", "accepted", ""):
            with self.assertRaises(InvalidStatus):
                moderation.set_status(self.submission.id, status)

    def test_unknown_submission(self):
        with self.assertRaises(NotFound):
            moderation.set_status(999999, "approved")

    def test_moderated_submission_is_terminal(self):
        moderation.set_status(self.submission.id, "approved")
        with self.assertRaises(InvalidTransition):
            moderation.set_status(self.submission.id, "rejected")
        with self.assertRaises(InvalidTransition):
            moderation.set_status(self.submission.id, "approved")
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.status, SubmissionStatus.APPROVED)


class ListApprovedTest(TestCase):
    def setUp(self):
        self.competition = make_competition(deadline=timezone.now() + timedelta(days=1))
        self.alice = make_user("alice")
        self.bob = make_user("bob", email="")
        self.approved = make_submission(self.competition, self.alice, SubmissionStatus.APPROVED)
        self.no_email = make_submission(self.competition, self.bob, SubmissionStatus.APPROVED)
        make_submission(self.competition, make_user(), SubmissionStatus.REJECTED)
        make_submission(self.competition, make_user(), SubmissionStatus.PENDING)
        make_submission(make_competition(), self.alice, SubmissionStatus.APPROVED)

    def test_only_approved_with_identity(self):
        rows = moderation.list_approved(self.competition.id)
        self.assertEqual([r["id"] for r in rows], [self.approved.id, self.no_email.id])
        self.assertEqual(rows[0]["user_email"], "alice@example.com")
        self.assertEqual(rows[1]["user_email"], "bob")

    def test_unknown_competition(self):
        with self.assertRaises(NotFound):
            moderation.list_approved(999999)
