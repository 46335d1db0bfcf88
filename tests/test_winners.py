from datetime import datetime, timedelta, timezone as dt_timezone
from unittest import mock

from django.test import TestCase
from django.utils import timezone

from competitions import catalog, winners
from competitions.exceptions import AlreadyDecided, NotFound, ValidationError
from competitions.models import (
    CompetitionStatus,
    Participation,
    ParticipationResult,
    ParticipationStatus,
    SubmissionStatus,
    UserAchievement,
)

from .factories import make_competition, make_submission, make_user

PAST_DEADLINE = datetime(2024, 1, 1, 23, 59, 59, tzinfo=dt_timezone.utc)


def enroll(user, competition, status=ParticipationStatus.REVIEWING):
    return Participation.objects.create(user=user, competition=competition, status=status)


class EligibleCompetitionsTest(TestCase):
    def test_scenario_past_deadline_with_approved_submission(self):
        """Decided competitions drop out of the eligible list."""
        competition = make_competition(deadline=PAST_DEADLINE)
        winner = make_user()
        enroll(winner, competition)
        s1 = make_submission(competition, winner, SubmissionStatus.APPROVED)

        self.assertIn(competition, winners.list_eligible_competitions())

        winners.select_winner(competition.id, s1.id)

        self.assertNotIn(competition, winners.list_eligible_competitions())
        self.assertEqual(catalog.get(competition.id).status, CompetitionStatus.COMPLETED)

    def test_open_competitions_are_not_eligible(self):
        make_competition(deadline=timezone.now() + timedelta(days=1))
        self.assertEqual(winners.list_eligible_competitions(), [])

    def test_ordered_by_latest_deadline(self):
        older = make_competition(deadline=PAST_DEADLINE - timedelta(days=10))
        newer = make_competition(deadline=PAST_DEADLINE)
        self.assertEqual(winners.list_eligible_competitions(), [newer, older])

    def test_list_candidates_returns_approved(self):
        competition = make_competition(deadline=PAST_DEADLINE)
        approved = make_submission(competition, make_user(), SubmissionStatus.APPROVED)
        make_submission(competition, make_user(), SubmissionStatus.PENDING)
        self.assertEqual([c["id"] for c in winners.list_candidates(competition.id)], [approved.id])


class SelectWinnerTest(TestCase):
    def setUp(self):
        self.competition = make_competition(deadline=PAST_DEADLINE)
        self.winner = make_user("winner")
        self.runner = make_user("runner")
        self.rejected = make_user("rejected")
        self.idle = make_user("idle")
        for user in (self.winner, self.runner, self.rejected, self.idle):
            enroll(user, self.competition)
        self.s1 = make_submission(self.competition, self.winner, SubmissionStatus.APPROVED)
        self.s2 = make_submission(self.competition, self.runner, SubmissionStatus.APPROVED)
        make_submission(self.competition, self.rejected, SubmissionStatus.REJECTED)

    def result_of(self, user):
        return Participation.objects.get(user=user, competition=self.competition)

    def test_select_winner_closes_competition(self):
        competition = winners.select_winner(self.competition.id, self.s1.id)
        self.assertEqual(competition.winner_id, self.s1.id)
        self.assertEqual(competition.status, CompetitionStatus.COMPLETED)
        self.assertEqual(self.s1.logs.last().message, "Selected as competition winner")

    def test_results_recorded_for_all_participants(self):
        winners.select_winner(self.competition.id, self.s1.id)

        winner = self.result_of(self.winner)
        self.assertEqual(winner.result, ParticipationResult.WINNER)
        self.assertEqual(winner.position, 1)
        self.assertEqual(self.result_of(self.runner).result, ParticipationResult.PARTICIPANT)
        self.assertEqual(self.result_of(self.rejected).result, ParticipationResult.DISQUALIFIED)
        self.assertEqual(self.result_of(self.idle).result, ParticipationResult.PARTICIPANT)
        self.assertFalse(
            Participation.objects.filter(competition=self.competition)
            .exclude(status=ParticipationStatus.COMPLETED)
            .exists()
        )

    def test_second_selection_fails_and_keeps_first_winner(self):
        winners.select_winner(self.competition.id, self.s1.id)
        with self.assertRaises(AlreadyDecided):
            winners.select_winner(self.competition.id, self.s2.id)
        with self.assertRaises(AlreadyDecided):
            winners.select_winner(self.competition.id, self.s1.id)
        self.assertEqual(catalog.get(self.competition.id).winner_id, self.s1.id)

    def test_deleted_winning_submission_keeps_competition_decided(self):
        winners.select_winner(self.competition.id, self.s1.id)
        self.s1.delete()

        competition = catalog.get(self.competition.id)
        self.assertIsNone(competition.winner_id)
        self.assertEqual(competition.status, CompetitionStatus.COMPLETED)
        self.assertNotIn(competition, winners.list_eligible_competitions())

        with self.assertRaises(AlreadyDecided):
            winners.select_winner(self.competition.id, self.s2.id)
        self.assertEqual(self.result_of(self.runner).result, ParticipationResult.PARTICIPANT)

    def test_unknown_ids(self):
        with self.assertRaises(NotFound):
            winners.select_winner(999999, self.s1.id)
        with self.assertRaises(NotFound):
            winners.select_winner(self.competition.id, 999999)

    def test_submission_from_another_competition(self):
        other = make_competition(deadline=PAST_DEADLINE)
        foreign = make_submission(other, self.winner, SubmissionStatus.APPROVED)
        with self.assertRaises(NotFound):
            winners.select_winner(self.competition.id, foreign.id)

    def test_unapproved_submission_cannot_win(self):
        pending = make_submission(self.competition, self.idle, SubmissionStatus.PENDING)
        with self.assertRaises(ValidationError):
            winners.select_winner(self.competition.id, pending.id)
        self.assertIsNone(catalog.get(self.competition.id).winner_id)

    def test_open_competition_cannot_be_decided(self):
        open_competition = make_competition(deadline=timezone.now() + timedelta(days=3))
        submission = make_submission(open_competition, self.winner, SubmissionStatus.APPROVED)
        with self.assertRaises(ValidationError):
            winners.select_winner(open_competition.id, submission.id)

    def test_winner_without_participation_gets_one(self):
        outsider = make_user("outsider")
        submission = make_submission(self.competition, outsider, SubmissionStatus.APPROVED)
        winners.select_winner(self.competition.id, submission.id)
        self.assertEqual(self.result_of(outsider).result, ParticipationResult.WINNER)

    def test_winner_achievement_recheck_runs(self):
        winners.select_winner(self.competition.id, self.s1.id)
        first_win = UserAchievement.objects.get(user=self.winner, achievement_id="first_win")
        self.assertTrue(first_win.unlocked)

    @mock.patch("competitions.winners.queue_achievement_recheck")
    def test_recheck_queued_for_winner(self, queue):
        winners.select_winner(self.competition.id, self.s1.id)
        queue.assert_called_once_with(self.winner.id)
