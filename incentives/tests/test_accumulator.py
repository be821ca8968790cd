from unittest import mock

from django.db.models import QuerySet
from django.test import TestCase

from core.constants import MAX_AWARD_POINTS, NICHE_CODING
from core.exceptions import Conflict, Forbidden, ParticipantNotFound
from events.ledger import ParticipationLedger
from events.tests.helpers import make_event, make_faculty, make_student
from incentives.accumulator import IncentiveAccumulator
from incentives.models import IncentiveAward, IncentiveBalance


class AwardTests(TestCase):
    def setUp(self):
        self.student = make_student("stud")
        self.prof = make_faculty("prof")

    def test_first_award_creates_balance(self):
        self.assertEqual(IncentiveAccumulator.balance(self.student.id), 0)

        new_balance = IncentiveAccumulator.award(self.student.id, 10)

        self.assertEqual(new_balance, 10)
        self.assertEqual(IncentiveBalance.objects.get(participant=self.student).points, 10)

    def test_awards_accumulate(self):
        IncentiveAccumulator.award(self.student.id, 10)
        IncentiveAccumulator.award(self.student.id, 25)

        self.assertEqual(IncentiveAccumulator.balance(self.student.id), 35)
        self.assertEqual(IncentiveAward.objects.filter(participant=self.student).count(), 2)

    def test_rejects_non_positive_amounts(self):
        for amount in (0, -1, True, 2.5, "10"):
            with self.assertRaises(ValueError, msg=repr(amount)):
                IncentiveAccumulator.award(self.student.id, amount)
        self.assertFalse(IncentiveBalance.objects.exists())

    def test_rejects_amounts_above_the_cap(self):
        with self.assertRaises(ValueError):
            IncentiveAccumulator.award(self.student.id, MAX_AWARD_POINTS + 1)
        self.assertEqual(IncentiveAccumulator.balance(self.student.id), 0)

    def test_faculty_never_accrue_points(self):
        with self.assertRaises(Forbidden):
            IncentiveAccumulator.award(self.prof.id, 10)
        self.assertFalse(IncentiveBalance.objects.filter(participant=self.prof).exists())

    def test_unknown_participant(self):
        with self.assertRaises(ParticipantNotFound):
            IncentiveAccumulator.award(999999, 10)

    def test_one_award_per_participation(self):
        event = make_event()
        participation, _ = ParticipationLedger.register(event.id, self.student.id, self.student.role, NICHE_CODING)

        IncentiveAccumulator.award(self.student.id, 10, participation=participation)
        with self.assertRaises(Conflict):
            IncentiveAccumulator.award(self.student.id, 10, participation=participation)

        self.assertEqual(IncentiveAccumulator.balance(self.student.id), 10)

    def test_balance_row_created_concurrently(self):
        """A racing first award that already created the row is folded in."""
        IncentiveBalance.objects.create(participant=self.student, points=4)
        real_update = QuerySet.update
        calls = []

        def first_update_misses(qs, **kwargs):
            calls.append(kwargs)
            if len(calls) == 1:
                return 0
            return real_update(qs, **kwargs)

        with mock.patch.object(QuerySet, "update", autospec=True, side_effect=first_update_misses):
            IncentiveAccumulator._increment(self.student.id, 6)

        self.assertEqual(len(calls), 2)
        self.assertEqual(IncentiveAccumulator.balance(self.student.id), 10)


class LeaderboardTests(TestCase):
    def setUp(self):
        self.ann = make_student("ann", roll_number="CS-001", first_name="Ann", last_name="Lee")
        self.ben = make_student("ben", roll_number="CS-002")
        self.cat = make_student("cat", roll_number="CS-003")
        self.idle = make_student("idle")

        IncentiveAccumulator.award(self.ann.id, 30)
        IncentiveAccumulator.award(self.ben.id, 50)
        IncentiveAccumulator.award(self.cat.id, 30)

    def test_top_n_orders_by_points_then_id(self):
        self.assertEqual(
            IncentiveAccumulator.top_n(10),
            [(self.ben.id, 50), (self.ann.id, 30), (self.cat.id, 30)],
        )

    def test_top_n_is_bounded(self):
        self.assertEqual(IncentiveAccumulator.top_n(1), [(self.ben.id, 50)])
        self.assertEqual(len(IncentiveAccumulator.top_n(0)), 1)

    def test_students_without_points_are_not_listed(self):
        ids = [pid for pid, _ in IncentiveAccumulator.top_n(100)]
        self.assertNotIn(self.idle.id, ids)

    def test_leaderboard_rows(self):
        board = IncentiveAccumulator.leaderboard(2)

        self.assertEqual(len(board), 2)
        self.assertEqual(board[0], {
            "rank": 1,
            "participant_id": self.ben.id,
            "name": "ben",
            "roll_number": "CS-002",
            "incentive_points": 50,
        })
        self.assertEqual(board[1]["name"], "Ann Lee")
        self.assertEqual(board[1]["rank"], 2)
