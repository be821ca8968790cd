import threading
from unittest import skipUnless

from django.db import connection, connections
from django.test import TransactionTestCase

from core.constants import NICHE_CODING, ROLE_STUDENT
from core.exceptions import AlreadyRegistered, CapacityExceeded, InvalidTransition
from events.ledger import ParticipationLedger
from events.models import Participation
from incentives.accumulator import IncentiveAccumulator
from incentives.models import IncentiveAward
from .helpers import make_event, make_student


def run_concurrently(calls):
    """
    Start every call at the same moment on its own thread/connection.
    Returns one ("ok", value) or ("error", exception) per call, in order.
    Any exception is recorded, so a database error shows up as a failure
    of the assertions on the error type.
    """
    barrier = threading.Barrier(len(calls))
    results = [None] * len(calls)

    def worker(index, fn):
        try:
            barrier.wait()
            results[index] = ("ok", fn())
        except Exception as exc:
            results[index] = ("error", exc)
        finally:
            connections.close_all()

    threads = [threading.Thread(target=worker, args=(i, fn)) for i, fn in enumerate(calls)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return results


def threads_share_test_database():
    """SQLite only shares the test database across threads when it is file-backed."""
    if connection.vendor != "sqlite":
        return True
    name = str(connection.settings_dict.get("TEST", {}).get("NAME") or "")
    return bool(name) and name != ":memory:" and "mode=memory" not in name


@skipUnless(threads_share_test_database(), "threads need a file-backed SQLite test database")
class ConcurrentLedgerTests(TransactionTestCase):

    def test_capacity_is_never_oversold(self):
        event = make_event(capacity=2)
        students = [make_student(name) for name in ("a", "b", "c")]

        results = run_concurrently([
            (lambda s=s: ParticipationLedger.register(event.id, s.id, ROLE_STUDENT, NICHE_CODING))
            for s in students
        ])

        ok = [r for r in results if r[0] == "ok"]
        errors = [r[1] for r in results if r[0] == "error"]
        self.assertEqual(len(ok), 2)
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], CapacityExceeded)
        self.assertEqual(ParticipationLedger.count_active(event.id), 2)

    def test_losers_get_capacity_exceeded_not_database_errors(self):
        event = make_event(capacity=2)
        students = [make_student(f"rush{i}") for i in range(6)]

        results = run_concurrently([
            (lambda s=s: ParticipationLedger.register(event.id, s.id, ROLE_STUDENT, NICHE_CODING))
            for s in students
        ])

        errors = [r[1] for r in results if r[0] == "error"]
        self.assertEqual(sum(1 for r in results if r[0] == "ok"), 2)
        self.assertEqual(len(errors), 4)
        for exc in errors:
            self.assertIsInstance(exc, CapacityExceeded, msg=repr(exc))
        self.assertEqual(ParticipationLedger.count_active(event.id), 2)

    def test_saturating_a_larger_event(self):
        event = make_event(capacity=5)
        students = [make_student(f"s{i}") for i in range(12)]

        results = run_concurrently([
            (lambda s=s: ParticipationLedger.register(event.id, s.id, ROLE_STUDENT, NICHE_CODING))
            for s in students
        ])

        self.assertEqual(sum(1 for r in results if r[0] == "ok"), 5)
        self.assertTrue(all(isinstance(r[1], CapacityExceeded) for r in results if r[0] == "error"))
        self.assertEqual(ParticipationLedger.count_active(event.id), 5)

    def test_duplicate_registrations_create_one_record(self):
        event = make_event(capacity=10)
        student = make_student("dup")

        results = run_concurrently([
            lambda: ParticipationLedger.register(event.id, student.id, ROLE_STUDENT, NICHE_CODING)
            for _ in range(5)
        ])

        self.assertEqual(sum(1 for r in results if r[0] == "ok"), 1)
        self.assertTrue(all(isinstance(r[1], AlreadyRegistered) for r in results if r[0] == "error"))
        self.assertEqual(Participation.objects.filter(event=event, participant=student).count(), 1)

    def test_duplicate_attendance_awards_once(self):
        event = make_event()
        student = make_student("att")
        ParticipationLedger.register(event.id, student.id, ROLE_STUDENT, NICHE_CODING)

        results = run_concurrently([
            lambda: ParticipationLedger.mark_attended(event.id, student.id, award_points=20)
            for _ in range(4)
        ])

        self.assertEqual(sum(1 for r in results if r[0] == "ok"), 1)
        self.assertTrue(all(isinstance(r[1], InvalidTransition) for r in results if r[0] == "error"))
        self.assertEqual(IncentiveAccumulator.balance(student.id), 20)
        self.assertEqual(IncentiveAward.objects.filter(participant=student).count(), 1)

    def test_concurrent_awards_from_different_events_all_count(self):
        student = make_student("busy")
        events = [make_event(name=f"E{i}") for i in range(6)]
        for event in events:
            ParticipationLedger.register(event.id, student.id, ROLE_STUDENT, NICHE_CODING)

        results = run_concurrently([
            (lambda e=e: ParticipationLedger.mark_attended(e.id, student.id, award_points=7))
            for e in events
        ])

        self.assertTrue(all(r[0] == "ok" for r in results))
        self.assertEqual(IncentiveAccumulator.balance(student.id), 42)
