import logging

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from core.constants import LEADERBOARD_MAX_SIZE, MAX_AWARD_POINTS, ROLE_STUDENT
from core.exceptions import Conflict, Forbidden
from users.directory import get_participant, is_student
from .models import IncentiveAward, IncentiveBalance

logger = logging.getLogger("cos.incentives")


class IncentiveAccumulator:
    """
    Owns every student's point balance.

    Balances only ever grow, through `award`. Each award is an independent
    database-side increment, so concurrent awards to the same student from
    different events never lose an update.
    """

    @classmethod
    def award(cls, participant_id, amount, participation=None, reason=IncentiveAward.REASON_ATTENDANCE):
        """
        Add `amount` points to a student's balance and return the new total.

        `amount` must already be normalized to a positive int (at most
        MAX_AWARD_POINTS) by the caller.
        When `participation` is given, the award is recorded against it, its
        registration-time `participant_role` decides eligibility, and a second
        award for the same participation raises Conflict. Without one, the
        participant directory decides.
        """
        if (
            isinstance(amount, bool)
            or not isinstance(amount, int)
            or not 0 < amount <= MAX_AWARD_POINTS
        ):
            raise ValueError(
                f"Award amount must be an integer between 1 and {MAX_AWARD_POINTS}, got {amount!r}"
            )

        if participation is not None:
            if participation.participant_role != ROLE_STUDENT:
                raise Forbidden("Incentive points are only for students")
            participant_id = participation.participant_id
        else:
            participant = get_participant(participant_id)
            if not is_student(participant):
                raise Forbidden("Incentive points are only for students")
            participant_id = participant.id

        try:
            with transaction.atomic():
                IncentiveAward.objects.create(
                    participant_id=participant_id,
                    participation=participation,
                    amount=amount,
                    reason=reason,
                )
                cls._increment(participant_id, amount)
                new_balance = (
                    IncentiveBalance.objects
                    .values_list("points", flat=True)
                    .get(participant_id=participant_id)
                )
        except IntegrityError:
            logger.warning(
                f"Duplicate award rejected: participant={participant_id}, "
                f"participation={getattr(participation, 'pk', None)}"
            )
            raise Conflict("Points already awarded for this participation")

        logger.info(f"Awarded {amount} points: participant={participant_id}, balance={new_balance}")
        return new_balance

    @staticmethod
    def _increment(participant_id, amount):
        updated = IncentiveBalance.objects.filter(participant_id=participant_id).update(
            points=F("points") + amount,
            updated_at=timezone.now(),
        )
        if updated:
            return

        # First award for this student
        try:
            with transaction.atomic():
                IncentiveBalance.objects.create(participant_id=participant_id, points=amount)
        except IntegrityError:
            # A concurrent first award created the row in the meantime
            IncentiveBalance.objects.filter(participant_id=participant_id).update(
                points=F("points") + amount,
                updated_at=timezone.now(),
            )

    @staticmethod
    def balance(participant_id) -> int:
        """Current balance; 0 for a student who was never awarded."""
        points = (
            IncentiveBalance.objects
            .filter(participant_id=participant_id)
            .values_list("points", flat=True)
            .first()
        )
        return points or 0

    @staticmethod
    def top_n(n=10):
        """
        Snapshot of the n highest balances as (participant_id, points) pairs.
        Ties are ordered by participant id ascending.
        """
        n = max(1, min(int(n), LEADERBOARD_MAX_SIZE))
        return list(
            IncentiveBalance.objects
            .order_by("-points", "participant_id")
            .values_list("participant_id", "points")[:n]
        )

    @classmethod
    def leaderboard(cls, n=10):
        """`top_n` enriched with the student's name and roll number."""
        n = max(1, min(int(n), LEADERBOARD_MAX_SIZE))
        rows = (
            IncentiveBalance.objects
            .select_related("participant", "participant__student_profile")
            .order_by("-points", "participant_id")[:n]
        )

        board = []
        for rank, row in enumerate(rows, start=1):
            user = row.participant
            profile = getattr(user, "student_profile", None)
            board.append({
                "rank": rank,
                "participant_id": user.id,
                "name": user.display_name,
                "roll_number": profile.roll_number if profile else None,
                "incentive_points": row.points,
            })
        return board
