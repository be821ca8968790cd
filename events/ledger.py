# events/ledger.py
"""
Participation ledger.

The only writer of Participation rows. Every mutation runs in a database
transaction and is gated so that concurrent requests cannot break the
event capacity, the one-record-per-pair rule, or award points twice:

- register: the event row is locked (SELECT ... FOR UPDATE) for the whole
  check-count-insert sequence, and the insert is backed by a unique
  constraint on (event, participant).
- cancel / mark_attended: conditional UPDATE filtered on the expected
  current status; only the request whose UPDATE hits the row wins.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from core.constants import DEFAULT_AWARD_POINTS, NICHE_CHOICES, ROLE_CHOICES, ROLE_STUDENT
from core.exceptions import (
    AlreadyRegistered,
    CapacityExceeded,
    EventInactive,
    EventNotFound,
    Forbidden,
    InvalidState,
    InvalidTransition,
    ParticipationNotFound,
)
from incentives.accumulator import IncentiveAccumulator
from .models import Event, Participation
from .state_machine import can_transition, log_rejected, log_transition

logger = logging.getLogger('cos.events')


@dataclass(frozen=True)
class AttendanceResult:
    participation: Participation
    points_awarded: int
    balance: Optional[int]


def normalize_award_points(points) -> int:
    """Positive int is kept; anything else falls back to the default award."""
    if isinstance(points, int) and not isinstance(points, bool) and points > 0:
        return points
    return getattr(settings, "INCENTIVE_DEFAULT_AWARD_POINTS", DEFAULT_AWARD_POINTS)


class ParticipationLedger:

    # ---- queries ---------------------------------------------------------

    @staticmethod
    def active_queryset(event_id):
        return Participation.objects.filter(
            event_id=event_id,
            status__in=Participation.ACTIVE_STATUSES,
        )

    @classmethod
    def count_active(cls, event_id) -> int:
        """Number of participations holding a slot (everything but cancelled)."""
        return cls.active_queryset(event_id).count()

    @staticmethod
    def with_participant_counts(events):
        """Annotate an Event queryset with `participant_count` (active only)."""
        return events.annotate(
            participant_count=Count(
                "participations",
                filter=Q(participations__status__in=Participation.ACTIVE_STATUSES),
            )
        )

    @staticmethod
    def for_participant(participant_id, include_cancelled=False):
        qs = (
            Participation.objects
            .filter(participant_id=participant_id)
            .select_related("event")
            .order_by("-updated_at", "-id")
        )
        if not include_cancelled:
            qs = qs.exclude(status=Participation.STATUS_CANCELLED)
        return qs

    @staticmethod
    def attended_for(participant_id):
        return (
            Participation.objects
            .filter(participant_id=participant_id, status=Participation.STATUS_ATTENDED)
            .select_related("event")
            .order_by("-updated_at", "-id")
        )

    @classmethod
    def participants_of(cls, event_id):
        if not Event.objects.filter(pk=event_id).exists():
            raise EventNotFound()
        return (
            cls.active_queryset(event_id)
            .select_related("participant", "participant__student_profile", "participant__faculty_profile")
            .order_by("created_at", "id")
        )

    # ---- register ---------------------------------------------------------

    @classmethod
    def register(cls, event_id, participant_id, participant_role, selected_niche, actor=None):
        """
        Register a participant for an event, or reinstate a cancelled record.

        Returns (participation, created). A reinstated record keeps its id.

        Raises EventNotFound, EventInactive, AlreadyRegistered, CapacityExceeded.
        """
        if participant_role not in dict(ROLE_CHOICES):
            raise Forbidden("Only students and faculty can register for events")
        if selected_niche not in dict(NICHE_CHOICES):
            raise InvalidState(f"Invalid niche: {selected_niche}")

        with transaction.atomic():
            # Per-event serialization point for the capacity check
            try:
                event = (
                    Event.objects
                    .select_for_update()
                    .only("id", "capacity", "is_active")
                    .get(pk=event_id)
                )
            except Event.DoesNotExist:
                raise EventNotFound()

            if not event.is_active:
                raise EventInactive()

            existing = (
                Participation.objects
                .filter(event_id=event.pk, participant_id=participant_id)
                .first()
            )
            if existing is not None and existing.is_active:
                raise AlreadyRegistered()

            active_count = cls.count_active(event.pk)
            if active_count >= event.capacity:
                logger.warning(
                    f"Registration failed: capacity exceeded for event {event.pk}. "
                    f"Active: {active_count}, Capacity: {event.capacity}"
                )
                raise CapacityExceeded()

            if existing is not None:
                return cls._reinstate(existing, selected_niche, actor), False

            try:
                with transaction.atomic():
                    participation = Participation.objects.create(
                        event_id=event.pk,
                        participant_id=participant_id,
                        participant_role=participant_role,
                        selected_niche=selected_niche,
                        status=Participation.STATUS_REGISTERED,
                    )
            except IntegrityError:
                # Lost the race against a concurrent insert for the same pair
                raise AlreadyRegistered()

        log_transition(participation, None, Participation.STATUS_REGISTERED, actor)
        return participation, True

    @staticmethod
    def _reinstate(participation, selected_niche, actor):
        old_status = participation.status
        allowed, reason = can_transition(participation, Participation.STATUS_REGISTERED)
        if not allowed:
            log_rejected(participation, Participation.STATUS_REGISTERED, reason, actor)
            raise AlreadyRegistered()

        updated = Participation.objects.filter(
            pk=participation.pk,
            status=Participation.STATUS_CANCELLED,
        ).update(
            status=Participation.STATUS_REGISTERED,
            selected_niche=selected_niche,
            updated_at=timezone.now(),
        )
        if not updated:
            raise AlreadyRegistered()

        participation.refresh_from_db()
        log_transition(participation, old_status, Participation.STATUS_REGISTERED, actor)
        return participation

    # ---- cancel -----------------------------------------------------------

    @classmethod
    def cancel(cls, event_id, participant_id, actor=None):
        """
        Cancel the participant's registration, freeing one slot.

        A missing or already-cancelled record raises ParticipationNotFound;
        an attended record raises InvalidTransition.
        """
        participation = (
            Participation.objects
            .filter(event_id=event_id, participant_id=participant_id)
            .first()
        )
        if participation is None or participation.status == Participation.STATUS_CANCELLED:
            raise ParticipationNotFound()

        allowed, reason = can_transition(participation, Participation.STATUS_CANCELLED)
        if not allowed:
            log_rejected(participation, Participation.STATUS_CANCELLED, reason, actor)
            raise InvalidTransition(
                "Attended participations cannot be cancelled",
                current_status=participation.status,
                target_status=Participation.STATUS_CANCELLED,
            )

        updated = Participation.objects.filter(
            pk=participation.pk,
            status=Participation.STATUS_REGISTERED,
        ).update(
            status=Participation.STATUS_CANCELLED,
            updated_at=timezone.now(),
        )
        if not updated:
            # Concurrently cancelled or attended since we read it
            raise ParticipationNotFound()

        participation.refresh_from_db()
        log_transition(participation, Participation.STATUS_REGISTERED, Participation.STATUS_CANCELLED, actor)
        return participation

    # ---- attendance -------------------------------------------------------

    @classmethod
    def mark_attended(cls, event_id, participant_id, award_points=None, actor=None) -> AttendanceResult:
        """
        Move a registered participation to attended and award student points.

        The conditional UPDATE is the gate: of several concurrent calls only
        one sees its UPDATE match, and only that call awards. Transition and
        award share one transaction, so a failed award undoes the transition.
        """
        points = normalize_award_points(award_points)

        with transaction.atomic():
            participation = (
                Participation.objects
                .filter(event_id=event_id, participant_id=participant_id)
                .first()
            )
            if participation is None:
                raise ParticipationNotFound()

            updated = Participation.objects.filter(
                pk=participation.pk,
                status=Participation.STATUS_REGISTERED,
            ).update(
                status=Participation.STATUS_ATTENDED,
                updated_at=timezone.now(),
            )
            if not updated:
                participation.refresh_from_db(fields=["status"])
                reason = f"Cannot transition from '{participation.status}' to 'attended'"
                log_rejected(participation, Participation.STATUS_ATTENDED, reason, actor)
                raise InvalidTransition(
                    current_status=participation.status,
                    target_status=Participation.STATUS_ATTENDED,
                )

            participation.refresh_from_db()
            log_transition(participation, Participation.STATUS_REGISTERED, Participation.STATUS_ATTENDED, actor)

            if participation.participant_role != ROLE_STUDENT:
                return AttendanceResult(participation=participation, points_awarded=0, balance=None)

            balance = IncentiveAccumulator.award(participant_id, points, participation=participation)

        return AttendanceResult(participation=participation, points_awarded=points, balance=balance)
