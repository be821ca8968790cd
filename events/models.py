# events/models.py
from django.conf import settings
from django.db import models

from core.constants import NICHE_CHOICES, ROLE_CHOICES, ROLE_FACULTY, ROLE_STUDENT


class Event(models.Model):
    """
    Event catalog entry.
    The participation ledger only reads `capacity` and `is_active`.
    """
    NICHE_CHOICES = NICHE_CHOICES

    name = models.CharField(max_length=255)
    description = models.TextField()
    niche = models.CharField(max_length=32, choices=NICHE_CHOICES)
    venue = models.CharField(max_length=255)
    date = models.DateField()
    time = models.CharField(max_length=64, help_text="Free-form start time, e.g. '10:00 AM'")
    capacity = models.PositiveIntegerField()
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        ordering = ["date", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1),
                name="event_capacity_positive",
            ),
        ]
        indexes = [
            models.Index(
                fields=['is_active', 'date'],
                name='event_active_date_idx',
            ),
        ]


class Participation(models.Model):
    STATUS_REGISTERED = "registered"
    STATUS_ATTENDED = "attended"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_REGISTERED, "Registered"),
        (STATUS_ATTENDED, "Attended"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    # Statuses that hold a capacity slot
    ACTIVE_STATUSES = (STATUS_REGISTERED, STATUS_ATTENDED)

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="participations")
    participant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="participations",
    )
    # Snapshot of the participant's role at registration time
    participant_role = models.CharField(max_length=16, choices=ROLE_CHOICES)
    selected_niche = models.CharField(max_length=32, choices=NICHE_CHOICES)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_REGISTERED)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            # One record per (event, participant), ever; cancelled rows are reused
            models.UniqueConstraint(
                fields=["event", "participant"],
                name="participation_unique_event_participant",
            ),
            models.CheckConstraint(
                condition=models.Q(status__in=["registered", "attended", "cancelled"]),
                name="participation_status_valid",
            ),
            models.CheckConstraint(
                condition=models.Q(participant_role__in=[ROLE_STUDENT, ROLE_FACULTY]),
                name="participation_role_valid",
            ),
        ]
        indexes = [
            # Active count per event
            models.Index(
                fields=['event', 'status'],
                name='part_event_status_idx',
            ),
            # "My participations"
            models.Index(
                fields=['participant', 'status'],
                name='part_participant_status_idx',
            ),
        ]

    def __str__(self):
        return f"{self.participant} @ {self.event} ({self.status})"

    @property
    def is_active(self):
        return self.status in self.ACTIVE_STATUSES
