from django.db import models
from django.conf import settings


class IncentiveBalance(models.Model):
    """
    Running point balance of a student, keyed by participant.
    Only the incentive accumulator writes here, and only by increments.
    """
    participant = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="incentive_balance",
    )
    points = models.IntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points__gte=0),
                name="incentive_balance_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["-points", "participant"], name="incentive_leaderboard_idx"),
        ]

    def __str__(self):
        return f"{self.participant}: {self.points} pts"


class IncentiveAward(models.Model):
    """
    Immutable audit trail of points granted.
    At most one award per participation ("Why did I get points?").
    """
    REASON_ATTENDANCE = "event.attended"

    participant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="incentive_awards",
    )
    participation = models.OneToOneField(
        "events.Participation",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="incentive_award",
    )
    amount = models.PositiveIntegerField()
    reason = models.CharField(max_length=64, default=REASON_ATTENDANCE)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="incentive_award_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["participant", "-created_at"], name="incentive_award_part_idx"),
        ]

    def __str__(self):
        return f"{self.participant} (+{self.amount}): {self.reason}"
