import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


NICHES = [("gaming", "Gaming"), ("singing", "Singing"), ("dancing", "Dancing"), ("coding", "Coding")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("niche", models.CharField(choices=NICHES, max_length=32)),
                ("venue", models.CharField(max_length=255)),
                ("date", models.DateField()),
                ("time", models.CharField(help_text="Free-form start time, e.g. '10:00 AM'", max_length=64)),
                ("capacity", models.PositiveIntegerField()),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["date", "id"],
                "indexes": [models.Index(fields=["is_active", "date"], name="event_active_date_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("capacity__gte", 1)), name="event_capacity_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Participation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "participant_role",
                    models.CharField(choices=[("student", "Student"), ("faculty", "Faculty")], max_length=16),
                ),
                ("selected_niche", models.CharField(choices=NICHES, max_length=32)),
                (
                    "status",
                    models.CharField(
                        choices=[("registered", "Registered"), ("attended", "Attended"), ("cancelled", "Cancelled")],
                        default="registered",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participations",
                        to="events.event",
                    ),
                ),
                (
                    "participant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["event", "status"], name="part_event_status_idx"),
                    models.Index(fields=["participant", "status"], name="part_participant_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "participant"),
                        name="participation_unique_event_participant",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("status__in", ["registered", "attended", "cancelled"])),
                        name="participation_status_valid",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("participant_role__in", ["student", "faculty"])),
                        name="participation_role_valid",
                    ),
                ],
            },
        ),
    ]
