from rest_framework import serializers

from core.constants import MAX_AWARD_POINTS, NICHE_CHOICES
from .models import Event, Participation
from .sanitizers import (
    sanitize_title,
    sanitize_description,
    validate_capacity,
    ValidationError as SanitizationError,
)


# -----------------------------------------
# EVENT SERIALIZER
# -----------------------------------------
class EventSerializer(serializers.ModelSerializer):
    participant_count = serializers.SerializerMethodField()
    my_status = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "name",
            "description",
            "niche",
            "venue",
            "date",
            "time",
            "capacity",
            "is_active",
            "participant_count",
            "my_status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "participant_count",
            "my_status",
            "created_at",
            "updated_at",
        ]

    def get_participant_count(self, obj) -> int:
        # Use annotated value if available (from optimized query), else fallback
        if hasattr(obj, "participant_count"):
            return obj.participant_count or 0
        return obj.participations.filter(status__in=Participation.ACTIVE_STATUSES).count()

    def get_my_status(self, obj):
        """Caller's own participation status for this event, if any."""
        statuses = self.context.get("my_statuses")
        if statuses is not None:
            return statuses.get(obj.id)

        request = self.context.get("request")
        if request and request.user.is_authenticated:
            return (
                obj.participations
                .filter(participant=request.user)
                .values_list("status", flat=True)
                .first()
            )
        return None

    def validate_name(self, value):
        value = sanitize_title(value)
        if not value:
            raise serializers.ValidationError("Name cannot be blank.")
        return value

    def validate_venue(self, value):
        value = sanitize_title(value)
        if not value:
            raise serializers.ValidationError("Venue cannot be blank.")
        return value

    def validate_description(self, value):
        value = sanitize_description(value)
        if not value:
            raise serializers.ValidationError("Description cannot be blank.")
        return value

    def validate_capacity(self, value):
        """Validate capacity is within bounds."""
        try:
            return validate_capacity(value)
        except SanitizationError as e:
            raise serializers.ValidationError(str(e))


# -----------------------------------------
# PARTICIPATION SERIALIZERS
# -----------------------------------------
class ParticipationSerializer(serializers.ModelSerializer):
    event_name = serializers.CharField(source="event.name", read_only=True)

    class Meta:
        model = Participation
        fields = [
            "id",
            "event",
            "event_name",
            "participant",
            "participant_role",
            "selected_niche",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ParticipateSerializer(serializers.Serializer):
    """Body of POST /events/<id>/participate/"""
    selected_niche = serializers.ChoiceField(choices=NICHE_CHOICES)


class AttendSerializer(serializers.Serializer):
    """
    Body of POST /events/<id>/attend/<participant_id>/
    Non-positive or missing points fall back to the default award.
    """
    points = serializers.IntegerField(required=False, allow_null=True, max_value=MAX_AWARD_POINTS)


class EventParticipantSerializer(serializers.ModelSerializer):
    """Row of the faculty-facing participant list."""
    participant_id = serializers.IntegerField(source="participant.id", read_only=True)
    name = serializers.CharField(source="participant.display_name", read_only=True)
    email = serializers.EmailField(source="participant.email", read_only=True)
    roll_number = serializers.SerializerMethodField()

    class Meta:
        model = Participation
        fields = [
            "participant_id",
            "name",
            "email",
            "roll_number",
            "participant_role",
            "status",
            "selected_niche",
        ]
        read_only_fields = fields

    def get_roll_number(self, obj):
        profile = getattr(obj.participant, "student_profile", None)
        return profile.roll_number if profile else None
