from rest_framework import serializers

from .directory import Faculty, Student


class ParticipantSerializer(serializers.Serializer):
    """Renders a directory variant (Student / Faculty)."""

    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if isinstance(instance, Student):
            data["roll_number"] = instance.roll_number
        elif isinstance(instance, Faculty):
            data["employee_id"] = instance.employee_id
            data["department"] = instance.department
        return data
